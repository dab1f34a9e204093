"""Breadth- and depth-first searches over a tree of MIME parts."""

from __future__ import annotations

from collections import deque
from typing import Callable, Iterator, List, Optional, Protocol


class _PartNode(Protocol):
    first_child: Optional["_PartNode"]
    next_sibling: Optional["_PartNode"]


PartMatcher = Callable[[_PartNode], bool]


def _children(part: _PartNode) -> Iterator[_PartNode]:
    child = part.first_child
    while child is not None:
        yield child
        child = child.next_sibling


def _breadth_first(root: _PartNode) -> Iterator[_PartNode]:
    queue = deque([root])
    while queue:
        part = queue.popleft()
        yield part
        queue.extend(_children(part))


def _depth_first(root: _PartNode) -> Iterator[_PartNode]:
    stack = [root]
    while stack:
        part = stack.pop()
        yield part
        stack.extend(reversed(list(_children(part))))


def breadth_match_first(part: _PartNode, matcher: PartMatcher) -> Optional[_PartNode]:
    """Return the first part, breadth first, for which matcher is true, or None."""
    return next((p for p in _breadth_first(part) if matcher(p)), None)


def breadth_match_all(part: _PartNode, matcher: PartMatcher) -> List[_PartNode]:
    """Return every part, in breadth-first order, for which matcher is true."""
    return [p for p in _breadth_first(part) if matcher(p)]


def depth_match_first(part: _PartNode, matcher: PartMatcher) -> Optional[_PartNode]:
    """Return the first part, depth first, for which matcher is true, or None."""
    return next((p for p in _depth_first(part) if matcher(p)), None)


def depth_match_all(part: _PartNode, matcher: PartMatcher) -> List[_PartNode]:
    """Return every part, in depth-first order, for which matcher is true."""
    return [p for p in _depth_first(part) if matcher(p)]