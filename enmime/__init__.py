"""Building blocks for MIME e-mail: part-tree search, coding helpers and text protocol I/O."""

__version__ = "0.1.0"