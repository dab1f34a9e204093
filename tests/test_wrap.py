import pytest

from enmime.stringutil.wrap import wrap


def test_wrap_empty():
    assert wrap(80, "") == b""


def test_wrap_identity_short():
    assert wrap(15, "short string") == b"short string"


def test_wrap_identity_long():
    text = "a" * 46
    assert wrap(5, text) == text.encode()


def test_wrap_joins_arguments():
    assert wrap(80, "Subject: ", "hello") == b"Subject: hello"


@pytest.mark.parametrize(
    "data, want",
    [
        ("one two three", "one\r\n two\r\n three"),
        ("a bb ccc dddd eeeee ffffff", "a bb\r\n ccc\r\n dddd\r\n eeeee\r\n ffffff"),
        ("aaaaaa bbbbb cccc ddd ee f", "aaaaaa\r\n bbbbb\r\n cccc\r\n ddd\r\n ee f"),
        ("1 3 5 1 3 5 1 3 5", "1 3 5\r\n 1 3 5\r\n 1 3 5"),
        ("55555 55555 55555", "55555\r\n 55555\r\n 55555"),
        ("666666 666666 666666", "666666\r\n 666666\r\n 666666"),
        ("7777777 7777777 7777777", "7777777\r\n 7777777\r\n 7777777"),
    ],
)
def test_wrap(data, want):
    assert wrap(6, data) == want.encode()