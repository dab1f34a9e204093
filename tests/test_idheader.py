import pytest

from enmime.coding.idheader import from_id_header, to_id_header


@pytest.mark.parametrize(
    "data, want",
    [
        ("", ""),
        ("<>", ""),
        ("<%🤯>", "%🤯"),
        ("<joe@example.com>", "joe@example.com"),
        ("<foo%25bar>", "foo%bar"),
        ("foo+bar", "foo bar"),
        ("<foo%3fbar+baz>", "foo?bar baz"),
        ("<foo%zz>", "foo%zz"),
    ],
)
def test_from_id_header(data, want):
    assert from_id_header(data) == want


@pytest.mark.parametrize(
    "data, want",
    [
        ("", "<>"),
        ("joe@example.com", "<joe@example.com>"),
        ("foo%bar", "<foo%25bar>"),
        ("foo bar", "<foo+bar>"),
    ],
)
def test_to_id_header(data, want):
    assert to_id_header(data) == want


@pytest.mark.parametrize("value", ["a b?c", "x%y@example.com", "plain", "ünï"])
def test_round_trip(value):
    assert from_id_header(to_id_header(value)) == value