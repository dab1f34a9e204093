import pytest

from enmime.coding.headerext import decode_ext_header, rfc2047_decode


@pytest.mark.parametrize("value", ["Test", "Testing One two 3 4"])
def test_plain_passthrough(value):
    assert decode_ext_header(value) == value


@pytest.mark.parametrize(
    "value",
    [
        "=?US\nASCII?Q?Keith_Moore?=",
        "=?US-ASCII?\r?Keith_Moore?=",
        "=?US-ASCII?Q?Keith_Moore?!",
    ],
    ids=["newline", "carriage-return", "invalid-termination"],
)
def test_failure_passthrough(value):
    assert decode_ext_header(value) == value


@pytest.mark.parametrize(
    "value, want",
    [
        ("=?US-ASCII?B?SGVsbG8gV29ybGQ=?=", "Hello World"),
        ("(=?US-ASCII?B?SGVsbG8gV29ybGQ=?=)", "(Hello World)"),
        ("(Prefix =?US-ASCII?B?SGVsbG8gV29ybGQ=?=)", "(Prefix Hello World)"),
    ],
)
def test_ascii_base64(value, want):
    assert decode_ext_header(value) == want


@pytest.mark.parametrize(
    "value, want",
    [
        ("=?US-ASCII?Q?Keith_Moore?=", "Keith Moore"),
        ("(=?US-ASCII?Q?Keith_Moore?=)", "(Keith Moore)"),
        ("(Keith =?US-ASCII?Q?Moore?=)", "(Keith Moore)"),
    ],
)
def test_ascii_q(value, want):
    assert decode_ext_header(value) == want


@pytest.mark.parametrize(
    "value, want",
    [
        ("(=?ISO-8859-1?Q?a?=)", "(a)"),
        ("(=?ISO-8859-1?Q?a?= b)", "(a b)"),
        ("(=?ISO-8859-1?Q?a?= =?ISO-8859-1?Q?b?=)", "(ab)"),
        ("(=?ISO-8859-1?Q?a?=  =?ISO-8859-1?Q?b?=)", "(ab)"),
        ("(=?ISO-8859-1?Q?a?=\r\n  =?ISO-8859-1?Q?b?=)", "(ab)"),
        ("(=?ISO-8859-1?Q?a_b?=)", "(a b)"),
        ("(=?ISO-8859-1?Q?a?= =?ISO-8859-2?Q?_b?=)", "(a b)"),
    ],
)
def test_spacing(value, want):
    assert decode_ext_header(value) == want


@pytest.mark.parametrize(
    "value, want",
    [
        ("=?utf-8?q?abcABC_=24_=c2=a2_=e2=82=ac?=", "abcABC $ \u00a2 \u20ac"),
        ("=?iso-8859-1?q?#=a3_c=a9_r=ae_u=b5?=", "#\u00a3 c\u00a9 r\u00ae u\u00b5"),
        ("=?big5?q?=a1=5d_=a1=61_=a1=71?=", "\uff08 \uff5b \u3008"),
    ],
)
def test_charsets(value, want):
    assert decode_ext_header(value) == want


def test_unknown_charset_passthrough():
    value = "=?no-such-charset?Q?abc?="
    assert decode_ext_header(value) == value


@pytest.mark.parametrize(
    "value, want",
    [
        ("plain text", "plain text"),
        ("=?US-ASCII?q?Hello=20World?=", "Hello World"),
        ("=?US-ASCII?b?SGVsbG8gV29ybGQ=?=", "Hello World"),
        ("=?utf-8?b?PT9VUy1BU0NJST9xP0hlbGxvPTIwV29ybGQ/PQ==?=", "Hello World"),
    ],
    ids=["pass-through", "quoted", "base64", "nested"],
)
def test_rfc2047_decode(value, want):
    assert rfc2047_decode(value) == want


def test_rfc2047_decode_quotes_parameter_value():
    assert rfc2047_decode("filename==?US-ASCII?Q?report.pdf?=") == 'filename="report.pdf"'


def test_rfc2047_decode_repairs_spaces_in_word():
    assert rfc2047_decode("=?UTF-8 ?Q?abc?=") == "abc"