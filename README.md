# enmime

Low-level building blocks for reading and writing MIME e-mail, using only the
Python standard library.

## Installation

```
pip install enmime
```

To run the test suite:

```
pip install "enmime[test]"
pytest
```

## What is inside

### `enmime.match`

Search a tree of MIME parts. A part is any object with `first_child` and
`next_sibling` attributes (`None` where there is none).

```python
from enmime.match import breadth_match_first, depth_match_all

html = breadth_match_first(root, lambda p: p.content_type == "text/html")
plain_parts = depth_match_all(root, lambda p: p.content_type == "text/plain")
```

`breadth_match_first` and `breadth_match_all` walk the tree level by level;
`depth_match_first` and `depth_match_all` walk it depth first. The `*_first`
functions return `None` when nothing matches.

### `enmime.coding`

- `charsets`: `convert_to_utf8_string(charset, data)` decodes bytes in any of
  the many charset labels seen in real mail (labels are matched without regard
  to case); `new_charset_reader(charset, stream)` wraps a binary stream so that
  it yields UTF-8; `find_charset_in_html(html)` returns the charset named by the
  first `<meta>` tag, or `""`. Unknown charsets raise `LookupError`.
- `headerext`: `decode_ext_header(value)` decodes the RFC 2047 encoded words of
  a header line, returning the input unchanged when it cannot be decoded.
  `rfc2047_decode(s)` decodes repeatedly (also after dropping stray spaces and
  line breaks inside encoded words), and when something was decoded and the
  result has the form `key=value`, wraps the value in double quotes.
- `idheader`: `from_id_header("<foo%3fbar+baz>")` gives `"foo?bar baz"`, and
  `to_id_header("foo?bar")` encodes a Content-ID / Message-ID value.
- `base64clean.Base64Cleaner` wraps a binary stream and drops bytes that are
  not base64 characters; whitespace and `=` go silently, anything else is
  recorded in its `errors` list.
- `quotedprint.QPCleaner` wraps a binary stream and escapes stray `=` signs and
  bytes outside printable ASCII, inserting soft line breaks so that no line
  exceeds `MAX_QP_LINE_LEN` (1024).

```python
import io
from enmime.coding.quotedprint import QPCleaner

cleaned = QPCleaner(io.BytesIO("pédagogues".encode())).read(-1)
# b"p=C3=A9dagogues"
```

### `enmime.stringutil`

- `quoting`: `find_unquoted`, `split_unquoted`, `split_after_unquoted` find or
  split on a separator while ignoring those inside quoted runs.
- `addr`: `Address(name, address)`, `join_address(addrs)` and
  `ensure_comma_delimited_addresses(s)` for To/Cc headers.
- `randid`: `new_uuid(rng=None)` makes a random version 4 UUID string from any
  object with a `randbytes` method, or from a shared source; `LockedSource` is
  a thread-safe seeded random source to pass in.
- `wrap`: `wrap(max_len, *parts)` joins the parts and folds the result on
  spaces or tabs with `\r\n `, returning bytes.

```python
from enmime.stringutil.addr import Address, join_address

join_address([Address("one", "one@example.com"), Address("", "two@example.com")])
# '"one" <one@example.com>, <two@example.com>'
```

### `enmime.textproto`

Line-oriented protocol I/O in the style of SMTP and NNTP:

- `header.MIMEHeader`: a multi-valued header mapping whose `add`, `set`,
  `get`, `values` and `delete` methods canonicalize the key; item access
  (`header[key]`) uses the key as written.
- `canonical`: `canonical_mime_header_key`, `canonical_email_mime_header_key`
  and the byte checks `valid_header_field_byte`, `valid_header_value_byte` and
  `valid_email_header_field_byte`.
- `reader.Reader`: read lines, continued lines, response codes and
  dot-encoded blocks (`DotReader`). Malformed responses raise `ProtocolError`,
  unexpected status codes raise `TextprotoError`, and the end of the stream
  raises `EOFError`.
- `mimeheader`: `read_mime_header(reader, limit=None)` and
  `read_email_mime_header(reader, limit=None)` read a header block up to a
  blank line into a `MIMEHeader`; exceeding `limit` raises `ValueError`.
- `writer.Writer`: `printf_line` and a dot-encoding `DotWriter` usable as a
  context manager.
- `pipeline.Pipeline` and `Sequencer`: keep concurrent requests and responses
  in id order.
- `conn.Conn` and `dial(host, port)`: a reader, writer and pipeline over a
  TCP socket; also `trim_string` and `trim_bytes`.

```python
import io
from enmime.textproto.writer import Writer

out = io.BytesIO()
with Writer(out).dot_writer() as dot:
    dot.write(b"hello\n.world\n")
# out.getvalue() == b"hello\r\n..world\r\n.\r\n"
```

## What it does not do

This package holds the pieces a MIME mail library is built from, not the
library itself. It has no parser that reads a whole message into a tree of
parts, no envelope with text, HTML, attachments and inlines, no conversion of
HTML to plain text, and no builder for writing new messages. It has no
command-line tool.