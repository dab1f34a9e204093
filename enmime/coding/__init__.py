"""Charset conversion, encoded-word and ID header decoding, and content cleaners."""