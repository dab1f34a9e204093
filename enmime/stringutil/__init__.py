"""String helpers for addresses, quoting, wrapping and random identifiers."""