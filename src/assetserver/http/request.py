"""
=============================================================================
REQUEST LINE PARSER
=============================================================================

A full HTTP request looks like this:

    GET /robots.txt HTTP/1.1\r\n       ◄── request line
    Host: localhost:8080\r\n           ◄── headers
    User-Agent: curl/8.0\r\n
    \r\n                               ◄── blank line
    (optional body)

This server only cares about ONE thing in all of that: the path.

    GET /robots.txt HTTP/1.1
    ─── ─────────── ────────
     │       │         │
     │       │         └── token 3: version   (ignored)
     │       └──────────── token 2: PATH      (used!)
     └──────────────────── token 1: method    (ignored)

=============================================================================
NEVER FAIL
=============================================================================

The parser has no error path. Whatever arrives on the socket, we get a
path out of it:

    ┌──────────────────────────────────┬──────────────┐
    │ Input                            │ Path         │
    ├──────────────────────────────────┼──────────────┤
    │ b"GET /a HTTP/1.1\\r\\n\\r\\n"       │ "/a"         │
    │ b""                              │ "/"          │
    │ b"GET\\r\\n"                       │ "/"          │
    │ b"\\xff\\xfe garbage"               │ "garbage"    │
    │ 5 KB request (truncated at 2 KB) │ still parsed │
    └──────────────────────────────────┴──────────────┘

Invalid UTF-8 is replaced with U+FFFD rather than raising
UnicodeDecodeError. We ask for that explicitly with errors="replace";
the default bytes.decode() would blow up.

=============================================================================
"""

import re

DEFAULT_PATH = "/"

READ_SIZE = 2048
"""Bytes read from the socket for one request. Anything beyond is ignored."""

WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)
"""
Unicode White_Space characters.

Narrower than str.isspace(), which also counts the ASCII separators
\\x1c-\\x1f. Those stay part of a token.
"""

_TOKEN = re.compile(f"[^{re.escape(WHITESPACE)}]+")


def decode_lossy(raw: bytes) -> str:
    """Decode bytes as UTF-8, substituting U+FFFD for invalid sequences."""
    return raw.decode("utf-8", errors="replace")


def split_tokens(line: str) -> list[str]:
    """Split a line on runs of WHITESPACE."""
    return _TOKEN.findall(line)


def parse_request_path(raw: bytes) -> str:
    """
    Extract the request path from raw request bytes.

    Only "\\n" ends the request line (a "\\r" before it is whitespace
    anyway). A lone "\\r", "\\x0c" or "\\u2028" separates tokens but
    does not start a new line, unlike str.splitlines().

    Args:
        raw: Bytes from a single bounded read of the connection.

    Returns:
        The second whitespace-delimited token of the first line,
        or "/" if there isn't one.
    """
    first_line = decode_lossy(raw).split("\n", 1)[0]

    tokens = split_tokens(first_line)
    if len(tokens) < 2:
        return DEFAULT_PATH

    return tokens[1]
