"""
=============================================================================
HTML MINIFICATION
=============================================================================

Hand-written HTML is full of whitespace that only exists for humans:

    <html>
        <body>
            <p>
                hi
            </p>
        </body>
    </html>

Browsers don't need the indentation or the newlines, so we drop them
before the page goes on the wire.

=============================================================================
THE POLICY
=============================================================================

    1. Split the document on "\\n" (CRLF included: "\\r" is whitespace)
    2. Strip leading and trailing WHITESPACE from every line
    3. Drop lines that are now empty
    4. Join what's left with NO separator

    "<p>\\n    hi\\n</p>\\n"   ──►   "<p>hi</p>"

Whitespace INSIDE a line is left alone ("<p> a  b </p>" keeps its
spaces), so inline text keeps its word gaps. Only "\\n" breaks a line:
"<a>\\r<b>" comes out unchanged, where str.splitlines() would have
split it.

=============================================================================
IDEMPOTENCE
=============================================================================

minify(minify(x)) == minify(x) for every x. After one pass:

    - there is no "\\n" left, so step 1 yields a single line
    - that line already starts and ends with non-whitespace
    - so steps 2-4 change nothing

This matters because a compressed response has to decompress back to
exactly the minified page, and "the minified page" has to be one
well-defined string.

=============================================================================
CAVEAT
=============================================================================

Joining lines with no separator glues words that were split across
lines ("hello\\nworld" → "helloworld") and mangles whitespace-sensitive
content such as <pre> blocks. Author the HTML with that in mind.

=============================================================================
"""

from ..http.request import WHITESPACE, decode_lossy


def minify_html(html: str) -> str:
    """
    Minify an HTML document.

    Args:
        html: HTML source text.

    Returns:
        The document with every line trimmed, blank lines removed,
        and all lines joined together.
    """
    return "".join(
        stripped
        for stripped in (line.strip(WHITESPACE) for line in html.split("\n"))
        if stripped
    )


def minify_html_bytes(raw: bytes) -> bytes:
    """Minify raw HTML bytes, decoding them lossily as UTF-8."""
    return minify_html(decode_lossy(raw)).encode("utf-8")
