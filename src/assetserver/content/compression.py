"""
=============================================================================
GZIP COMPRESSION
=============================================================================

HTTP compression can dramatically reduce transfer size for text:

    ┌────────────────────────────────────────────────────────────────────┐
    │   Content Type        │ Original │ Compressed │ Savings           │
    │   ────────────────────┼──────────┼────────────┼─────────          │
    │   HTML page           │   50 KB  │   10 KB    │  80%              │
    │   "<p>hi</p>"         │   9 B    │   29 B     │  -222%  (!)       │
    └────────────────────────────────────────────────────────────────────┘

The second row is why compression is CONDITIONAL. A gzip stream always
carries a fixed header and trailer:

    ┌──────────┬──────────────────────┬──────────┐
    │ header   │ DEFLATE data         │ trailer  │
    │ 10 bytes │ variable             │ 8 bytes  │
    │          │                      │ CRC32 +  │
    │          │                      │ size     │
    └──────────┴──────────────────────┴──────────┘

For a tiny page those 18 bytes of framing outweigh anything DEFLATE
saves, and the "compressed" body comes out bigger than the original.

=============================================================================
SIZE-BENEFICIAL COMPRESSION
=============================================================================

    compressed = gzip(body)

    if len(compressed) < len(body):       ◄── STRICTLY smaller
        send compressed, Content-Encoding: gzip
    else:
        send body, no Content-Encoding

=============================================================================
REPRODUCIBLE OUTPUT
=============================================================================

The gzip header normally records the current time (MTIME field), so
compressing the same bytes twice gives two different outputs. We pass
mtime=0: the same page always compresses to the same bytes.

=============================================================================
"""

import gzip
from typing import Optional


GZIP = "gzip"
"""Content-Encoding label for gzip-compressed bodies."""

DEFAULT_LEVEL = 9


def gzip_compress(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    """
    Compress bytes with gzip.

    Args:
        data: Bytes to compress.
        level: Compression level (0-9). 9 = smallest output, slowest.

    Returns:
        A complete gzip stream (header + DEFLATE data + trailer).
    """
    return gzip.compress(data, compresslevel=level, mtime=0)


def compress_if_smaller(data: bytes, level: int = DEFAULT_LEVEL) -> tuple[bytes, Optional[str]]:
    """
    Compress data, keeping the result only if it is strictly smaller.

    Args:
        data: Bytes to compress.
        level: gzip compression level.

    Returns:
        (body, encoding) where encoding is "gzip" if body is the
        compressed form, or None if body is data unchanged.

    Raises:
        zlib.error, OSError, ValueError: If the compressor fails.
            The caller decides how to recover.
    """
    compressed = gzip_compress(data, level)
    if len(compressed) < len(data):
        return compressed, GZIP
    return data, None
