"""
Content transformation: HTML minification and size-beneficial gzip.
"""

from .compression import GZIP, compress_if_smaller, gzip_compress
from .minify import minify_html, minify_html_bytes
from .transformer import ContentTransformer, TransformedPayload, transform

__all__ = [
    "GZIP",
    "compress_if_smaller",
    "gzip_compress",
    "minify_html",
    "minify_html_bytes",
    "ContentTransformer",
    "TransformedPayload",
    "transform",
]
