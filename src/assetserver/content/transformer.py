"""
=============================================================================
CONTENT TRANSFORMER
=============================================================================

Turns the raw bytes of an asset into the bytes we actually send.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     TRANSFORMATION PIPELINE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   raw bytes ──► kind policy?                                        │
    │                    │                                                 │
    │        ┌───────────┴──────────────┐                                 │
    │        │ HTML                     │ everything else                 │
    │        ▼                          ▼                                 │
    │   minify_html_bytes()        pass through                           │
    │        │                     (no minify, no gzip)                   │
    │        ▼                          │                                 │
    │   compress_if_smaller()           │                                 │
    │        │                          │                                 │
    │        ├── smaller → (gzip bytes, "gzip")                           │
    │        └── not     → (minified bytes, None)                         │
    │                                   │                                 │
    │                                   ▼                                 │
    │                          (raw bytes, None)                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILURE
=============================================================================

Transformation never fails from the caller's point of view. If the
compressor raises, we log it and send the untransformed raw bytes with
no Content-Encoding. A slightly bigger page beats a dropped connection.

=============================================================================
"""

import logging
import zlib
from dataclasses import dataclass
from typing import Optional

from ..http.assets import AssetKind, policy_for
from .compression import DEFAULT_LEVEL, compress_if_smaller
from .minify import minify_html_bytes


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformedPayload:
    """
    The bytes to send for one request, and how they are encoded.

    Attributes:
        body: Exactly the bytes that go after the headers.
        encoding: Content-Encoding label for body, or None.
    """

    body: bytes
    encoding: Optional[str] = None


class ContentTransformer:
    """
    Applies per-kind minification and compression.

    Stateless apart from its settings, so one instance is shared by all
    worker threads.

    Usage:
        transformer = ContentTransformer(level=9)
        payload = transformer.transform(raw, AssetKind.HTML)
        payload.body, payload.encoding   # b"\\x1f\\x8b...", "gzip"
    """

    def __init__(self, level: int = DEFAULT_LEVEL):
        """
        Args:
            level: gzip compression level (0-9).
        """
        self.level = level

    def transform(self, raw: bytes, kind: AssetKind) -> TransformedPayload:
        """
        Produce the payload for an asset.

        Args:
            raw: The asset's bytes as stored.
            kind: The asset's kind.

        Returns:
            TransformedPayload. Never raises for compressor errors.
        """
        policy = policy_for(kind)

        if not (policy.minify or policy.compress):
            return TransformedPayload(raw)

        try:
            body = minify_html_bytes(raw) if policy.minify else raw
            if not policy.compress:
                return TransformedPayload(body)

            compressed, encoding = compress_if_smaller(body, self.level)
            return TransformedPayload(compressed, encoding)

        except (zlib.error, OSError, ValueError) as e:
            logger.warning(f"Transform failed for {kind.value} asset, sending raw bytes: {e}")
            return TransformedPayload(raw)


def transform(raw: bytes, kind: AssetKind, level: int = DEFAULT_LEVEL) -> TransformedPayload:
    """Transform bytes with a throwaway ContentTransformer."""
    return ContentTransformer(level).transform(raw, kind)
