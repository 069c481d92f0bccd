"""
=============================================================================
ASSET KINDS
=============================================================================

Every file we serve belongs to exactly one KIND. The kind decides
everything interesting about the response:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      KIND → RESPONSE POLICY                         │
    ├──────────────┬──────────┬──────────┬───────────┬───────────────────┤
    │ Kind         │ Minify   │ Compress │ Cacheable │ Accept-Ranges     │
    ├──────────────┼──────────┼──────────┼───────────┼───────────────────┤
    │ HTML         │   yes    │   yes    │    yes    │                   │
    │ TEXT         │          │          │           │                   │
    │ VIDEO        │          │          │    yes    │      bytes        │
    │ AUDIO        │          │          │    yes    │      bytes        │
    │ IMAGE        │          │          │    yes    │                   │
    │ OCTET_STREAM │          │          │           │                   │
    └──────────────┴──────────┴──────────┴───────────┴───────────────────┘

Media files (webm, mp3, png...) are already compressed by their codec.
Running gzip over them burns CPU and usually makes them BIGGER.

=============================================================================
WHY A TABLE?
=============================================================================

The tempting implementation is a chain of suffix checks:

    if path.endswith(".html"): ...
    elif path.endswith(".webm") or path.endswith(".mp3"): ...

That spreads the policy over every place that needs it. Instead we keep
two small dictionaries:

    extension ──► AssetKind ──► KindPolicy

and every other module asks this one for answers.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional


class AssetKind(Enum):
    """The closed set of asset kinds the server knows how to serve."""

    HTML = "html"
    TEXT = "text"
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    OCTET_STREAM = "octet-stream"


@dataclass(frozen=True)
class KindPolicy:
    """
    How responses for one asset kind are transformed and framed.

    Attributes:
        minify: Whitespace-minify the body before sending.
        compress: Try gzip, keep it only if it is smaller.
        cacheable: Send a long-lived Cache-Control header.
        accept_ranges: Advertise byte-range support (media players seek).
    """

    minify: bool = False
    compress: bool = False
    cacheable: bool = False
    accept_ranges: bool = False


KIND_POLICIES: Dict[AssetKind, KindPolicy] = {
    AssetKind.HTML: KindPolicy(minify=True, compress=True, cacheable=True),
    AssetKind.TEXT: KindPolicy(),
    AssetKind.VIDEO: KindPolicy(cacheable=True, accept_ranges=True),
    AssetKind.AUDIO: KindPolicy(cacheable=True, accept_ranges=True),
    AssetKind.IMAGE: KindPolicy(cacheable=True),
    AssetKind.OCTET_STREAM: KindPolicy(),
}


# ─────────────────────────────────────────────────────────────────────────
# EXTENSION TABLE
# ─────────────────────────────────────────────────────────────────────────
# extension → (kind, content type)
# Text types carry a charset so browsers don't have to guess.
# ─────────────────────────────────────────────────────────────────────────
EXTENSIONS: Dict[str, tuple[AssetKind, str]] = {
    ".html": (AssetKind.HTML, "text/html; charset=utf-8"),
    ".htm": (AssetKind.HTML, "text/html; charset=utf-8"),
    ".txt": (AssetKind.TEXT, "text/plain; charset=utf-8"),
    ".webm": (AssetKind.VIDEO, "video/webm"),
    ".mp4": (AssetKind.VIDEO, "video/mp4"),
    ".mp3": (AssetKind.AUDIO, "audio/mpeg"),
    ".ogg": (AssetKind.AUDIO, "audio/ogg"),
    ".wav": (AssetKind.AUDIO, "audio/wav"),
    ".png": (AssetKind.IMAGE, "image/png"),
    ".jpg": (AssetKind.IMAGE, "image/jpeg"),
    ".jpeg": (AssetKind.IMAGE, "image/jpeg"),
    ".gif": (AssetKind.IMAGE, "image/gif"),
    ".webp": (AssetKind.IMAGE, "image/webp"),
    ".ico": (AssetKind.IMAGE, "image/x-icon"),
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Content type to use when an asset's kind is set explicitly
# and the file extension says nothing useful.
KIND_CONTENT_TYPES: Dict[AssetKind, str] = {
    AssetKind.HTML: "text/html; charset=utf-8",
    AssetKind.TEXT: "text/plain; charset=utf-8",
    AssetKind.OCTET_STREAM: DEFAULT_CONTENT_TYPE,
}


def kind_for_path(path: str | Path) -> AssetKind:
    """
    Get the asset kind for a file path from its extension.

    Examples:
        >>> kind_for_path("static/index.html")
        <AssetKind.HTML: 'html'>

        >>> kind_for_path("clip.WEBM")   # case-insensitive
        <AssetKind.VIDEO: 'video'>

        >>> kind_for_path("README")
        <AssetKind.OCTET_STREAM: 'octet-stream'>
    """
    entry = EXTENSIONS.get(Path(path).suffix.lower())
    return entry[0] if entry else AssetKind.OCTET_STREAM


def content_type_for(path: str | Path, kind: Optional[AssetKind] = None) -> str:
    """
    Get the Content-Type header value for an asset.

    The extension wins when it belongs to the requested kind. Otherwise
    we fall back to a generic type for the kind, then to
    application/octet-stream.

    Args:
        path: File path (only the extension is looked at).
        kind: The asset's kind, if it was declared explicitly.

    Returns:
        Content-Type header value.
    """
    entry = EXTENSIONS.get(Path(path).suffix.lower())
    if entry and (kind is None or entry[0] is kind):
        return entry[1]
    if kind is not None:
        return KIND_CONTENT_TYPES.get(kind, DEFAULT_CONTENT_TYPE)
    return DEFAULT_CONTENT_TYPE


def policy_for(kind: AssetKind) -> KindPolicy:
    """Get the response policy for an asset kind."""
    return KIND_POLICIES[kind]
