"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds the bytes we write back to the client.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                         ◄── status line      │
    │    Content-Type: text/html; charset=utf-8\r\n  ◄── headers          │
    │    Content-Length: 1234\r\n                                         │
    │    Content-Encoding: gzip\r\n                                       │
    │    Cache-Control: public, max-age=31536000\r\n                      │
    │    \r\n                                        ◄── blank line       │
    │    <1234 bytes of body>                        ◄── body             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Two rules we never break:

1. Content-Length is the length of the body bytes we ACTUALLY append.
   After compression that is the compressed length, not the file size.
   Get this wrong and the client either hangs waiting for more bytes
   or truncates the page.

2. Content-Encoding names the encoding applied to THOSE bytes. Saying
   "gzip" over an uncompressed body makes the browser show garbage.

=============================================================================
HEADER ORDER
=============================================================================

HTTP doesn't care about header order, but tests do. Headers are kept in
a dict (insertion-ordered since Python 3.7) and always added in the
same sequence:

    Content-Type → Content-Length → Content-Encoding
                 → Cache-Control  → Accept-Ranges

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .assets import AssetKind, policy_for
from .status_codes import HTTPStatus


CACHE_MAX_AGE = 31536000
"""One year, in seconds. Used for assets whose kind is cacheable."""


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    A plain data container. to_bytes() writes the headers exactly as
    stored; ResponseBuilder is what fills in Content-Length.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {self.status} {self.status.phrase}"

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

            HTTP/1.1 200 OK\r\n
            Name: value\r\n
            ...
            \r\n
            <body>

        Returns:
            Complete HTTP response as bytes.
        """
        lines = [self.status_line]

        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Blank line separates headers from body
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

    Usage:
        response = (ResponseBuilder()
            .content_type("video/webm")
            .body(data)
            .cache()
            .accept_ranges()
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: Optional[bytes] = None
        self._encoding: Optional[str] = None
        self._cache_max_age: Optional[int] = None
        self._accept_ranges = False

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the response status."""
        self._status = status
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        self._headers["Content-Type"] = content_type
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body. Strings are encoded as UTF-8."""
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def encoding(self, label: Optional[str]) -> "ResponseBuilder":
        """
        Declare the Content-Encoding of the body.

        None means the body is sent as-is and no header is written.
        """
        self._encoding = label
        return self

    def cache(self, max_age: int = CACHE_MAX_AGE) -> "ResponseBuilder":
        """Allow browsers and CDNs to cache the response for max_age seconds."""
        self._cache_max_age = max_age
        return self

    def accept_ranges(self) -> "ResponseBuilder":
        """Advertise byte-range support (lets media players seek)."""
        self._accept_ranges = True
        return self

    def build(self) -> HTTPResponse:
        """
        Build the HTTPResponse.

        Content-Length is only written when a body was set, which is
        what keeps the 404 response down to its bare status line.
        """
        headers: Dict[str, str] = {}
        if "Content-Type" in self._headers:
            headers["Content-Type"] = self._headers["Content-Type"]

        body = self._body if self._body is not None else b""
        if self._body is not None:
            headers["Content-Length"] = str(len(body))

        if self._encoding:
            headers["Content-Encoding"] = self._encoding

        if self._cache_max_age is not None:
            headers["Cache-Control"] = f"public, max-age={self._cache_max_age}"

        if self._accept_ranges:
            headers["Accept-Ranges"] = "bytes"

        return HTTPResponse(status=self._status, headers=headers, body=body)


def asset_response(
    content_type: str,
    body: bytes,
    encoding: Optional[str],
    kind: AssetKind,
    cache_max_age: int = CACHE_MAX_AGE,
) -> HTTPResponse:
    """
    Build the 200 response for an asset.

    Args:
        content_type: Content-Type header value.
        body: Exactly the bytes to send (already transformed).
        encoding: Content-Encoding applied to body, or None.
        kind: Asset kind; decides caching and range headers.
        cache_max_age: max-age for cacheable kinds.

    Returns:
        HTTPResponse ready for to_bytes().
    """
    policy = policy_for(kind)

    builder = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .content_type(content_type)
        .body(body)
        .encoding(encoding))

    if policy.cacheable:
        builder.cache(cache_max_age)
    if policy.accept_ranges:
        builder.accept_ranges()

    return builder.build()


def not_found() -> HTTPResponse:
    """
    The 404 response: a status line, a blank line, nothing else.

        HTTP/1.1 404 Not Found\r\n\r\n
    """
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)
