"""
=============================================================================
ROUTE TABLE
=============================================================================

Maps request paths to the assets behind them.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         ROUTE TABLE                                 │
    ├──────────────────────────┬──────────────────────┬───────────────────┤
    │ Request path             │ File                 │ Kind              │
    ├──────────────────────────┼──────────────────────┼───────────────────┤
    │ /                        │ index.html           │ HTML              │
    │ /robots.txt              │ robots.txt           │ TEXT              │
    │ /static/maxwell.webm     │ maxwell.webm         │ VIDEO             │
    │ /static/lq-store.mp3     │ lq-store.mp3         │ AUDIO             │
    └──────────────────────────┴──────────────────────┴───────────────────┘

=============================================================================
EXACT MATCH ONLY
=============================================================================

There are no patterns here:

    /robots.txt      → match
    /Robots.txt      → 404  (case-sensitive)
    /robots.txt/     → 404  (no trailing-slash folding)
    /robots.txt?x=1  → 404  (query strings are not stripped)

A dict lookup is all we need, and it is O(1).

=============================================================================
THREAD SAFETY
=============================================================================

The table is built once at startup and handed to every worker thread.
It is wrapped in a MappingProxyType, a read-only view: there is no
add() method to race on, so no lock is needed.

=============================================================================
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from .assets import AssetKind, content_type_for, kind_for_path


class RouteNotFound(LookupError):
    """Raised when a request path is not in the route table."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No route for {path!r}")


@dataclass(frozen=True)
class Asset:
    """
    A servable file, identified by the request path that reaches it.

    Attributes:
        path: Request path, e.g. "/robots.txt".
        file_path: Key in the content store, e.g. "robots.txt".
        kind: Asset kind. Derived from the file extension if omitted.
    """

    path: str
    file_path: str
    kind: Optional[AssetKind] = field(default=None)

    def __post_init__(self):
        if self.kind is None:
            # frozen dataclass: bypass __setattr__ for the derived field
            object.__setattr__(self, "kind", kind_for_path(self.file_path))

    @property
    def content_type(self) -> str:
        """Content-Type header value for this asset."""
        return content_type_for(self.file_path, self.kind)


class RouteTable(Mapping[str, Asset]):
    """
    Immutable mapping from request path to Asset.

    Usage:
        table = RouteTable([
            Asset("/", "index.html"),
            Asset("/robots.txt", "robots.txt"),
        ])

        table.lookup("/").file_path      # "index.html"
        table.lookup("/nope")            # raises RouteNotFound
    """

    def __init__(self, assets: Iterable[Asset]):
        routes = {}
        for asset in assets:
            if asset.path in routes:
                raise ValueError(f"Duplicate route: {asset.path}")
            routes[asset.path] = asset
        self._routes: Mapping[str, Asset] = MappingProxyType(routes)

    def lookup(self, path: str) -> Asset:
        """
        Find the asset for a request path.

        Args:
            path: Request path, compared byte-for-byte.

        Returns:
            The matching Asset.

        Raises:
            RouteNotFound: If no route matches.
        """
        try:
            return self._routes[path]
        except KeyError:
            raise RouteNotFound(path) from None

    def __getitem__(self, path: str) -> Asset:
        return self._routes[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteTable({list(self._routes)!r})"

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "RouteTable":
        """Build a table from (request path, file path) pairs."""
        return cls(Asset(path, file_path) for path, file_path in pairs)


# ─────────────────────────────────────────────────────────────────────────
# DEFAULT ROUTES
# ─────────────────────────────────────────────────────────────────────────
# File paths are relative to the static directory (ServerConfig.static_dir).
# ─────────────────────────────────────────────────────────────────────────
DEFAULT_ROUTES = (
    ("/", "index.html"),
    ("/robots.txt", "robots.txt"),
    ("/static/maxwell.webm", "maxwell.webm"),
    ("/static/lq-store.mp3", "lq-store.mp3"),
)


def default_route_table() -> RouteTable:
    """Create the route table the server ships with."""
    return RouteTable.from_pairs(DEFAULT_ROUTES)


def parse_route(value: str) -> tuple[str, str]:
    """
    Parse a "PATH=FILE" route definition (as given on the command line).

    Examples:
        >>> parse_route("/=index.html")
        ('/', 'index.html')

        >>> parse_route("/media/intro.webm=video/intro.webm")
        ('/media/intro.webm', 'video/intro.webm')

    Raises:
        ValueError: If the definition is malformed.
    """
    path, sep, file_path = value.partition("=")
    if not sep or not path.startswith("/") or not file_path:
        raise ValueError(f"Invalid route {value!r}, expected PATH=FILE with PATH starting with '/'")
    return path, file_path
