"""
=============================================================================
CONTENT STORE
=============================================================================

Where asset bytes come from. The server never writes here; it only asks
for the bytes behind a file path and gets them back, or an error.

    read("index.html")  ──►  b"<!DOCTYPE html>..."
    read("gone.html")   ──►  raises StoreReadError

Bytes are read fresh on every request and never cached, so editing a
file on disk takes effect on the next request without a restart.

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

File paths come from the route table, not from the client, but the
route table can come from the command line. We still refuse anything
that resolves outside the root directory:

    root:      /srv/static
    "a.html"   → /srv/static/a.html         OK
    "../etc"   → /srv/etc                   REFUSED

resolve() follows ".." and symlinks, then relative_to() checks the
result is still inside root.

=============================================================================
"""

from pathlib import Path
from typing import Mapping, Protocol


class StoreReadError(LookupError):
    """Raised when a file is missing, unreadable, or outside the store."""

    def __init__(self, file_path: str, reason: str = "not found"):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Cannot read {file_path!r}: {reason}")


class ContentStore(Protocol):
    """Read-only source of asset bytes, keyed by file path."""

    def read(self, file_path: str) -> bytes:
        """Return the bytes of file_path or raise StoreReadError."""
        ...


class FileContentStore:
    """
    Serves files from a directory on disk.

    Usage:
        store = FileContentStore("./static")
        store.read("index.html")
    """

    def __init__(self, root_dir: str | Path):
        """
        Args:
            root_dir: Directory all file paths are relative to.
                     It does not have to exist yet; reads simply fail
                     until it does.
        """
        # Resolve to absolute path (needed for the containment check)
        self.root_dir = Path(root_dir).resolve()

    def read(self, file_path: str) -> bytes:
        """
        Read a file below the root directory.

        Args:
            file_path: Path relative to root_dir.

        Returns:
            The file's bytes.

        Raises:
            StoreReadError: File missing, unreadable, a directory,
                           or outside root_dir.
        """
        full_path = (self.root_dir / file_path.lstrip("/")).resolve()

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            raise StoreReadError(file_path, "outside store root") from None

        try:
            return full_path.read_bytes()
        except FileNotFoundError:
            raise StoreReadError(file_path, "not found") from None
        except OSError as e:
            # PermissionError, IsADirectoryError, ...
            raise StoreReadError(file_path, e.strerror or type(e).__name__) from e

    def __repr__(self) -> str:
        return f"FileContentStore({str(self.root_dir)!r})"


class MemoryContentStore:
    """
    Serves bytes from a dict. Handy for tests and for embedding pages
    in a program.

    Usage:
        store = MemoryContentStore({"index.html": b"<p>hi</p>"})
    """

    def __init__(self, files: Mapping[str, bytes]):
        self._files = dict(files)

    def read(self, file_path: str) -> bytes:
        try:
            return self._files[file_path]
        except KeyError:
            raise StoreReadError(file_path) from None
