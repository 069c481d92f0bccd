"""
pytest configuration and fixtures.
"""

import gzip
import logging
import os
import socket
import threading
from pathlib import Path
from typing import Callable, Dict, Generator, Tuple

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from assetserver import AssetServer, ServerConfig
from assetserver.http import Asset, RouteTable
from assetserver.store import MemoryContentStore


# A page that gzip shrinks a lot
BIG_HTML = (
    b"<!DOCTYPE html>\n<html>\n  <body>\n"
    + b"    <div class=\"row\">\n      <span>hello world</span>\n    </div>\n" * 200
    + b"  </body>\n</html>\n"
)

# A page so small the gzip framing outweighs any saving
TINY_HTML = b"<p>\n  hi\n</p>\n"

ROBOTS = b"User-agent: *\nDisallow:\n"

# Random bytes stand in for real media; gzip could not shrink them anyway
VIDEO = os.urandom(4096)
AUDIO = os.urandom(2048)


def split_response(raw: bytes) -> Tuple[str, Dict[str, str], bytes]:
    """Split raw response bytes into (status line, headers, body)."""
    head, sep, body = raw.partition(b"\r\n\r\n")
    assert sep, f"no header terminator in {raw[:80]!r}"
    lines = head.decode("utf-8").split("\r\n")
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return lines[0], headers, body


def decoded_body(headers: Dict[str, str], body: bytes) -> bytes:
    """Undo Content-Encoding, if any."""
    if headers.get("Content-Encoding") == "gzip":
        return gzip.decompress(body)
    return body


@pytest.fixture
def parse_response() -> Callable[[bytes], Tuple[str, Dict[str, str], bytes]]:
    """The split_response helper, as a fixture."""
    return split_response


@pytest.fixture
def decode_body() -> Callable[[Dict[str, str], bytes], bytes]:
    """The decoded_body helper, as a fixture."""
    return decoded_body


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """A static directory holding one file of every interesting kind."""
    root = tmp_path / "static"
    root.mkdir()
    (root / "index.html").write_bytes(BIG_HTML)
    (root / "tiny.html").write_bytes(TINY_HTML)
    (root / "robots.txt").write_bytes(ROBOTS)
    (root / "clip.webm").write_bytes(VIDEO)
    (root / "song.mp3").write_bytes(AUDIO)
    return root


@pytest.fixture
def routes() -> RouteTable:
    """Routes matching the files in static_dir, plus one stale route."""
    return RouteTable([
        Asset("/", "index.html"),
        Asset("/tiny", "tiny.html"),
        Asset("/robots.txt", "robots.txt"),
        Asset("/static/clip.webm", "clip.webm"),
        Asset("/static/song.mp3", "song.mp3"),
        Asset("/gone", "deleted.html"),
    ])


@pytest.fixture
def config(static_dir: Path) -> ServerConfig:
    """Test server configuration on an OS-picked port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        static_dir=str(static_dir),
        log_level="WARNING",
    )


@pytest.fixture
def server(config: ServerConfig, routes: RouteTable) -> AssetServer:
    """An AssetServer over static_dir. Not started."""
    return AssetServer(config, routes=routes)


@pytest.fixture
def memory_server() -> AssetServer:
    """An AssetServer serving a single tiny page from memory."""
    return AssetServer(
        ServerConfig(log_level="WARNING"),
        routes=RouteTable([Asset("/", "index.html")]),
        store=MemoryContentStore({"index.html": TINY_HTML}),
    )


class RunningServer:
    """Runs an AssetServer in a background thread."""

    def __init__(self, server: AssetServer):
        self.server = server
        self._thread = threading.Thread(target=self.server.run, daemon=True)

    @property
    def address(self) -> Tuple[str, int]:
        return self.server.address

    def start(self):
        self._thread.start()
        if not self.server.wait_until_listening(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        self._thread.join(timeout=5.0)

    def fetch(self, request: bytes, timeout: float = 5.0) -> bytes:
        """Send raw request bytes and read the response until EOF."""
        with socket.create_connection(self.address, timeout=timeout) as sock:
            sock.sendall(request)
            chunks = []
            while True:
                chunk = sock.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def running_server(server: AssetServer) -> Generator[RunningServer, None, None]:
    """A started server over static_dir."""
    running = RunningServer(server)
    running.start()

    yield running

    running.stop()


@pytest.fixture(autouse=True)
def restore_log_level() -> Generator[None, None, None]:
    """Undo the logger level AssetServer.run() sets, so caplog sees everything."""
    package_logger = logging.getLogger("assetserver")
    level = package_logger.level

    yield

    package_logger.setLevel(level)
