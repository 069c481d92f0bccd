"""
Unit tests for the request-to-response pipeline (no listening socket).
"""

import gzip
import logging
import socket
import threading
from pathlib import Path

import pytest

from assetserver import AssetServer, ServerConfig
from assetserver.content.minify import minify_html_bytes
from assetserver.core.connection import Connection, ConnectionState
from assetserver.http.router import RouteTable


NOT_FOUND = b"HTTP/1.1 404 Not Found\r\n\r\n"


def get(path: str) -> bytes:
    return f"GET {path} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode("utf-8")


class TestHandleRequest:
    """Tests for AssetServer.handle_request()."""

    @pytest.mark.parametrize("path", ["/", "/tiny", "/robots.txt", "/static/clip.webm", "/static/song.mp3"])
    def test_known_routes_ok(self, server: AssetServer, parse_response, path: str):
        """Test every known route returns 200 with an exact Content-Length."""
        status, headers, body = parse_response(server.handle_request(get(path)))

        assert status == "HTTP/1.1 200 OK"
        assert int(headers["Content-Length"]) == len(body)

    @pytest.mark.parametrize("path", ["/missing", "/ROBOTS.TXT", "/static/", "/?x=1", "/index.html"])
    def test_unknown_paths_404(self, server: AssetServer, path: str):
        assert server.handle_request(get(path)) == NOT_FOUND

    def test_stale_route_is_404(self, server: AssetServer):
        """Test a route whose file is gone looks exactly like an unknown path."""
        assert server.handle_request(get("/gone")) == NOT_FOUND

    def test_html_compressed(self, server: AssetServer, static_dir: Path, parse_response):
        status, headers, body = parse_response(server.handle_request(get("/")))
        minified = minify_html_bytes((static_dir / "index.html").read_bytes())

        assert headers["Content-Type"].startswith("text/html")
        assert headers["Content-Encoding"] == "gzip"
        assert headers["Cache-Control"] == "public, max-age=31536000"
        assert "Accept-Ranges" not in headers
        assert gzip.decompress(body) == minified

    def test_html_uncompressed_when_gzip_does_not_help(self, server: AssetServer, parse_response):
        status, headers, body = parse_response(server.handle_request(get("/tiny")))

        assert status == "HTTP/1.1 200 OK"
        assert "Content-Encoding" not in headers
        assert body == b"<p>hi</p>"

    def test_tiny_page_scenario(self, memory_server: AssetServer, parse_response, decode_body):
        """Test GET / against a one-page table built from memory."""
        status, headers, body = parse_response(memory_server.handle_request(b"GET / HTTP/1.1\r\n\r\n"))

        assert status == "HTTP/1.1 200 OK"
        assert headers["Content-Type"].startswith("text/html")
        assert decode_body(headers, body) == b"<p>hi</p>"

    def test_missing_scenario(self, memory_server: AssetServer):
        assert memory_server.handle_request(b"GET /missing HTTP/1.1\r\n\r\n") == NOT_FOUND

    @pytest.mark.parametrize("path,content_type", [
        ("/static/clip.webm", "video/webm"),
        ("/static/song.mp3", "audio/mpeg"),
    ])
    def test_media_byte_identical(self, server, static_dir, parse_response, path, content_type):
        status, headers, body = parse_response(server.handle_request(get(path)))

        assert body == (static_dir / path.rsplit("/", 1)[1]).read_bytes()
        assert headers["Content-Type"] == content_type
        assert headers["Accept-Ranges"] == "bytes"
        assert headers["Cache-Control"] == "public, max-age=31536000"
        assert "Content-Encoding" not in headers

    def test_text_passes_through(self, server: AssetServer, static_dir: Path, parse_response):
        status, headers, body = parse_response(server.handle_request(get("/robots.txt")))

        assert body == (static_dir / "robots.txt").read_bytes()
        assert headers == {
            "Content-Type": "text/plain; charset=utf-8",
            "Content-Length": str(len(body)),
        }

    def test_garbage_request_serves_root(self, server: AssetServer, parse_response):
        """Test unparseable input degrades to '/' instead of an error."""
        status, headers, _ = parse_response(server.handle_request(b"\xff\xfe\xfd"))
        assert status == "HTTP/1.1 200 OK"
        assert headers["Content-Type"].startswith("text/html")

    def test_empty_request_serves_root(self, server: AssetServer, parse_response):
        status, _, _ = parse_response(server.handle_request(b""))
        assert status == "HTTP/1.1 200 OK"

    def test_request_beyond_read_size_is_ignored(self, static_dir: Path, routes: RouteTable):
        """Test only the first read_size bytes are looked at."""
        server = AssetServer(ServerConfig(static_dir=str(static_dir), read_size=8), routes=routes)
        # "GET /rob" is all that survives the cut
        assert server.handle_request(get("/robots.txt")) == NOT_FOUND

    def test_custom_cache_max_age(self, static_dir: Path, routes: RouteTable, parse_response):
        server = AssetServer(ServerConfig(static_dir=str(static_dir), cache_max_age=60), routes=routes)
        _, headers, _ = parse_response(server.handle_request(get("/static/clip.webm")))
        assert headers["Cache-Control"] == "public, max-age=60"

    def test_default_routes_without_files(self, tmp_path: Path):
        """Test the built-in table against an empty directory: every path 404s."""
        server = AssetServer(ServerConfig(static_dir=str(tmp_path)))
        for path in ("/", "/robots.txt", "/static/maxwell.webm", "/static/lq-store.mp3"):
            assert server.handle_request(get(path)) == NOT_FOUND

    def test_invalid_config_rejected(self):
        with pytest.raises(ValueError):
            AssetServer(ServerConfig(compression_level=42))


class TestHandlePathStates:
    """Tests for the connection states recorded while handling a path."""

    def _conn(self):
        a, b = socket.socketpair()
        return Connection(socket=a, address=("127.0.0.1", 0)), b

    def test_routed(self, server: AssetServer):
        conn, peer = self._conn()
        with conn, peer:
            server.handle_path("/robots.txt", conn)
            assert conn.state is ConnectionState.ROUTED

    def test_rejected_unknown(self, server: AssetServer):
        conn, peer = self._conn()
        with conn, peer:
            server.handle_path("/nope", conn)
            assert conn.state is ConnectionState.REJECTED

    def test_rejected_stale(self, server: AssetServer):
        conn, peer = self._conn()
        with conn, peer:
            server.handle_path("/gone", conn)
            assert conn.state is ConnectionState.REJECTED


class TestProcessConnection:
    """Tests for the per-connection worker, over a socket pair."""

    def _roundtrip(self, server: AssetServer, request: bytes) -> bytes:
        a, b = socket.socketpair()
        conn = Connection(socket=a, address=("127.0.0.1", 0))

        b.sendall(request)
        worker = threading.Thread(target=server._process_connection, args=(conn,))
        worker.start()

        chunks = []
        with b:
            while True:
                chunk = b.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        worker.join(timeout=5.0)

        assert conn.state is ConnectionState.CLOSED
        return b"".join(chunks)

    def test_one_response_then_close(self, server: AssetServer, parse_response):
        raw = self._roundtrip(server, get("/robots.txt"))
        status, headers, body = parse_response(raw)

        assert status == "HTTP/1.1 200 OK"
        assert int(headers["Content-Length"]) == len(body)

    def test_second_request_ignored(self, server: AssetServer, parse_response):
        """Test there is no keep-alive: pipelined requests get one answer."""
        raw = self._roundtrip(server, get("/robots.txt") + get("/robots.txt"))

        assert raw.count(b"HTTP/1.1 ") == 1

    def test_not_found(self, server: AssetServer):
        assert self._roundtrip(server, get("/missing")) == NOT_FOUND

    def test_client_gone_before_write(self, server: AssetServer, caplog):
        """Test a client that vanishes only costs its own connection."""
        caplog.set_level(logging.INFO, logger="assetserver.access")
        a, b = socket.socketpair()
        conn = Connection(socket=a, address=("127.0.0.1", 0))
        b.sendall(get("/robots.txt"))
        b.close()

        server._process_connection(conn)

        assert conn.state is ConnectionState.CLOSED
        # Logged, but with no bytes delivered
        assert '"/robots.txt" 200 0 -' in caplog.text

    def test_access_log_counts_body_bytes(self, server: AssetServer, static_dir: Path, caplog):
        caplog.set_level(logging.INFO, logger="assetserver.access")
        self._roundtrip(server, get("/robots.txt"))

        size = len((static_dir / "robots.txt").read_bytes())
        assert f'"/robots.txt" 200 {size} -' in caplog.text

    def test_worker_exception_contained(self, server: AssetServer, monkeypatch, caplog):
        """Test an unexpected error is logged and the connection still closed."""
        def explode(path, conn=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(server, "handle_path", explode)
        raw = self._roundtrip(server, get("/"))

        assert raw == b""
        assert "Connection error" in caplog.text
