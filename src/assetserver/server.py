"""
=============================================================================
ASSET SERVER
=============================================================================

Ties the pieces together into a running server.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      REQUEST-TO-RESPONSE PIPELINE                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SocketServer (accept loop, main thread)                           │
    │        │                                                             │
    │        │ one new thread per connection                              │
    │        ▼                                                             │
    │   Connection.read_request()      one bounded recv()                 │
    │        │                                                             │
    │        ▼                                                             │
    │   parse_request_path()           "GET /x HTTP/1.1" → "/x"           │
    │        │                                                             │
    │        ▼                                                             │
    │   RouteTable.lookup()  ─────── RouteNotFound ─────┐                 │
    │        │                                           │                 │
    │        ▼                                           │                 │
    │   ContentStore.read()  ─────── StoreReadError ────┤                 │
    │        │                                           │                 │
    │        ▼                                           ▼                 │
    │   ContentTransformer.transform()             not_found()            │
    │        │                                      404, no body          │
    │        ▼                                           │                 │
    │   asset_response()                                 │                 │
    │        │                                           │                 │
    │        └──────────────► Connection.send_response() ◄┘                │
    │                                 │                                    │
    │                                 ▼                                    │
    │                          Connection.close()                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENCY
=============================================================================

Thread per connection, no pool, no limit. Workers share:

    - the RouteTable          (read-only mapping proxy)
    - the ContentStore        (only ever read)
    - the ContentTransformer  (settings only, no state)

Nothing shared is ever mutated after startup, so there are no locks.
An exception in one worker is logged and closes that connection only.

=============================================================================
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Tuple

from .access_log import AccessLog, log_access, timestamp
from .config import ServerConfig
from .content.transformer import ContentTransformer
from .core.connection import Connection, ConnectionState
from .core.socket_server import SocketServer
from .http.request import parse_request_path
from .http.response import HTTPResponse, asset_response, not_found
from .http.router import RouteNotFound, RouteTable, default_route_table
from .store import ContentStore, FileContentStore, StoreReadError


logger = logging.getLogger(__name__)


class AssetServer:
    """
    Static asset HTTP server.

    Usage:
        server = AssetServer(ServerConfig(port=8080, static_dir="./static"))
        server.run()   # Blocks until Ctrl+C / SIGTERM

        # Custom routes and an in-memory store
        server = AssetServer(
            routes=RouteTable([Asset("/", "index.html")]),
            store=MemoryContentStore({"index.html": b"<p>hi</p>"}),
        )
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        routes: Optional[RouteTable] = None,
        store: Optional[ContentStore] = None,
    ):
        """
        Initialize the server.

        Args:
            config: Server configuration. Defaults to ServerConfig().
            routes: Route table. Defaults to the built-in routes.
            store: Where asset bytes come from. Defaults to the
                  config's static_dir on disk.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail fast on invalid config

        self.routes = routes if routes is not None else default_route_table()
        self.store = store if store is not None else FileContentStore(Path(self.config.static_dir))
        self.transformer = ContentTransformer(level=self.config.compression_level)

        self._socket_server = SocketServer(self.config)

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port), valid once the server is listening."""
        return self._socket_server.address

    def run(self):
        """
        Start the server (blocking).

        Raises:
            OSError: If the listening port cannot be bound.
        """
        self._setup_logging()

        logger.info(
            f"Serving {len(self.routes)} routes from {self.store!r} "
            f"on {self.config.host}:{self.config.port}"
        )

        try:
            self._socket_server.start(self._dispatch)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")

        logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. In-flight workers finish on their own."""
        self._socket_server.shutdown()

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is ready (or timeout)."""
        return self._socket_server.wait_until_listening(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("assetserver").setLevel(level)

    # =========================================================================
    # CONNECTION DISPATCH
    # =========================================================================

    def _dispatch(self, conn: Connection):
        """
        Hand a connection to a fresh worker thread.

        Called on the accept loop; returns immediately.
        """
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """
        Run the pipeline for one connection (worker thread).

        Read → parse → respond → write → close. Nothing raised here
        escapes the thread.
        """
        with conn:
            try:
                raw = conn.read_request()
                path = parse_request_path(raw)

                response = self.handle_path(path, conn)
                sent = conn.send_response(response.to_bytes())
                if sent and conn.state is ConnectionState.ROUTED:
                    conn.state = ConnectionState.RESPONDED

                log_access(
                    AccessLog(
                        request_id=conn.id,
                        client_ip=conn.client_ip,
                        path=path,
                        status_code=response.status,
                        # Nothing delivered if the client went away
                        content_length=len(response.body) if sent else 0,
                        encoding=response.headers.get("Content-Encoding"),
                        duration_ms=conn.age * 1000,
                        timestamp=timestamp(),
                    ),
                    self.config.log_format,
                )
            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle_path(self, path: str, conn: Optional[Connection] = None) -> HTTPResponse:
        """
        Build the response for a request path.

        Args:
            path: Parsed request path.
            conn: Connection to record state transitions on, if any.

        Returns:
            200 with the (transformed) asset, or a bare 404.
        """
        try:
            asset = self.routes.lookup(path)
            if conn:
                conn.state = ConnectionState.ROUTED

            raw = self.store.read(asset.file_path)

        except (RouteNotFound, StoreReadError) as e:
            # Unknown path and stale route look the same to the client
            logger.debug(f"404 for {path!r}: {e}")
            if conn:
                conn.state = ConnectionState.REJECTED
            return not_found()

        payload = self.transformer.transform(raw, asset.kind)

        return asset_response(
            asset.content_type,
            payload.body,
            payload.encoding,
            asset.kind,
            cache_max_age=self.config.cache_max_age,
        )

    def handle_request(self, raw: bytes) -> bytes:
        """
        Turn raw request bytes into raw response bytes.

        The whole pipeline minus the socket. Useful for tests and for
        embedding the server behind another transport.
        """
        raw = raw[:self.config.read_size]
        return self.handle_path(parse_request_path(raw)).to_bytes()
