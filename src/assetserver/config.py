"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the asset server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m assetserver --port 3000                         │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── ASSET_PORT=3000 python -m assetserver                     │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The route table is NOT part of this config. It is fixed at startup and
passed to the server separately (see http/router.py).

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .content.compression import DEFAULT_LEVEL
from .http.request import READ_SIZE
from .http.response import CACHE_MAX_AGE


LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Asset server configuration.

    Usage:
        # Defaults: 127.0.0.1:8080, files from ./static
        config = ServerConfig()

        # Containers
        config = ServerConfig(host="0.0.0.0", static_dir="/srv/static")
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces (production)
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port
    (useful in tests; read the real one from SocketServer.address).
    """

    backlog: int = 128
    """Maximum number of queued connections waiting for accept()."""

    read_size: int = READ_SIZE
    """
    Bytes read from each connection (one recv() call).
    Requests longer than this are truncated; only the first line matters.
    """

    timeout: Optional[float] = None
    """
    Socket timeout for the request read and response write.
    None = wait forever. A stalled client then ties up one worker
    thread, but never the accept loop.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    static_dir: str = "static"
    """Directory that route table file paths are relative to."""

    compression_level: int = DEFAULT_LEVEL
    """gzip level for HTML (0-9). 9 = smallest output."""

    cache_max_age: int = CACHE_MAX_AGE
    """max-age sent with Cache-Control for cacheable asset kinds."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Access log format: 'text' or 'json'.
    JSON is better for log aggregators, text for humans.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        ASSET_HOST               Server host (default: 127.0.0.1)
        ASSET_PORT               Server port (default: 8080)
        ASSET_STATIC_DIR         Static files directory (default: static)
        ASSET_COMPRESSION_LEVEL  gzip level (default: 9)
        ASSET_LOG_LEVEL          Logging level (default: INFO)
        ASSET_LOG_FORMAT         text or json (default: text)

        =====================================================================
        """
        return cls(
            host=os.getenv("ASSET_HOST", "127.0.0.1"),
            port=int(os.getenv("ASSET_PORT", "8080")),
            static_dir=os.getenv("ASSET_STATIC_DIR", "static"),
            compression_level=int(os.getenv("ASSET_COMPRESSION_LEVEL", str(DEFAULT_LEVEL))),
            log_level=os.getenv("ASSET_LOG_LEVEL", "INFO"),
            log_format=os.getenv("ASSET_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at server construction so a bad value fails at startup,
        not on the first request.

        Raises:
            ValueError: Describing the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.read_size < 1:
            raise ValueError("read_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not 0 <= self.compression_level <= 9:
            raise ValueError(f"compression_level must be 0-9, got {self.compression_level}")

        if self.cache_max_age < 0:
            raise ValueError("cache_max_age must be >= 0")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {self.log_format!r}")
