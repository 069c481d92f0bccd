"""
=============================================================================
ASSETSERVER
=============================================================================

A small concurrent HTTP server for a fixed set of static assets.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   GET /                   → index.html, minified, gzipped if smaller │
    │   GET /robots.txt         → robots.txt, as-is                        │
    │   GET /static/x.webm      → video, as-is, cacheable, Accept-Ranges   │
    │   GET /anything-else      → HTTP/1.1 404 Not Found                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Quick start:

    python -m assetserver --static ./static --port 8080

Or from code:

    from assetserver import AssetServer, ServerConfig

    server = AssetServer(ServerConfig(port=8080, static_dir="./static"))
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import AssetServer

__all__ = ["AssetServer", "ServerConfig", "__version__"]
