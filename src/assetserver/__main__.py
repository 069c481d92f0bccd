"""
=============================================================================
ASSETSERVER CLI ENTRY POINT
=============================================================================

    # Run with defaults (localhost:8080, files from ./static)
    python -m assetserver

    # Listen on all interfaces, serve another directory
    python -m assetserver --host 0.0.0.0 --static /srv/site

    # Replace the built-in routes
    python -m assetserver --route /=home.html --route /logo.png=img/logo.png

Defaults come from the environment (ASSET_PORT, ASSET_STATIC_DIR, ...,
see config.py); flags override them.

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .config import LOG_FORMATS, ServerConfig
from .http.router import RouteTable, default_route_table, parse_route
from .server import AssetServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Create the argument parser, with defaults taken from defaults."""
    parser = argparse.ArgumentParser(
        prog="assetserver",
        description="Serve a fixed set of static assets over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m assetserver                            # Run with defaults
  python -m assetserver --port 3000                # Custom port
  python -m assetserver --static ./public          # Another directory
  python -m assetserver --route /=home.html        # Custom route table
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host}, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--static", "-s",
        default=defaults.static_dir,
        help=f"Directory route files are read from (default: {defaults.static_dir})"
    )

    parser.add_argument(
        "--route", "-r",
        action="append",
        default=None,
        metavar="PATH=FILE",
        help="Serve FILE (relative to --static) at PATH. Repeatable; replaces the built-in routes"
    )

    parser.add_argument(
        "--compression-level",
        type=int,
        choices=range(0, 10),
        default=defaults.compression_level,
        metavar="0-9",
        help=f"gzip level for HTML (default: {defaults.compression_level})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"assetserver {__version__}"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code. Bind failures exit with 1.
    """
    parser = build_parser(ServerConfig.from_env())
    args = parser.parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        static_dir=args.static,
        compression_level=args.compression_level,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    if args.route:
        try:
            routes = RouteTable.from_pairs(parse_route(value) for value in args.route)
        except ValueError as e:
            parser.error(str(e))
    else:
        routes = default_route_table()

    try:
        server = AssetServer(config, routes=routes)
    except ValueError as e:
        parser.error(str(e))

    try:
        server.run()
    except OSError as e:
        print(f"assetserver: cannot listen on {config.host}:{config.port}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
