"""
HTTP layer: asset kinds, request-line parsing, routing and response framing.

Usage:
    from assetserver.http import Asset, RouteTable, parse_request_path, not_found
"""

from .assets import AssetKind, KindPolicy, content_type_for, kind_for_path, policy_for
from .request import DEFAULT_PATH, READ_SIZE, WHITESPACE, decode_lossy, parse_request_path, split_tokens
from .response import CACHE_MAX_AGE, HTTPResponse, ResponseBuilder, asset_response, not_found
from .router import Asset, RouteNotFound, RouteTable, default_route_table, parse_route
from .status_codes import HTTPStatus

__all__ = [
    # Assets
    "AssetKind",
    "KindPolicy",
    "content_type_for",
    "kind_for_path",
    "policy_for",
    # Request
    "DEFAULT_PATH",
    "READ_SIZE",
    "WHITESPACE",
    "decode_lossy",
    "parse_request_path",
    "split_tokens",
    # Response
    "CACHE_MAX_AGE",
    "HTTPResponse",
    "ResponseBuilder",
    "asset_response",
    "not_found",
    # Routing
    "Asset",
    "RouteNotFound",
    "RouteTable",
    "default_route_table",
    "parse_route",
    # Status
    "HTTPStatus",
]
