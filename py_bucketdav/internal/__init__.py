"""Protocol-level building blocks shared by the server."""

from .elements import (
    COLLECTION,
    NAMESPACE,
    NS,
    MultiStatus,
    PropStat,
    Response,
    ResourceType,
    Status,
    format_http_date,
    response_from_descriptor,
)
from .internal import (
    Depth,
    HTTPError,
    Method,
    parse_depth,
)
from .server import serve_error, serve_multistatus

__all__ = [
    "COLLECTION",
    "NAMESPACE",
    "NS",
    "MultiStatus",
    "PropStat",
    "Response",
    "ResourceType",
    "Status",
    "format_http_date",
    "response_from_descriptor",
    "Depth",
    "HTTPError",
    "Method",
    "parse_depth",
    "serve_error",
    "serve_multistatus",
]
