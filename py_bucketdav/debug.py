"""Debug logging utilities for the WebDAV server."""

from __future__ import annotations

import logging
from typing import Any

from .internal.xml_utils import format_xml

logger = logging.getLogger("py_bucketdav")

REQUEST_HEADERS = [
    "Content-Type",
    "Content-Length",
    "Depth",
    "Destination",
    "Authorization",
]

RESPONSE_HEADERS = ["Content-Type", "Content-Length", "ETag", "DAV", "Allow", "WWW-Authenticate"]

BODY_PREVIEW_LENGTH = 200


def is_xml_content(content_type: str | None) -> bool:
    """Check if content type is XML."""
    if not content_type:
        return False
    content_type = content_type.lower()
    return "application/xml" in content_type or "text/xml" in content_type


def _log_headers(headers: dict[str, Any], names: list[str]) -> None:
    logger.info("Headers:")
    for header in names:
        value = headers.get(header.lower(), headers.get(header))
        if value:
            if header == "Authorization":
                value = "[REDACTED]"
            logger.info("  %s: %s", header, value)


def _log_body(headers: dict[str, Any], body: bytes) -> None:
    content_type = headers.get("content-type", "")
    if is_xml_content(content_type):
        for line in format_xml(body).split("\n"):
            if line.strip():
                logger.info("  %s", line)
        return

    preview = body[:BODY_PREVIEW_LENGTH].decode("utf-8", errors="replace")
    logger.info("  [%d bytes] %s", len(body), preview)
    if len(body) > BODY_PREVIEW_LENGTH:
        logger.info("  ... (%d more bytes)", len(body) - BODY_PREVIEW_LENGTH)


def log_request(method: str, path: str, headers: dict[str, str], body: bytes | None) -> None:
    """Log an incoming HTTP request.

    Args:
        method: HTTP method
        path: Request path
        headers: Request headers
        body: Request body (if any)
    """
    logger.info("=" * 80)
    logger.info(">>> INCOMING REQUEST: %s %s", method, path)
    logger.info("-" * 80)
    _log_headers(headers, REQUEST_HEADERS)

    if body:
        logger.info("-" * 80)
        logger.info("Request Body:")
        _log_body(headers, body)

    logger.info("=" * 80)


def log_response(status_code: int, headers: dict[str, Any], body: bytes | None) -> None:
    """Log an outgoing HTTP response.

    Args:
        status_code: HTTP status code
        headers: Response headers
        body: Response body (if any)
    """
    logger.info("=" * 80)
    logger.info("<<< OUTGOING RESPONSE: %d", status_code)
    logger.info("-" * 80)
    _log_headers(headers, RESPONSE_HEADERS)

    if body:
        logger.info("-" * 80)
        logger.info("Response Body:")
        _log_body(headers, body)

    logger.info("=" * 80)


def setup_debug_logging() -> None:
    """Configure debug logging for the WebDAV server."""
    logger.setLevel(logging.DEBUG)

    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    # Messages are preformatted
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    logger.propagate = False
