"""Internal server utilities for WebDAV."""

from __future__ import annotations

import logging

from starlette.responses import Response as StarletteResponse

from .elements import MultiStatus
from .internal import HTTPError

logger = logging.getLogger(__name__)

XML_MEDIA_TYPE = "application/xml; charset=utf-8"


def serve_error(err: Exception) -> StarletteResponse:
    """Serve an error response.

    HTTP errors keep their code and message; anything else is logged and
    answered with a bare 500.
    """
    if isinstance(err, HTTPError):
        if err.code >= 500:
            logger.error("webdav: %s", err)
        return StarletteResponse(content=str(err), status_code=err.code, media_type="text/plain")

    logger.error("webdav: unhandled error", exc_info=err)
    return StarletteResponse(
        content="Internal Server Error", status_code=500, media_type="text/plain"
    )


def serve_multistatus(ms: MultiStatus, with_body: bool = True) -> StarletteResponse:
    """Serve a multistatus response."""
    content = ms.to_bytes()
    if not with_body:
        return StarletteResponse(
            status_code=207,
            headers={"Content-Length": str(len(content))},
            media_type=XML_MEDIA_TYPE,
        )
    return StarletteResponse(
        content=content,
        status_code=207,  # Multi-Status
        media_type=XML_MEDIA_TYPE,
    )
