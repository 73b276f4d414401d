"""HTTP Basic authentication gate."""

from __future__ import annotations

import base64
import binascii
import hmac
import logging

from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from .config import ServerConfig

logger = logging.getLogger(__name__)


def parse_basic_auth(header: str) -> tuple[str, str] | None:
    """Decode a Basic Authorization header.

    Returns:
        Tuple of (username, password), or None if the header is malformed
    """
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def _matches(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def authenticate(request: Request, config: ServerConfig) -> StarletteResponse | None:
    """Check the request against the configured credentials.

    Returns:
        None if the request may proceed, otherwise the 401 response to send
    """
    header = request.headers.get("authorization", "")
    credentials = parse_basic_auth(header) if header else None
    if credentials is None:
        return StarletteResponse(
            content="Unauthorized",
            status_code=401,
            headers={"WWW-Authenticate": f'Basic realm="{config.realm}"'},
            media_type="text/plain",
        )

    username, password = credentials
    # Both comparisons always run
    user_ok = _matches(username, config.username)
    password_ok = _matches(password, config.password)
    # An unconfigured credential pair never matches
    if not (config.username and user_ok and password_ok):
        logger.info("webdav: rejected credentials for user %r", username)
        return StarletteResponse(content="Unauthorized", status_code=401, media_type="text/plain")

    return None
