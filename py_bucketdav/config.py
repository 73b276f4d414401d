"""Server configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_REALM = "WebDAV Server"
DEFAULT_LISTING_LIMIT = 10


@dataclass
class ServerConfig:
    """Configuration for the WebDAV handler.

    Passed explicitly to the handler; nothing is read from the environment
    unless ``from_env`` is called.
    """

    # Basic auth credential pair
    username: str = ""
    password: str = ""
    realm: str = DEFAULT_REALM

    # Maximum number of children listed by PROPFIND, not counting the directory marker
    listing_limit: int = DEFAULT_LISTING_LIMIT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Build a configuration from environment variables.

        Reads AUTH_USERNAME, AUTH_PASSWORD, WEBDAV_REALM and
        WEBDAV_LISTING_LIMIT.
        """
        env = os.environ if environ is None else environ
        limit = env.get("WEBDAV_LISTING_LIMIT", "")
        return cls(
            username=env.get("AUTH_USERNAME", ""),
            password=env.get("AUTH_PASSWORD", ""),
            realm=env.get("WEBDAV_REALM", "") or DEFAULT_REALM,
            listing_limit=int(limit) if limit else DEFAULT_LISTING_LIMIT,
        )
