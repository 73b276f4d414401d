"""Object store interface consumed by the WebDAV server."""

from __future__ import annotations

import re
from typing import BinaryIO, Protocol

from .internal import HTTPError
from .webdav import ListResult, ObjectMetadata, StoredObject

# Characters outside the XML 1.0 Char production cannot appear in an href
INVALID_KEY_CHARS = re.compile(r"[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


class ObjectStore(Protocol):
    """Flat key-value blob store with prefix listing."""

    async def head(self, key: str) -> ObjectMetadata | None:
        """Get object metadata, or None if the key does not exist."""
        ...

    async def get(self, key: str) -> StoredObject | None:
        """Get object body and metadata, or None if the key does not exist."""
        ...

    async def put(self, key: str, body: BinaryIO | bytes, content_type: str = "") -> ObjectMetadata:
        """Store an object, replacing any previous version."""
        ...

    async def delete(self, key: str) -> None:
        """Delete an object. Deleting a missing key is not an error."""
        ...

    async def list(
        self, prefix: str = "", delimiter: str | None = None, limit: int = 1000
    ) -> ListResult:
        """List objects whose key starts with ``prefix``.

        With a delimiter, keys containing it after the prefix are grouped
        into a single ``delimited_prefixes`` entry. ``limit`` bounds objects
        and prefixes together.
        """
        ...


def check_key(key: str) -> None:
    """Reject keys that cannot be stored or listed.

    Raises:
        HTTPError: 400 if the key is empty or not representable in XML
    """
    if not key or INVALID_KEY_CHARS.search(key):
        raise HTTPError(400, Exception(f"webdav: invalid object key {key!r}"))


def read_body(body: BinaryIO | bytes) -> bytes:
    """Read a whole request or object body into memory."""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    chunks = []
    while chunk := body.read(8192):
        chunks.append(chunk)
    return b"".join(chunks)


def list_keys(
    keys: list[str], prefix: str, delimiter: str | None, limit: int
) -> tuple[list[str], list[str], bool]:
    """Apply prefix, delimiter and limit semantics to a set of keys.

    Returns:
        Tuple of (object keys, delimited prefixes, truncated)
    """
    object_keys: list[str] = []
    prefixes: list[str] = []
    truncated = False

    for key in sorted(keys):
        if not key.startswith(prefix):
            continue

        if delimiter:
            rest = key[len(prefix) :]
            idx = rest.find(delimiter)
            if idx >= 0:
                common = prefix + rest[: idx + len(delimiter)]
                if prefixes and prefixes[-1] == common:
                    continue
                if len(object_keys) + len(prefixes) >= limit:
                    truncated = True
                    break
                prefixes.append(common)
                continue

        if len(object_keys) + len(prefixes) >= limit:
            truncated = True
            break
        object_keys.append(key)

    return object_keys, prefixes, truncated
