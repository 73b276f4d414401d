"""In-memory object store."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from hashlib import md5
from io import BytesIO
from typing import BinaryIO

from .store import check_key, list_keys, read_body
from .webdav import ListResult, ObjectMetadata, StoredObject


class MemoryObjectStore:
    """Object store keeping every object in a dict.

    Useful for tests and throwaway servers; nothing survives the process.
    """

    def __init__(self) -> None:
        self._objects: dict[str, tuple[bytes, ObjectMetadata]] = {}

    async def head(self, key: str) -> ObjectMetadata | None:
        entry = self._objects.get(key)
        if entry is None:
            return None
        return replace(entry[1])

    async def get(self, key: str) -> StoredObject | None:
        entry = self._objects.get(key)
        if entry is None:
            return None
        data, metadata = entry
        return StoredObject(metadata=replace(metadata), body=BytesIO(data))

    async def put(
        self, key: str, body: BinaryIO | bytes, content_type: str = ""
    ) -> ObjectMetadata:
        check_key(key)
        data = read_body(body)
        metadata = ObjectMetadata(
            key=key,
            size=len(data),
            uploaded=datetime.now(UTC),
            etag=md5(data).hexdigest(),
            content_type=content_type,
        )
        self._objects[key] = (data, metadata)
        return replace(metadata)

    async def delete(self, key: str) -> None:
        self._objects.pop(key, None)

    async def list(
        self, prefix: str = "", delimiter: str | None = None, limit: int = 1000
    ) -> ListResult:
        keys, prefixes, truncated = list_keys(list(self._objects), prefix, delimiter, limit)
        return ListResult(
            objects=[replace(self._objects[key][1]) for key in keys],
            delimited_prefixes=prefixes,
            truncated=truncated,
        )

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, key: object) -> bool:
        return key in self._objects
