"""Directory-backed object store."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import UTC, datetime
from hashlib import md5
from pathlib import Path
from typing import BinaryIO
from urllib.parse import quote, unquote

from .internal import HTTPError
from .store import check_key, list_keys
from .webdav import ListResult, ObjectMetadata, StoredObject

# Longest file name most filesystems accept, minus room for the suffix
MAX_NAME_LENGTH = 240

# Partially written bodies; never listed since listing reads meta/
TMP_PREFIX = ".tmp-"


class LocalObjectStore:
    """Object store persisting objects as files in a local directory.

    Keys are flat: each object is one file under ``objects/`` named after the
    percent-encoded key, with its metadata in a JSON file under ``meta/``.
    Slashes in keys carry no meaning to the filesystem.
    """

    def __init__(self, root_dir: str | Path):
        """Initialize local object store.

        Args:
            root_dir: Directory holding the store, created if missing
        """
        self.root_dir = Path(root_dir).resolve()
        if self.root_dir.exists() and not self.root_dir.is_dir():
            raise ValueError(f"Root path is not a directory: {root_dir}")

        self.objects_dir = self.root_dir / "objects"
        self.meta_dir = self.root_dir / "meta"
        self.objects_dir.mkdir(parents=True, exist_ok=True)
        self.meta_dir.mkdir(parents=True, exist_ok=True)

    def _name(self, key: str) -> str:
        """Convert an object key to a file name.

        Raises:
            HTTPError: If the key cannot be stored
        """
        check_key(key)

        name = quote(key, safe="")
        if len(name) > MAX_NAME_LENGTH:
            raise HTTPError(400, Exception("webdav: object key too long"))
        return name

    def _object_path(self, key: str) -> Path:
        return self.objects_dir / self._name(key)

    def _meta_path(self, key: str) -> Path:
        return self.meta_dir / (self._name(key) + ".json")

    def _read_metadata(self, key: str) -> ObjectMetadata | None:
        try:
            raw = json.loads(self._meta_path(key).read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None

        uploaded = raw.get("uploaded")
        return ObjectMetadata(
            key=key,
            size=raw.get("size", 0),
            uploaded=datetime.fromisoformat(uploaded) if uploaded else None,
            etag=raw.get("etag", ""),
            content_type=raw.get("content_type", ""),
        )

    def _write_metadata(self, metadata: ObjectMetadata) -> None:
        raw = {
            "key": metadata.key,
            "size": metadata.size,
            "uploaded": metadata.uploaded.isoformat() if metadata.uploaded else None,
            "etag": metadata.etag,
            "content_type": metadata.content_type,
        }
        self._meta_path(metadata.key).write_text(json.dumps(raw), encoding="utf-8")

    async def head(self, key: str) -> ObjectMetadata | None:
        return self._read_metadata(key)

    async def get(self, key: str) -> StoredObject | None:
        metadata = self._read_metadata(key)
        if metadata is None:
            return None
        try:
            body = open(self._object_path(key), "rb")
        except FileNotFoundError:
            # Metadata without content: treat as missing
            return None
        return StoredObject(metadata=metadata, body=body)

    async def put(
        self, key: str, body: BinaryIO | bytes, content_type: str = ""
    ) -> ObjectMetadata:
        """Store an object.

        The body is written to a temporary file first, so a failing source
        leaves any previous version of the object intact.
        """
        path = self._object_path(key)

        digest = md5()
        size = 0
        fd, tmp_name = tempfile.mkstemp(dir=self.objects_dir, prefix=TMP_PREFIX)
        try:
            with os.fdopen(fd, "wb") as f:
                if isinstance(body, (bytes, bytearray)):
                    f.write(body)
                    digest.update(body)
                    size = len(body)
                else:
                    while chunk := body.read(8192):
                        f.write(chunk)
                        digest.update(chunk)
                        size += len(chunk)
            os.replace(tmp_name, path)
        except Exception:
            # Clean up on error
            Path(tmp_name).unlink(missing_ok=True)
            raise

        metadata = ObjectMetadata(
            key=key,
            size=size,
            uploaded=datetime.now(UTC),
            etag=digest.hexdigest(),
            content_type=content_type,
        )
        self._write_metadata(metadata)
        return metadata

    async def delete(self, key: str) -> None:
        for path in (self._meta_path(key), self._object_path(key)):
            try:
                path.unlink()
            except FileNotFoundError:
                continue

    async def list(
        self, prefix: str = "", delimiter: str | None = None, limit: int = 1000
    ) -> ListResult:
        all_keys = [
            unquote(name[: -len(".json")])
            for name in os.listdir(self.meta_dir)
            if name.endswith(".json")
        ]
        keys, prefixes, truncated = list_keys(all_keys, prefix, delimiter, limit)

        objects: list[ObjectMetadata] = []
        for key in keys:
            metadata = self._read_metadata(key)
            if metadata is not None:
                objects.append(metadata)

        return ListResult(objects=objects, delimited_prefixes=prefixes, truncated=truncated)
