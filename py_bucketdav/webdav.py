"""WebDAV resource types and object store records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Zero-length object that makes an otherwise empty directory discoverable
DIR_MARKER = ".dir"


@dataclass
class ObjectMetadata:
    """Metadata of one object in the store."""

    key: str
    size: int = 0
    uploaded: datetime | None = None
    etag: str = ""
    content_type: str = ""


@dataclass
class StoredObject:
    """An object body together with its metadata."""

    metadata: ObjectMetadata
    body: BinaryIO


@dataclass
class ListResult:
    """Result of a prefix listing."""

    objects: list[ObjectMetadata] = field(default_factory=list)
    delimited_prefixes: list[str] = field(default_factory=list)
    truncated: bool = False

    def is_empty(self) -> bool:
        """Check if the listing returned neither objects nor prefixes."""
        return not self.objects and not self.delimited_prefixes


@dataclass
class ResourceDescriptor:
    """Protocol-visible attributes of one WebDAV resource.

    File-only fields stay ``None`` for collections and for files whose
    metadata could not be fetched.
    """

    path: str
    is_collection: bool = False
    size: int | None = None
    last_modified: datetime | None = None
    etag: str | None = None
    content_type: str | None = None

    def has_file_props(self) -> bool:
        """Check if byte-level properties are available."""
        return not self.is_collection and self.size is not None
