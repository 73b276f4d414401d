"""Resource descriptors for PROPFIND responses."""

from __future__ import annotations

import logging

from .store import ObjectStore
from .webdav import DEFAULT_CONTENT_TYPE, ObjectMetadata, ResourceDescriptor

logger = logging.getLogger(__name__)


def descriptor_from_metadata(path: str, metadata: ObjectMetadata) -> ResourceDescriptor:
    """Build a file descriptor from object metadata."""
    return ResourceDescriptor(
        path=path,
        is_collection=False,
        size=metadata.size,
        last_modified=metadata.uploaded,
        etag=metadata.etag,
        content_type=metadata.content_type or DEFAULT_CONTENT_TYPE,
    )


async def describe(
    store: ObjectStore,
    path: str,
    is_collection: bool,
    metadata: ObjectMetadata | None = None,
) -> ResourceDescriptor:
    """Describe one resource.

    Collections carry no blob metadata. For files, ``metadata`` is used when
    the caller already has it (from a listing); otherwise the object is
    looked up. A missing object still yields a descriptor, without the
    byte-level fields, so a listing never aborts on one vanished member.
    """
    if is_collection:
        return ResourceDescriptor(path=path, is_collection=True)

    if metadata is None:
        metadata = await store.head(path)
    if metadata is None:
        logger.warning("webdav: no metadata for %r, describing without file properties", path)
        return ResourceDescriptor(path=path, is_collection=False)

    return descriptor_from_metadata(path, metadata)
