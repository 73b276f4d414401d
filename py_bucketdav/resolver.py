"""Directory detection over a flat key space."""

from __future__ import annotations

from .store import ObjectStore
from .webdav import DIR_MARKER

# A single entry is enough to prove the prefix is populated
RESOLVE_LISTING_LIMIT = 1


def marker_key(path: str) -> str:
    """Return the directory marker key for ``path``."""
    if not path.endswith("/"):
        path += "/"
    return path + DIR_MARKER


def is_marker_key(key: str) -> bool:
    """Check if ``key`` is a directory marker."""
    return key == DIR_MARKER or key.endswith("/" + DIR_MARKER)


async def is_directory(store: ObjectStore, path: str) -> bool:
    """Check whether ``path`` denotes a directory.

    A trailing slash, a ``.dir`` marker or any key below ``path/`` makes it
    one. A path with neither marker nor children cannot be told apart from a
    missing one and is reported as a file.
    """
    if path.endswith("/"):
        return True

    if await store.head(marker_key(path)) is not None:
        return True

    listed = await store.list(prefix=path + "/", delimiter="/", limit=RESOLVE_LISTING_LIMIT)
    return not listed.is_empty()
