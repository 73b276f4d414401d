"""A WebDAV server over flat key-prefix object stores."""

from .config import ServerConfig
from .descriptor import describe
from .resolver import is_directory
from .server import Handler, create_app
from .store import ObjectStore
from .store_local import LocalObjectStore
from .store_memory import MemoryObjectStore
from .webdav import (
    ListResult,
    ObjectMetadata,
    ResourceDescriptor,
    StoredObject,
)

__version__ = "0.1.0"

__all__ = [
    "ServerConfig",
    "describe",
    "is_directory",
    "Handler",
    "create_app",
    "ObjectStore",
    "LocalObjectStore",
    "MemoryObjectStore",
    "ListResult",
    "ObjectMetadata",
    "ResourceDescriptor",
    "StoredObject",
]
