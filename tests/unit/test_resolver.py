"""Tests for directory resolution and resource descriptors."""

import pytest

from py_bucketdav.descriptor import describe
from py_bucketdav.resolver import is_directory, is_marker_key, marker_key
from py_bucketdav.store_memory import MemoryObjectStore


class RecordingStore(MemoryObjectStore):
    """Memory store that records read calls."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str]] = []

    async def head(self, key):
        self.calls.append(("head", key))
        return await super().head(key)

    async def list(self, prefix="", delimiter=None, limit=1000):
        self.calls.append(("list", prefix))
        return await super().list(prefix, delimiter, limit)


@pytest.mark.asyncio
async def test_trailing_slash_needs_no_store_call():
    """Test that a trailing slash alone makes a directory."""
    store = RecordingStore()

    assert await is_directory(store, "/anything/")
    assert store.calls == [], f"unexpected store calls: {store.calls}"


@pytest.mark.asyncio
async def test_marker_makes_directory():
    """Test that a .dir marker makes an empty directory visible."""
    store = RecordingStore()
    await store.put("/empty/.dir", b"")

    assert await is_directory(store, "/empty")
    assert store.calls == [("head", "/empty/.dir")]


@pytest.mark.asyncio
async def test_children_make_directory_without_marker():
    """Test that a directory is inferred from keys under its prefix."""
    store = RecordingStore()
    await store.put("/photos/2024/img.jpg", b"jpeg")

    assert await is_directory(store, "/photos")
    assert await is_directory(store, "/photos/2024")


@pytest.mark.asyncio
async def test_plain_file_is_not_directory():
    """Test that a file key is not a directory."""
    store = RecordingStore()
    await store.put("/readme.txt", b"hi")
    await store.put("/readme.txt.bak", b"old")

    assert not await is_directory(store, "/readme.txt")
    assert store.calls == [("head", "/readme.txt/.dir"), ("list", "/readme.txt/")]


@pytest.mark.asyncio
async def test_missing_path_is_not_directory():
    """Test that a missing path looks like a file."""
    assert not await is_directory(MemoryObjectStore(), "/nope")


def test_marker_key():
    """Test marker key construction and detection."""
    assert marker_key("/docs") == "/docs/.dir"
    assert marker_key("/docs/") == "/docs/.dir"
    assert is_marker_key("/docs/.dir")
    assert not is_marker_key("/docs/my.dir")


@pytest.mark.asyncio
async def test_describe_collection():
    """Test that collections carry no file properties."""
    desc = await describe(MemoryObjectStore(), "/docs/", True)

    assert desc.is_collection
    assert desc.size is None
    assert desc.etag is None
    assert not desc.has_file_props()


@pytest.mark.asyncio
async def test_describe_file_fetches_metadata():
    """Test that files are described from their stored metadata."""
    store = MemoryObjectStore()
    stored = await store.put("/notes.txt", b"hello world", content_type="text/plain")

    desc = await describe(store, "/notes.txt", False)

    assert desc.size == 11
    assert desc.etag == stored.etag
    assert desc.last_modified == stored.uploaded
    assert desc.content_type == "text/plain"


@pytest.mark.asyncio
async def test_describe_file_default_content_type():
    """Test the octet-stream fallback."""
    store = MemoryObjectStore()
    await store.put("/blob", b"\x00\x01")

    desc = await describe(store, "/blob", False)

    assert desc.content_type == "application/octet-stream"


@pytest.mark.asyncio
async def test_describe_missing_file():
    """Test that a missing file yields a descriptor without byte fields."""
    desc = await describe(MemoryObjectStore(), "/gone.txt", False)

    assert desc.path == "/gone.txt"
    assert not desc.is_collection
    assert not desc.has_file_props()


@pytest.mark.asyncio
async def test_describe_uses_given_metadata():
    """Test that listing metadata avoids another lookup."""
    store = RecordingStore()
    metadata = await store.put("/a.txt", b"abc")

    desc = await describe(store, "/a.txt", False, metadata=metadata)

    assert desc.size == 3
    assert store.calls == []
