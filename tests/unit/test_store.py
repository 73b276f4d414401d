"""Tests for the bundled object stores."""

from io import BytesIO

import pytest

from py_bucketdav.internal import HTTPError
from py_bucketdav.store import list_keys
from py_bucketdav.store_local import LocalObjectStore
from py_bucketdav.store_memory import MemoryObjectStore


@pytest.fixture(params=["memory", "local"])
def store(request, tmp_path):
    """Each bundled store implementation."""
    if request.param == "memory":
        return MemoryObjectStore()
    return LocalObjectStore(tmp_path / "store")


def test_list_keys_groups_by_delimiter():
    """Test prefix grouping with a delimiter."""
    keys = ["/d/a.txt", "/d/sub/x", "/d/sub/y", "/d/sub2/z", "/e/f"]

    objects, prefixes, truncated = list_keys(keys, "/d/", "/", 100)

    assert objects == ["/d/a.txt"]
    assert prefixes == ["/d/sub/", "/d/sub2/"]
    assert not truncated


def test_list_keys_without_delimiter_is_recursive():
    """Test that listing without a delimiter returns nested keys."""
    keys = ["/d/sub/x", "/d/a.txt"]

    objects, prefixes, _ = list_keys(keys, "/d/", None, 100)

    assert objects == ["/d/a.txt", "/d/sub/x"]
    assert prefixes == []


def test_list_keys_limit_counts_objects_and_prefixes():
    """Test that the limit bounds objects and prefixes together."""
    keys = ["/a", "/b/1", "/b/2", "/c", "/d/1"]

    objects, prefixes, truncated = list_keys(keys, "/", "/", 3)

    assert objects == ["/a", "/c"]
    assert prefixes == ["/b/"]
    assert truncated


@pytest.mark.asyncio
async def test_put_get_head(store):
    """Test storing and reading back an object."""
    metadata = await store.put("/docs/a.txt", BytesIO(b"hello"), content_type="text/plain")

    assert metadata.size == 5
    assert metadata.etag == "5d41402abc4b2a76b9719d911017c592"
    assert metadata.uploaded is not None

    head = await store.head("/docs/a.txt")
    assert head == metadata

    obj = await store.get("/docs/a.txt")
    assert obj is not None
    with obj.body:
        assert obj.body.read() == b"hello"
    assert obj.metadata.content_type == "text/plain"


@pytest.mark.asyncio
async def test_missing_key(store):
    """Test lookups of missing keys."""
    assert await store.head("/missing") is None
    assert await store.get("/missing") is None


@pytest.mark.asyncio
async def test_put_overwrites(store):
    """Test last-writer-wins on put."""
    await store.put("/k", b"one")
    await store.put("/k", b"three", content_type="text/plain")

    obj = await store.get("/k")
    with obj.body:
        assert obj.body.read() == b"three"
    assert obj.metadata.size == 5


@pytest.mark.asyncio
async def test_delete_is_idempotent(store):
    """Test deleting present and absent keys."""
    await store.put("/k", b"v")

    await store.delete("/k")
    await store.delete("/k")

    assert await store.head("/k") is None


@pytest.mark.asyncio
async def test_list_with_delimiter(store):
    """Test delimited listing through the store interface."""
    await store.put("/d/.dir", b"")
    await store.put("/d/a.txt", b"a")
    await store.put("/d/sub/b.txt", b"b")
    await store.put("/other", b"o")

    listed = await store.list(prefix="/d/", delimiter="/", limit=10)

    assert [o.key for o in listed.objects] == ["/d/.dir", "/d/a.txt"]
    assert listed.delimited_prefixes == ["/d/sub/"]
    assert not listed.is_empty()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "key", ["", "/bad\x00key", "/bad\x01key", "/dir/bad\x1fname", "/bad\ufffekey"]
)
async def test_invalid_key_rejected(store, key):
    """Test that keys which cannot appear in an XML listing are refused."""
    with pytest.raises(HTTPError) as exc_info:
        await store.put(key, b"")
    assert exc_info.value.code == 400
    assert not (await store.list()).objects


@pytest.mark.asyncio
async def test_key_with_tab_and_unicode_accepted(store):
    """Test that XML-safe characters outside ASCII are stored."""
    await store.put("/caf\u00e9/a\tb \U0001f600", b"x")

    assert await store.head("/caf\u00e9/a\tb \U0001f600") is not None


class FailingStream:
    """Body stream raising on its second read."""

    def __init__(self, first_chunk: bytes):
        self.first_chunk = first_chunk
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        if self.reads > 1:
            raise OSError("connection reset")
        return self.first_chunk


@pytest.mark.asyncio
async def test_failed_put_keeps_previous_version(store):
    """Test that a body stream failing mid-write leaves the old object intact."""
    await store.put("/a.txt", b"old-content", content_type="text/plain")

    with pytest.raises(OSError):
        await store.put("/a.txt", FailingStream(b"NEW" * 10))

    head = await store.head("/a.txt")
    assert head.size == 11
    assert head.content_type == "text/plain"
    obj = await store.get("/a.txt")
    with obj.body:
        assert obj.body.read() == b"old-content"


@pytest.mark.asyncio
async def test_local_store_failed_put_leaves_no_partial_file(tmp_path):
    """Test that an aborted write removes its temporary file."""
    local = LocalObjectStore(tmp_path)

    with pytest.raises(OSError):
        await local.put("/new.txt", FailingStream(b"partial"))

    assert list(local.objects_dir.iterdir()) == []
    assert list(local.meta_dir.iterdir()) == []
    assert await local.get("/new.txt") is None


@pytest.mark.asyncio
async def test_local_store_persists(tmp_path):
    """Test that a second instance sees objects written by the first."""
    first = LocalObjectStore(tmp_path)
    await first.put("/a b/c?.txt", b"data", content_type="text/plain")

    second = LocalObjectStore(tmp_path)
    head = await second.head("/a b/c?.txt")

    assert head is not None
    assert head.content_type == "text/plain"
    listed = await second.list(prefix="/a b/")
    assert [o.key for o in listed.objects] == ["/a b/c?.txt"]


def test_local_store_rejects_file_root(tmp_path):
    """Test that the root must be a directory."""
    path = tmp_path / "file"
    path.write_bytes(b"")

    with pytest.raises(ValueError):
        LocalObjectStore(path)
