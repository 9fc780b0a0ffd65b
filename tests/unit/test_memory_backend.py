"""
Tests for pathsync.backends module.
"""

import threading

import pytest

from pathsync.backends import MemoryBackend, ReadWriteLock, get_backend
from pathsync.core.paths import Depth, FilePath, FolderPath, MissingFileName, PathError


def sorted_entries(entries):
    return sorted(entries, key=lambda entry: entry[0])


class TestMemoryBackendBlocking:
    """Tests for the synchronous MemoryBackend API."""

    def test_empty(self, local_backend: MemoryBackend) -> None:
        assert len(local_backend) == 0
        assert local_backend.get_blocking(FilePath.parse("a/b")) is None
        assert local_backend.list_blocking(Depth.RECURSIVE, FolderPath.root()) == []

    def test_set_returns_previous(self, local_backend: MemoryBackend) -> None:
        path = FilePath.parse("folder/item")
        assert local_backend.set_blocking(path, "one") is None
        assert local_backend.set_blocking(path, "two") == "one"
        assert local_backend.get_blocking(path) == "two"

    def test_set_none_deletes(self, local_backend: MemoryBackend) -> None:
        path = FilePath.parse("folder/item")
        local_backend.insert_blocking(path, "one")
        assert local_backend.set_blocking(path, None) == "one"
        assert local_backend.get_blocking(path) is None
        assert path not in local_backend

    def test_remove_missing_returns_none(self, local_backend: MemoryBackend) -> None:
        assert local_backend.remove_blocking(FilePath.parse("nothing/here")) is None

    def test_insert_rejects_none(self, local_backend: MemoryBackend) -> None:
        with pytest.raises(ValueError):
            local_backend.insert_blocking(FilePath.parse("a"), None)

    def test_depth_semantics(self, local_backend: MemoryBackend, seed) -> None:
        seed(local_backend, {"folder/a": 1, "folder/sub/b": 2, "other/c": 3})
        folder = FolderPath.of(["folder"])

        simple = local_backend.list_blocking(Depth.SIMPLE, folder)
        recursive = local_backend.list_blocking(Depth.RECURSIVE, folder)

        assert simple == [(FilePath.parse("folder/a"), 1)]
        assert sorted_entries(recursive) == [
            (FilePath.parse("folder/a"), 1),
            (FilePath.parse("folder/sub/b"), 2),
        ]

    def test_simple_root_lists_top_level_items(self, local_backend: MemoryBackend, seed) -> None:
        seed(local_backend, {"top": 1, "folder/a": 2})
        assert local_backend.list_blocking(Depth.SIMPLE, FolderPath.root()) == [
            (FilePath.parse("top"), 1)
        ]

    def test_reads_return_copies(self, local_backend: MemoryBackend) -> None:
        path = FilePath.parse("folder/item")
        local_backend.insert_blocking(path, {"tags": ["a"]})

        fetched = local_backend.get_blocking(path)
        fetched["tags"].append("b")
        listed = local_backend.list_blocking(Depth.RECURSIVE, FolderPath.root())
        listed[0][1]["tags"].append("c")

        assert local_backend.get_blocking(path) == {"tags": ["a"]}

    def test_writes_store_copies(self, local_backend: MemoryBackend) -> None:
        path = FilePath.parse("folder/item")
        item = ["a"]
        local_backend.insert_blocking(path, item)
        item.append("b")
        assert local_backend.get_blocking(path) == ["a"]

    def test_listing_survives_later_mutation(self, local_backend: MemoryBackend, seed) -> None:
        seed(local_backend, {"a": 1, "b": 2})
        listed = local_backend.list_blocking(Depth.RECURSIVE, FolderPath.root())
        for path, _ in listed:
            local_backend.remove_blocking(path)
        assert len(listed) == 2
        assert len(local_backend) == 0

    def test_initial_items(self) -> None:
        backend = MemoryBackend({FilePath.parse("a/b"): "x"}, name="seeded")
        assert backend.name == "seeded"
        assert backend.get_blocking(FilePath.parse("a/b")) == "x"

    def test_from_dict_and_to_dict(self) -> None:
        backend = MemoryBackend.from_dict({"folder/b": 2, "folder/a": 1, "top": 0})
        assert backend.to_dict() == {"top": 0, "folder/a": 1, "folder/b": 2}
        assert list(backend.to_dict()) == ["top", "folder/a", "folder/b"]

    def test_from_dict_rejects_empty_key(self) -> None:
        with pytest.raises(MissingFileName):
            MemoryBackend.from_dict({"": 1})

    @pytest.mark.parametrize(
        "data",
        [
            {"x": 1, "/x": 2},
            {"a/b": 3, "a//b": 4},
        ],
    )
    def test_from_dict_rejects_aliased_keys(self, data: dict) -> None:
        first, second = data
        with pytest.raises(PathError, match="name the same path") as excinfo:
            MemoryBackend.from_dict(data)
        assert repr(first) in str(excinfo.value)
        assert repr(second) in str(excinfo.value)

    @pytest.mark.parametrize("key", ["/x", "a//b", "folder/item/"])
    def test_from_dict_rejects_non_canonical_keys(self, key: str) -> None:
        with pytest.raises(PathError, match="not canonical"):
            MemoryBackend.from_dict({key: 1})

    def test_to_dict_returns_the_keys_read(self) -> None:
        data = {"top": 0, "folder/a": 1, "folder/sub/b": 2}
        assert MemoryBackend.from_dict(data).to_dict() == data

    def test_repr(self, local_backend: MemoryBackend) -> None:
        assert repr(local_backend) == "MemoryBackend(name='local', entries=0)"


class TestMemoryBackendAsync:
    """Tests for the coroutine contract."""

    @pytest.mark.asyncio
    async def test_insert_get_remove(self, local_backend: MemoryBackend) -> None:
        path = FilePath.parse("folder/item")
        assert await local_backend.insert(path, "store me") is None
        assert await local_backend.get(path) == "store me"
        assert await local_backend.remove(path) == "store me"
        assert await local_backend.get(path) is None

    @pytest.mark.asyncio
    async def test_insert_rejects_none(self, local_backend: MemoryBackend) -> None:
        with pytest.raises(ValueError):
            await local_backend.insert(FilePath.parse("a"), None)

    @pytest.mark.asyncio
    async def test_list(self, local_backend: MemoryBackend, seed) -> None:
        seed(local_backend, {"folder/a": 1, "folder/sub/b": 2})
        entries = await local_backend.list(Depth.SIMPLE, FolderPath.of(["folder"]))
        assert entries == [(FilePath.parse("folder/a"), 1)]


class TestReadWriteLock:
    """Tests for ReadWriteLock."""

    def test_readers_share(self) -> None:
        lock = ReadWriteLock()
        with lock.read_locked():
            with lock.read_locked():
                pass

    def test_writer_waits_for_readers(self) -> None:
        lock = ReadWriteLock()
        order: list[str] = []
        reader_in = threading.Event()
        release_reader = threading.Event()
        writer_in = threading.Event()

        def reader() -> None:
            with lock.read_locked():
                reader_in.set()
                release_reader.wait(timeout=5)
                order.append("read")

        def writer() -> None:
            with lock.write_locked():
                writer_in.set()
                order.append("write")

        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        assert reader_in.wait(timeout=5)

        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        # The reader still holds the lock, so the writer must not get in.
        assert not writer_in.wait(timeout=0.2)

        release_reader.set()
        reader_thread.join(timeout=5)
        writer_thread.join(timeout=5)

        assert writer_in.is_set()
        assert order == ["read", "write"]

    def test_reader_waits_for_writer(self) -> None:
        lock = ReadWriteLock()
        writer_in = threading.Event()
        release_writer = threading.Event()
        reader_in = threading.Event()

        def writer() -> None:
            with lock.write_locked():
                writer_in.set()
                release_writer.wait(timeout=5)

        def reader() -> None:
            with lock.read_locked():
                reader_in.set()

        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        assert writer_in.wait(timeout=5)

        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        assert not reader_in.wait(timeout=0.2)

        release_writer.set()
        writer_thread.join(timeout=5)
        reader_thread.join(timeout=5)

        assert reader_in.is_set()

    def test_concurrent_writes(self) -> None:
        backend: MemoryBackend[int] = MemoryBackend()

        def write(worker: int) -> None:
            for i in range(50):
                backend.insert_blocking(FilePath.from_segments([f"w{worker}", str(i)]), i)

        threads = [threading.Thread(target=write, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert len(backend) == 200


class TestGetBackend:
    """Tests for get_backend."""

    def test_memory(self) -> None:
        backend = get_backend("memory", name="cache")
        assert isinstance(backend, MemoryBackend)
        assert backend.name == "cache"

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unsupported backend"):
            get_backend("s3")
