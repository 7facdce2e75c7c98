"""Tests for LocalObjectStore."""

import os
import stat

import pytest

from aioremotefs.config import WriteConfig
from aioremotefs.driver import RemoteDriver
from aioremotefs.errors import MetadataError, StorageError
from aioremotefs.filesystem.local import LocalObjectStore

PRIVATE = WriteConfig(acl=None, visibility="private")
PUBLIC = WriteConfig(acl=None, visibility="public")


def _mode(path) -> int:
    return stat.S_IMODE(os.stat(path).st_mode)


class TestLocalObjectStore:
    """Test cases for LocalObjectStore."""

    @pytest.fixture
    def root(self, tmp_path):
        """Create a populated root directory."""
        root = tmp_path / "root"
        (root / "a" / "sub").mkdir(parents=True)
        (root / "a" / "x.txt").write_bytes(b"x")
        (root / "a" / "sub" / "z.txt").write_bytes(b"zz")
        return root

    @pytest.fixture
    def store(self, root):
        return LocalObjectStore(str(root))

    def test_from_uri(self, root):
        assert LocalObjectStore.from_uri(f"file://{root}").root == str(root)
        assert LocalObjectStore.from_uri(str(root)).root == str(root)

    async def test_list_directory(self, store):
        assert await store.list_directory("a") == ["sub", "x.txt"]
        assert await store.list_directory("") == ["a"]

    async def test_list_directory_missing(self, store):
        with pytest.raises(StorageError):
            await store.list_directory("missing")

    async def test_is_dir(self, store):
        assert await store.is_dir("") is True
        assert await store.is_dir("a/sub") is True
        assert await store.is_dir("a/x.txt") is False
        assert await store.is_dir("missing") is False

    async def test_is_file_and_exists(self, store):
        assert await store.is_file("a/x.txt") is True
        assert await store.is_file("a") is False
        assert await store.exists("a") is True
        assert await store.exists("missing") is False

    async def test_create_directory(self, store, root):
        await store.create_directory("a/new", PUBLIC)
        assert (root / "a" / "new").is_dir()
        assert _mode(root / "a" / "new") == 0o755

    async def test_create_directory_existing(self, store, root):
        await store.create_directory("a/sub", PRIVATE)
        assert _mode(root / "a" / "sub") == 0o700

    async def test_write_and_file_size(self, store, root):
        await store.write("b/new.txt", b"hello", PRIVATE)
        assert (root / "b" / "new.txt").read_bytes() == b"hello"
        assert _mode(root / "b" / "new.txt") == 0o600
        assert await store.file_size("b/new.txt") == 5

    async def test_file_size_missing(self, store):
        with pytest.raises(MetadataError):
            await store.file_size("missing.txt")

    async def test_copy(self, store, root):
        await store.copy("a/x.txt", "c/x.txt", PUBLIC)
        assert (root / "a" / "x.txt").exists()
        assert (root / "c" / "x.txt").read_bytes() == b"x"
        assert _mode(root / "c" / "x.txt") == 0o644

    async def test_copy_missing(self, store):
        with pytest.raises(StorageError):
            await store.copy("missing.txt", "c/x.txt", PUBLIC)

    async def test_move(self, store, root):
        await store.move("a/x.txt", "a/sub/moved.txt", PRIVATE)
        assert not (root / "a" / "x.txt").exists()
        assert (root / "a" / "sub" / "moved.txt").read_bytes() == b"x"

    async def test_move_missing(self, store):
        with pytest.raises(StorageError):
            await store.move("missing.txt", "a/moved.txt", PRIVATE)


class TestLocalDriver:
    """End to end through RemoteDriver on a local directory."""

    @pytest.fixture
    def driver(self, tmp_path):
        return RemoteDriver(
            LocalObjectStore(str(tmp_path)), "https://cdn.example.com/", config=PRIVATE
        )

    async def test_create_directory_then_glob(self, driver, tmp_path):
        assert await driver.create_directory("a/b/c") is True
        assert (tmp_path / "a" / "b" / "c").is_dir()
        assert await driver.file_put_contents("a/b/c/one.txt", b"1") == 1
        assert await driver.file_put_contents("a/b/.two.txt", b"2") == 1
        assert await driver.glob("a/*/*") == [
            "https://cdn.example.com/a/b/c/",
        ]
        assert await driver.glob("a/b/*/*.txt") == [
            "https://cdn.example.com/a/b/c/one.txt",
        ]

    async def test_write_session(self, driver, tmp_path):
        async with driver.open_write("s/stream.bin") as session:
            session.write(b"abc")
        assert (tmp_path / "s" / "stream.bin").read_bytes() == b"abc"
