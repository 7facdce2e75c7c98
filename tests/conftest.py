import typing as T

import pytest

from aioremotefs.config import WriteConfig
from aioremotefs.errors import MetadataError, StorageError
from aioremotefs.interfaces import ObjectStore


class InMemoryObjectStore(ObjectStore):
    """Dict backed store recording every mutating call."""

    def __init__(self, keys: T.Iterable[str] = ()):
        self.objects: T.Dict[str, bytes] = {}
        self.markers: T.Set[str] = set()
        self.calls: T.List[T.Tuple[str, ...]] = []
        self.configs: T.Dict[str, WriteConfig] = {}
        self.failing: T.Set[str] = set()
        for key in keys:
            if key.endswith("/"):
                self.markers.add(key.rstrip("/"))
            else:
                self.objects[key] = b""

    def _maybe_fail(self, method: str, key: str):
        if method in self.failing:
            if method == "file_size":
                raise MetadataError("Unable to retrieve file size: %r" % key)
            raise StorageError("%s failed: %r" % (method, key))

    def _all_keys(self) -> T.List[str]:
        return sorted(set(self.objects) | self.markers)

    async def list_directory(self, key: str) -> T.List[str]:
        self._maybe_fail("list_directory", key)
        prefix = key + "/" if key else ""
        names = []
        for item in self._all_keys():
            if item == key or not item.startswith(prefix):
                continue
            name = item[len(prefix) :].split("/", 1)[0]
            if name not in names:
                names.append(name)
        return names

    async def is_dir(self, key: str) -> bool:
        self._maybe_fail("is_dir", key)
        if not key:
            return True
        if key in self.markers:
            return True
        return any(item.startswith(key + "/") for item in self._all_keys())

    async def is_file(self, key: str) -> bool:
        return key in self.objects

    async def create_directory(self, key: str, config: WriteConfig) -> None:
        self._maybe_fail("create_directory", key)
        self.calls.append(("create_directory", key))
        self.markers.add(key)
        self.configs[key] = config

    async def write(self, key: str, data: bytes, config: WriteConfig) -> None:
        self._maybe_fail("write", key)
        self.calls.append(("write", key))
        self.objects[key] = data
        self.configs[key] = config

    async def file_size(self, key: str) -> int:
        self._maybe_fail("file_size", key)
        return len(self.objects[key])

    async def copy(self, src_key: str, dst_key: str, config: WriteConfig) -> None:
        self._maybe_fail("copy", src_key)
        if src_key not in self.objects:
            raise StorageError("No such file: %r" % src_key)
        self.calls.append(("copy", src_key, dst_key))
        self.objects[dst_key] = self.objects[src_key]
        self.configs[dst_key] = config

    async def move(self, src_key: str, dst_key: str, config: WriteConfig) -> None:
        self._maybe_fail("move", src_key)
        if src_key not in self.objects:
            raise StorageError("No such file: %r" % src_key)
        self.calls.append(("move", src_key, dst_key))
        self.objects[dst_key] = self.objects.pop(src_key)
        self.configs[dst_key] = config


@pytest.fixture
def memory_store():
    return InMemoryObjectStore(
        [
            "a/x.txt",
            "a/y.txt",
            "a/.hidden.txt",
            "a/sub/z.txt",
            "a/sub/w.log",
            "a/empty/",
            "b/deep/er/file.txt",
            "top.txt",
        ]
    )


@pytest.fixture
def empty_store():
    return InMemoryObjectStore()
