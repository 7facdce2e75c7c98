import asyncio
import os
import shutil
import typing as T

import aiofiles
import aiofiles.os
import aiofiles.ospath

from aioremotefs.config import WriteConfig
from aioremotefs.errors import MetadataError, StorageError, translate_fs_error
from aioremotefs.interfaces import ObjectStore
from aioremotefs.lib.url import split_uri


def _dir_mode(config: WriteConfig) -> int:
    return 0o755 if config.is_public else 0o700


def _file_mode(config: WriteConfig) -> int:
    return 0o644 if config.is_public else 0o600


class LocalObjectStore(ObjectStore):
    """
    Object store rooted at a local directory.

    Visibility is mapped to permission bits, the ACL is ignored.
    """

    protocol = "file"

    def __init__(self, root: str):
        """Create a LocalObjectStore instance.

        :param root: Directory every key is resolved against.
        """
        self.root = os.path.abspath(root)

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.root)

    @classmethod
    def from_uri(cls, uri: str) -> "LocalObjectStore":
        """
        Create LocalObjectStore from uri string.

        :param uri: URI string, like ``file:///data`` or ``/data``.
        :return: LocalObjectStore instance.
        """
        _, path, _ = split_uri(uri)
        return cls(path)

    def _resolve(self, key: str) -> str:
        key = key.strip("/")
        if not key:
            return self.root
        return os.path.join(self.root, *key.split("/"))

    async def list_directory(self, key: str) -> T.List[str]:
        """
        Get names of all contents of given directory key.
        The result is in ascending alphabetical order.

        :param key: Directory key.
        :raises StorageError: If the directory cannot be listed.
        """
        path = self._resolve(key)
        try:
            names = await aiofiles.os.listdir(path)
        except OSError as error:
            raise translate_fs_error(error, path)
        return sorted(names)

    async def is_dir(self, key: str) -> bool:
        return await aiofiles.ospath.isdir(self._resolve(key))

    async def is_file(self, key: str) -> bool:
        return await aiofiles.ospath.isfile(self._resolve(key))

    async def exists(self, key: str) -> bool:
        return await aiofiles.ospath.exists(self._resolve(key))

    async def _makedirs(self, path: str, config: WriteConfig) -> None:
        await aiofiles.os.makedirs(path, mode=_dir_mode(config), exist_ok=True)

    async def create_directory(self, key: str, config: WriteConfig) -> None:
        path = self._resolve(key)
        try:
            await self._makedirs(path, config)
            await asyncio.to_thread(os.chmod, path, _dir_mode(config))
        except OSError as error:
            raise translate_fs_error(error, path)

    async def write(self, key: str, data: bytes, config: WriteConfig) -> None:
        path = self._resolve(key)
        try:
            await self._makedirs(os.path.dirname(path), config)
            async with aiofiles.open(path, mode="wb") as f:
                await f.write(data)
            await asyncio.to_thread(os.chmod, path, _file_mode(config))
        except OSError as error:
            raise translate_fs_error(error, path)

    async def file_size(self, key: str) -> int:
        """
        Get size of a file.

        :param key: File key.
        :raises MetadataError: If the file cannot be stat-ed.
        """
        path = self._resolve(key)
        try:
            stat_result = await aiofiles.os.stat(path)
        except OSError as error:
            raise MetadataError("Unable to retrieve file size: %r" % path) from error
        return stat_result.st_size

    async def copy(self, src_key: str, dst_key: str, config: WriteConfig) -> None:
        """
        copy single file, not directory

        :param src_key: Given source key
        :param dst_key: Given destination key
        """
        src_path, dst_path = self._resolve(src_key), self._resolve(dst_key)
        try:
            await self._makedirs(os.path.dirname(dst_path), config)
            await asyncio.to_thread(shutil.copyfile, src_path, dst_path)
            await asyncio.to_thread(os.chmod, dst_path, _file_mode(config))
        except OSError as error:
            raise translate_fs_error(error, src_path)

    async def move(self, src_key: str, dst_key: str, config: WriteConfig) -> None:
        src_path, dst_path = self._resolve(src_key), self._resolve(dst_key)
        if not await aiofiles.ospath.isfile(src_path):
            raise StorageError("No such file: %r" % src_path)
        try:
            await self._makedirs(os.path.dirname(dst_path), config)
            await asyncio.to_thread(shutil.move, src_path, dst_path)
            await asyncio.to_thread(os.chmod, dst_path, _file_mode(config))
        except OSError as error:
            raise translate_fs_error(error, src_path)
