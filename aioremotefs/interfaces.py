import typing as T
from abc import ABC, abstractmethod

from aioremotefs.config import WriteConfig


class ObjectStore(ABC):
    """
    Storage primitives the driver is built upon.

    Every key is relative to the root of the store, without leading or
    trailing slashes, "" being the root itself.
    """

    @abstractmethod
    async def list_directory(self, key: str) -> T.List[str]:
        """Return names of the immediate children of a directory.

        :param key: Directory key.
        :raises StorageError: When the directory cannot be listed.
        :return: Child names in listing order.
        """

    @abstractmethod
    async def is_dir(self, key: str) -> bool:
        """Return True if the key is a directory.

        :param key: Key to check.
        :return: True if the key is a directory, otherwise False.
        """

    @abstractmethod
    async def is_file(self, key: str) -> bool:
        """Return True if the key is a regular object.

        :param key: Key to check.
        :return: True if the key is an object, otherwise False.
        """

    async def exists(self, key: str) -> bool:
        """Return whether the key is an existing object or directory.

        :param key: Key to check.
        :return: True if the key exists, otherwise False.
        """
        return await self.is_file(key) or await self.is_dir(key)

    @abstractmethod
    async def create_directory(self, key: str, config: WriteConfig) -> None:
        """Create a directory marker.

        :param key: Directory key.
        :param config: Write options.
        :raises StorageError: On backend failure.
        """

    @abstractmethod
    async def write(self, key: str, data: bytes, config: WriteConfig) -> None:
        """Write data into an object, replacing it if present.

        :param key: Object key.
        :param data: Object content.
        :param config: Write options.
        :raises StorageError: On backend failure.
        """

    async def write_stream(
        self, key: str, stream: T.BinaryIO, config: WriteConfig
    ) -> None:
        """Write the whole content of a binary stream into an object.

        :param key: Object key.
        :param stream: Readable binary stream, read from its current position.
        :param config: Write options.
        :raises StorageError: On backend failure.
        """
        await self.write(key, stream.read(), config)

    @abstractmethod
    async def file_size(self, key: str) -> int:
        """Return the size in bytes of an object.

        :param key: Object key.
        :raises MetadataError: If the size is unavailable.
        """

    @abstractmethod
    async def copy(self, src_key: str, dst_key: str, config: WriteConfig) -> None:
        """
        copy single object, not directory

        :param src_key: Given source key
        :param dst_key: Given destination key
        :param config: Write options applied to the destination.
        :raises StorageError: On backend failure.
        """

    @abstractmethod
    async def move(self, src_key: str, dst_key: str, config: WriteConfig) -> None:
        """
        move single object

        :param src_key: Given source key
        :param dst_key: Given destination key
        :param config: Write options applied to the destination.
        :raises StorageError: On backend failure.
        """
