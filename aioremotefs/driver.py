import io
import logging
import os
import typing as T
from logging import getLogger as get_logger

from aioremotefs.config import WriteConfig, default_write_config
from aioremotefs.errors import (
    DirectoryAccessError,
    StorageError,
    full_error_message,
)
from aioremotefs.interfaces import ObjectStore
from aioremotefs.lib.glob import glob, iglob
from aioremotefs.lib.image import image_metadata
from aioremotefs.lib.materialize import DirectoryMaterializer
from aioremotefs.lib.url import fspath
from aioremotefs.path import PathNormalizer

__all__ = [
    "RemoteDriver",
    "WriteSession",
]

_logger = get_logger(__name__)

PathLike = T.Union[str, os.PathLike]


class WriteSession:
    """
    A buffered write to a single object, finalized by
    :meth:`RemoteDriver.file_close`.

    Usage:
        async with driver.open_write(path) as session:
            session.write(b"...")
    """

    def __init__(self, driver: "RemoteDriver", key: str):
        self.driver = driver
        self.key = key
        self.buffer = io.BytesIO()
        self.closed = False

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.key)

    def write(self, data: T.Union[bytes, str]) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed session: %r" % self.key)
        if isinstance(data, str):
            data = data.encode()
        return self.buffer.write(data)

    async def close(self) -> bool:
        return await self.driver.file_close(self)

    async def __aenter__(self) -> "WriteSession":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.driver.discard(self)
            return
        await self.close()


class RemoteDriver:
    """
    Filesystem-like driver over an object store.

    Paths given to the driver may be absolute (prefixed with the object url)
    or relative keys; paths returned by it are absolute.
    Operations returning a bool log backend failures and return False
    instead of raising.
    """

    def __init__(
        self,
        store: ObjectStore,
        object_url: str,
        *,
        config: T.Optional[WriteConfig] = None,
        logger: T.Optional[logging.Logger] = None,
    ):
        """
        :param store: Object store holding the data.
        :param object_url: Base url of absolute paths.
        :param config: Options applied to every write, copy and move,
            defaults to :func:`aioremotefs.config.default_write_config`.
        :param logger: Logger receiving backend failures.
        """
        self.store = store
        self.normalizer = PathNormalizer(object_url)
        self.config = config if config is not None else default_write_config()
        self.logger = logger or _logger
        self.materializer = DirectoryMaterializer(
            store, self.normalizer, self.config, logger=self.logger
        )
        self._sessions: T.Dict[str, WriteSession] = {}

    def __repr__(self) -> str:
        return "%s(%r, %r)" % (
            self.__class__.__name__,
            self.store,
            self.normalizer.object_url,
        )

    def _relative(self, path: PathLike, fix: bool = True) -> str:
        return self.normalizer.to_relative(fspath(path), fix=fix)

    def get_absolute_path(self, path: PathLike) -> str:
        return self.normalizer.to_absolute(fspath(path))

    def get_relative_path(self, path: PathLike) -> str:
        return self._relative(path, fix=False)

    async def is_exists(self, path: PathLike) -> bool:
        key = self._relative(path)
        if not key:
            return True
        return await self.store.exists(key)

    async def is_directory(self, path: PathLike) -> bool:
        return await self.store.is_dir(self._relative(path))

    async def is_file(self, path: PathLike) -> bool:
        return await self.store.is_file(self._relative(path))

    async def read_directory(self, path: PathLike) -> T.List[str]:
        """
        Get absolute paths of the immediate children of a directory.

        :param path: Directory path.
        :raises DirectoryAccessError: If the directory cannot be listed.
        :return: Absolute paths, directories with a trailing slash.
        """
        key = self._relative(path)
        paths = []
        try:
            for name in await self.store.list_directory(key):
                child = "%s/%s" % (key, name) if key else name
                if await self.store.is_dir(child):
                    child += "/"
                paths.append(self.normalizer.to_absolute(child))
        except StorageError as error:
            raise DirectoryAccessError(
                "Cannot read directory: %r, error: %s"
                % (fspath(path), full_error_message(error))
            ) from error
        return paths

    def iglob(self, pattern: PathLike) -> T.AsyncIterator[str]:
        """Return an iterator of absolute paths matching the glob pattern.

        :param pattern: Glob pattern, absolute or relative.
        :raises DirectoryAccessError: If a directory cannot be listed.
        """
        return iglob(self._relative(pattern), self.store, self.normalizer)

    async def glob(self, pattern: PathLike) -> T.List[str]:
        return await glob(self._relative(pattern), self.store, self.normalizer)

    async def search(self, pattern: str, path: PathLike) -> T.List[str]:
        """
        Search paths matching a glob pattern inside a directory.

        :param pattern: Glob pattern relative to path.
        :param path: Directory to search in.
        :return: Absolute paths of matches.
        """
        key = self._relative(path)
        pattern = pattern.lstrip("/")
        return await self.glob("%s/%s" % (key, pattern) if key else pattern)

    async def create_directory(self, path: PathLike) -> bool:
        return await self.materializer.ensure_directory(fspath(path))

    async def copy(self, source: PathLike, destination: PathLike) -> bool:
        try:
            await self.store.copy(
                self._relative(source), self._relative(destination), self.config
            )
        except StorageError as error:
            self.logger.error(full_error_message(error))
            return False
        return True

    async def rename(self, old_path: PathLike, new_path: PathLike) -> bool:
        try:
            await self.store.move(
                self._relative(old_path), self._relative(new_path), self.config
            )
        except StorageError as error:
            self.logger.error(full_error_message(error))
            return False
        return True

    async def file_put_contents(
        self, path: PathLike, content: T.Union[bytes, str]
    ) -> int:
        """
        Write content into a file, adding image-width and image-height
        metadata when content is an image.

        :param path: File path.
        :param content: Content to write.
        :return: Size of the stored file, 0 on failure.
        """
        key = self._relative(path)
        if isinstance(content, str):
            content = content.encode()

        config = self.config
        metadata = image_metadata(content)
        if metadata:
            config = config.with_metadata(metadata)

        try:
            await self.store.write(key, content, config)
            return await self.store.file_size(key)
        except StorageError as error:
            self.logger.error(full_error_message(error))
            return 0

    def open_write(self, path: PathLike) -> WriteSession:
        """
        Begin a buffered write session.

        :param path: File path.
        :raises FileExistsError: If a session is already open for path.
        :return: WriteSession
        """
        key = self._relative(path)
        if key in self._sessions:
            raise FileExistsError("Write session already open: %r" % fspath(path))
        session = WriteSession(self, key)
        self._sessions[key] = session
        return session

    def discard(self, session: WriteSession) -> None:
        """Drop a session without writing anything."""
        if self._sessions.get(session.key) is session:
            del self._sessions[session.key]
        session.closed = True

    async def file_close(self, session: WriteSession) -> bool:
        """
        Write buffered content of a session to storage.

        :param session: Session returned by :meth:`open_write`.
        :return: False if the session is not open or the write failed.
        """
        if self._sessions.get(session.key) is not session:
            return False

        # the session is closed whether or not the write succeeds
        self.discard(session)
        session.buffer.seek(0)
        try:
            await self.store.write_stream(session.key, session.buffer, self.config)
        except StorageError as error:
            self.logger.error(full_error_message(error))
            return False
        finally:
            session.buffer.close()
        return True
