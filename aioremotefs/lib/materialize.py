import logging
import posixpath
from logging import getLogger as get_logger

from aioremotefs.config import WriteConfig
from aioremotefs.errors import StorageError, full_error_message
from aioremotefs.interfaces import ObjectStore
from aioremotefs.path import PathNormalizer

__all__ = [
    "DirectoryMaterializer",
]

_logger = get_logger(__name__)


class DirectoryMaterializer:
    """
    Make a key behave as a directory by creating directory markers for it
    and every missing ancestor, deepest missing ancestor first.
    """

    def __init__(
        self,
        store: ObjectStore,
        normalizer: PathNormalizer,
        config: WriteConfig,
        logger: logging.Logger = _logger,
    ):
        self.store = store
        self.normalizer = normalizer
        self.config = config
        self.logger = logger

    async def ensure_directory(self, path: str) -> bool:
        """Create directory recursively.

        :param path: Absolute path or relative key of the directory.
        :return: False if a directory marker could not be created.
        """
        path = self.normalizer.to_relative(path, fix=True)
        parent_directory = posixpath.dirname(path)

        try:
            # root always exists
            if path and not await self.store.is_dir(parent_directory):
                if not await self.ensure_directory(parent_directory):
                    return False

            if not await self.store.is_dir(path):
                await self.store.create_directory(path, self.config)
        except StorageError as error:
            self.logger.error(
                "Cannot create directory %r: %s", path, full_error_message(error)
            )
            return False

        return True
