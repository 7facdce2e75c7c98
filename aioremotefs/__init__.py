from aioremotefs.__version__ import __version__  # noqa: F401
from aioremotefs.config import WriteConfig
from aioremotefs.driver import RemoteDriver, WriteSession
from aioremotefs.filesystem import LocalObjectStore, S3ObjectStore
from aioremotefs.interfaces import ObjectStore
from aioremotefs.path import PathNormalizer

__all__ = [
    "RemoteDriver",
    "WriteSession",
    "WriteConfig",
    "ObjectStore",
    "PathNormalizer",
    "LocalObjectStore",
    "S3ObjectStore",
]
