from aioremotefs.filesystem.local import LocalObjectStore
from aioremotefs.filesystem.s3 import S3ObjectStore

__all__ = [
    "LocalObjectStore",
    "S3ObjectStore",
]
