"""Glob emulation over object stores that only list directories.

Patterns are expanded one wildcard segment at a time: the literal directory in
front of the segment is listed, entry names are matched against the segment
and matching directories are descended into while pattern text remains.
"""

import posixpath
import typing as T

from aioremotefs.errors import DirectoryAccessError, StorageError, full_error_message
from aioremotefs.interfaces import ObjectStore
from aioremotefs.lib.pattern import compile_pattern, has_magic
from aioremotefs.path import PathNormalizer

__all__ = [
    "glob",
    "iglob",
]


def _join(directory: str, name: str) -> str:
    if not directory:
        return name
    return posixpath.join(directory, name)


async def _access(
    method: T.Callable[[str], T.Awaitable[T.Any]], key: str
) -> T.Any:
    """Call a store method on key, raising DirectoryAccessError on failure."""
    try:
        return await method(key)
    except DirectoryAccessError:
        raise
    except StorageError as error:
        raise DirectoryAccessError(
            "Cannot read directory: %r, error: %s" % (key, full_error_message(error))
        ) from error


async def _list_directory(store: ObjectStore, directory: str) -> T.List[str]:
    return await _access(store.list_directory, directory)


async def _is_dir(store: ObjectStore, key: str) -> bool:
    return await _access(store.is_dir, key)


async def _exists(store: ObjectStore, key: str) -> bool:
    return await _access(store.exists, key)


async def iglob(
    pattern: str, store: ObjectStore, normalizer: PathNormalizer
) -> T.AsyncIterator[str]:
    """Yield absolute paths of entries matching the pattern.

    Directories are yielded with a trailing slash. Names starting with "."
    are never matched by a wildcard segment.

    :param pattern: Relative glob pattern.
    :param store: Store to list.
    :param normalizer: Turns matched keys into absolute paths.
    :raises DirectoryAccessError: If a directory cannot be listed.
    :return: Async iterator of absolute paths, in listing order.
    """
    if not has_magic(pattern):
        if await _exists(store, pattern):
            yield normalizer.to_absolute(pattern)
        return

    compiled = compile_pattern(pattern)
    if not await _is_dir(store, compiled.parent_directory):
        return

    for name in await _list_directory(store, compiled.parent_directory):
        if name.startswith(".") or not compiled.match(name):
            continue
        key = _join(compiled.parent_directory, name)
        if compiled.is_last_segment:
            if await _is_dir(store, key):
                key = key.rstrip("/") + "/"
            yield normalizer.to_absolute(key)
        else:
            async for path in iglob(key + compiled.remainder, store, normalizer):
                yield path


async def glob(
    pattern: str, store: ObjectStore, normalizer: PathNormalizer
) -> T.List[str]:
    """Return absolute paths of entries matching the pattern.

    :param pattern: Relative glob pattern.
    :param store: Store to list.
    :param normalizer: Turns matched keys into absolute paths.
    :return: List of absolute paths.
    """
    return [path async for path in iglob(pattern, store, normalizer)]
