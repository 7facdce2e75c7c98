import os
import typing as T

from aioremotefs.lib.url import fspath

__all__ = [
    "PathNormalizer",
    "fix_path",
]


def fix_path(path: str) -> str:
    """Remove slashes on both ends of path."""
    return path.strip("/")


class PathNormalizer:
    """
    Translate between absolute paths, which carry the object base url,
    and relative keys, which are what object stores accept.

    Both directions are pure string transforms and may be applied
    repeatedly to a path without corrupting it.
    """

    def __init__(self, object_url: str):
        """
        :param object_url: Base url prepended to every relative key,
            like ``https://bucket.s3.amazonaws.com/``.
        """
        self.object_url = object_url

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.object_url)

    def get_object_url(self, path: T.Union[str, os.PathLike]) -> str:
        return self.object_url + fspath(path).lstrip("/")

    def to_absolute(self, path: T.Union[str, os.PathLike]) -> str:
        """Resolve absolute path.

        :param path: Relative key, or a path already carrying the base url.
        :return: Absolute path
        """
        path = fspath(path)
        if self.object_url:
            path = path.replace(self.object_url, "")
        return self.get_object_url(path)

    def to_relative(self, path: T.Union[str, os.PathLike], fix: bool = False) -> str:
        """Resolve relative path.

        :param path: Absolute path, or a key without the base url.
        :param fix: Whether to remove slashes on both ends.
        :return: Relative key
        """
        relative_path = fspath(path)
        base = self.to_absolute("")
        if base:
            relative_path = relative_path.replace(base, "")
        if fix:
            relative_path = fix_path(relative_path)
        return relative_path
