"""Compile shell-style wildcard segments into regular expressions.

Only ``*``, ``?`` and bracket classes ``[...]`` are recognized. The compiler
works on one wildcard segment at a time: the literal directory in front of it
is returned so the caller can list it, and the remaining pattern is returned
so the caller can descend further.
"""

import posixpath
import re
import typing as T
from functools import lru_cache

__all__ = [
    "CompiledPattern",
    "compile_pattern",
    "has_magic",
    "translate",
]

magic_check = re.compile(r"\*|\?|\[.+\]")

_replacements = (
    (re.compile(r"\*"), ".*"),
    (re.compile(r"\?"), "."),
    (re.compile(r"/"), r"\/"),
)


class CompiledPattern(T.NamedTuple):
    #: literal directory in front of the first wildcard, "" means root
    parent_directory: str
    #: regex source of the first wildcard segment
    search_pattern: str
    #: pattern text starting at the first wildcard
    leftover: str
    #: offset of the first "/" in leftover, None if leftover is one segment
    index: T.Optional[int]

    @property
    def is_last_segment(self) -> bool:
        return self.index is None or len(self.leftover) == self.index + 1

    @property
    def remainder(self) -> str:
        """Pattern text left after the first wildcard segment, from its "/"."""
        if self.index is None:
            return ""
        return self.leftover[self.index :]

    def match(self, name: str) -> bool:
        """Whether an entry name satisfies the wildcard segment.

        The expression is anchored at the end only. A segment that is not a
        valid regex matches nothing.
        """
        regex = _compile(self.search_pattern)
        if regex is None:
            return False
        return regex.search(name) is not None


@lru_cache()
def _compile(search_pattern: str) -> T.Optional[re.Pattern]:
    try:
        return re.compile(search_pattern + "$")
    except re.error:
        return None


def has_magic(pattern: str) -> bool:
    return magic_check.search(pattern) is not None


def translate(segment: str) -> str:
    """Translate glob syntax of a segment into a regex source.

    ``*`` becomes ``.*``, ``?`` becomes ``.`` and ``/`` is escaped,
    bracket classes are kept as is.
    """
    for regex, replacement in _replacements:
        segment = regex.sub(lambda _: replacement, segment)
    return segment


def compile_pattern(pattern: str) -> CompiledPattern:
    """Split pattern at its first wildcard segment.

    :param pattern: Relative key containing at least one wildcard.
    :raises ValueError: If pattern has no wildcard.
    :return: CompiledPattern
    """
    magic = magic_check.search(pattern)
    if magic is None:
        raise ValueError("Not a glob pattern: %r" % pattern)

    offset = magic.start()
    parent_directory = posixpath.dirname(pattern[: offset + 1])
    leftover = pattern[offset:]
    index = leftover.find("/")
    if index < 0:
        index = None

    start = len(parent_directory)
    if parent_directory and not parent_directory.endswith("/"):
        start += 1
    if index is not None:
        segment = pattern[start : offset + index]
    else:
        segment = pattern[start:]

    search_pattern = translate(segment)
    _compile(search_pattern)
    return CompiledPattern(
        parent_directory=parent_directory,
        search_pattern=search_pattern,
        leftover=leftover,
        index=index,
    )
