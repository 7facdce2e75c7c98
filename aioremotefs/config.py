import os
import typing as T

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"

# An explicit ACL wins over the one derived from visibility on S3, so the
# defaults below publish objects as public-read while flagging them private.
OBJECT_ACL = os.getenv("AIOREMOTEFS_OBJECT_ACL", "public-read")
OBJECT_VISIBILITY = os.getenv("AIOREMOTEFS_OBJECT_VISIBILITY", VISIBILITY_PRIVATE)
S3_MAX_KEYS = int(os.getenv("AIOREMOTEFS_S3_MAX_KEYS", "1000"))


class WriteConfig(T.NamedTuple):
    """Options applied to directory creation, copy, move and write."""

    acl: T.Optional[str] = OBJECT_ACL or None
    visibility: str = OBJECT_VISIBILITY
    metadata: T.Optional[T.Mapping[str, str]] = None

    def with_metadata(self, metadata: T.Mapping[str, T.Any]) -> "WriteConfig":
        """Return a copy carrying extra object metadata.

        :param metadata: Metadata merged over the existing one.
        :return: New WriteConfig.
        """
        merged = dict(self.metadata or {})
        merged.update({key: str(value) for key, value in metadata.items()})
        return self._replace(metadata=merged)

    @property
    def is_public(self) -> bool:
        return self.visibility == VISIBILITY_PUBLIC


def default_write_config() -> WriteConfig:
    if OBJECT_VISIBILITY not in (VISIBILITY_PUBLIC, VISIBILITY_PRIVATE):
        raise ValueError(
            "AIOREMOTEFS_OBJECT_VISIBILITY must be %r or %r, got: %r"
            % (VISIBILITY_PUBLIC, VISIBILITY_PRIVATE, OBJECT_VISIBILITY)
        )
    return WriteConfig(acl=OBJECT_ACL or None, visibility=OBJECT_VISIBILITY)
