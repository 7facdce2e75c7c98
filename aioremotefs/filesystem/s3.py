import os
import typing as T
from functools import lru_cache
from logging import getLogger as get_logger

from aiobotocore.session import AioSession, get_session

from aioremotefs.config import S3_MAX_KEYS, WriteConfig
from aioremotefs.errors import (
    MetadataError,
    S3ConfigError,
    S3FileNotFoundError,
    S3PermissionError,
    S3UnknownError,
    translate_s3_error,
)
from aioremotefs.interfaces import ObjectStore
from aioremotefs.lib.url import split_bucket, split_uri

__all__ = [
    "S3ObjectStore",
    "get_endpoint_url",
    "get_s3_session",
]

_logger = get_logger(__name__)
endpoint_url = "https://s3.amazonaws.com"


def get_s3_session(profile_name: T.Optional[str] = None) -> AioSession:
    """Get S3 session

    :returns: S3 session
    """
    session = get_session()
    if profile_name:
        session.set_config_variable("profile", profile_name)
    return session


def get_scoped_config(profile_name: T.Optional[str] = None) -> T.Dict:
    session = get_s3_session(profile_name=profile_name)
    try:
        return session.get_scoped_config()
    except Exception:  # unknown profile or broken config file
        return {}


@lru_cache()
def warning_endpoint_url(key: str, endpoint_url: str):
    _logger.info("using %s: %s" % (key, endpoint_url))


def get_endpoint_url(profile_name: T.Optional[str] = None) -> str:
    """Get the endpoint url of S3

    :returns: S3 endpoint url
    """
    profile_name = profile_name or os.environ.get("AWS_PROFILE")
    environ_keys = ("OSS_ENDPOINT", "AWS_ENDPOINT_URL_S3", "AWS_ENDPOINT_URL")
    if profile_name:
        environ_keys = tuple(
            f"{profile_name}__{environ_key}".upper() for environ_key in environ_keys
        )
    for environ_key in environ_keys:
        environ_endpoint_url = os.environ.get(environ_key)
        if environ_endpoint_url:
            warning_endpoint_url(environ_key, environ_endpoint_url)
            return environ_endpoint_url
    config = get_scoped_config(profile_name=profile_name)
    config_endpoint_url = config.get("s3", {}).get("endpoint_url")
    config_endpoint_url = config_endpoint_url or config.get("endpoint_url")
    if config_endpoint_url:
        warning_endpoint_url("~/.aws/config or ~/.aws/credentials", config_endpoint_url)
        return config_endpoint_url
    return endpoint_url


def _become_prefix(prefix: str) -> str:
    if prefix != "" and not prefix.endswith("/"):
        prefix += "/"
    return prefix


def _acl(config: WriteConfig) -> str:
    if config.acl:
        return config.acl
    return "public-read" if config.is_public else "private"


def _put_params(config: WriteConfig) -> T.Dict[str, T.Any]:
    params: T.Dict[str, T.Any] = {"ACL": _acl(config)}
    if config.metadata:
        params["Metadata"] = dict(config.metadata)
    return params


class S3ObjectStore(ObjectStore):
    """Object store on a single S3 bucket, based on aiobotocore.

    Directories are key prefixes. A directory marker is an empty object
    whose key ends with "/".
    """

    protocol = "s3"

    def __init__(
        self,
        bucket: str,
        *,
        endpoint_url: T.Optional[str] = None,
        region_name: T.Optional[str] = None,
        aws_access_key_id: T.Optional[str] = None,
        aws_secret_access_key: T.Optional[str] = None,
        profile_name: T.Optional[str] = None,
    ):
        if not bucket:
            raise ValueError("Empty bucket name")
        self.bucket = bucket
        self._profile_name = profile_name
        self._endpoint_url = endpoint_url
        self._region_name = region_name
        self._aws_access_key_id = aws_access_key_id
        self._aws_secret_access_key = aws_secret_access_key

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.bucket)

    @classmethod
    def from_uri(cls, uri: str, **kwargs) -> "S3ObjectStore":
        """Create a store from uri like ``s3[+profile]://bucket``.

        :param uri: URI string.
        :param kwargs: Passed to the constructor.
        :return: S3ObjectStore instance.
        """
        protocol, path, profile_name = split_uri(uri)
        if protocol != cls.protocol:
            raise ValueError("Not a s3 url: %r" % uri)
        bucket, _ = split_bucket(path)
        kwargs.setdefault("profile_name", profile_name)
        return cls(bucket, **kwargs)

    @property
    def endpoint_url(self) -> str:
        if self._endpoint_url is None:
            self._endpoint_url = get_endpoint_url(profile_name=self._profile_name)
        return self._endpoint_url

    def _get_url(self, key: str) -> str:
        return f"{self.protocol}://{self.bucket}/{key}"

    def _translate_error(self, error: Exception, key: str) -> Exception:
        return translate_s3_error(error, self._get_url(key), self.endpoint_url)

    def _get_client(self):
        """Get an async S3 client context manager.

        Usage:
            async with self._get_client() as client:
                resp = await client.list_objects_v2(...)
        """
        session = get_s3_session(profile_name=self._profile_name)
        return session.create_client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=self._region_name,
            aws_access_key_id=self._aws_access_key_id,
            aws_secret_access_key=self._aws_secret_access_key,
        )

    async def _list_objects(
        self,
        client,
        prefix: str,
        delimiter: str = "",
    ) -> T.AsyncIterator[T.Dict]:
        """Async iterator to list all objects with pagination."""
        resp = await client.list_objects_v2(
            Bucket=self.bucket, Prefix=prefix, Delimiter=delimiter, MaxKeys=S3_MAX_KEYS
        )

        while True:
            yield resp

            if not resp.get("IsTruncated"):
                break

            resp = await client.list_objects_v2(
                Bucket=self.bucket,
                Prefix=prefix,
                Delimiter=delimiter,
                ContinuationToken=resp["NextContinuationToken"],
                MaxKeys=S3_MAX_KEYS,
            )

    async def list_directory(self, key: str) -> T.List[str]:
        """
        Get names of all contents of given directory key,
        common prefixes first, then objects, each in listing order.

        :returns: Names without the directory prefix nor trailing slash
        :raises: S3FileNotFoundError, S3PermissionError
        """
        prefix = _become_prefix(key)
        dir_names: T.List[str] = []
        file_names: T.List[str] = []
        try:
            async with self._get_client() as client:
                async for resp in self._list_objects(client, prefix, "/"):
                    for common_prefix in resp.get("CommonPrefixes", []):
                        dir_names.append(common_prefix["Prefix"][len(prefix) : -1])
                    for content in resp.get("Contents", []):
                        # the directory marker of the listed directory itself
                        if content["Key"] == prefix:
                            continue
                        file_names.append(content["Key"][len(prefix) :])
        except Exception as error:
            raise self._translate_error(error, prefix)
        return dir_names + file_names

    async def is_dir(self, key: str) -> bool:
        """
        Test if a key is directory.

        :returns: True if key is a directory, else False
        """
        prefix = _become_prefix(key)
        try:
            async with self._get_client() as client:
                resp = await client.list_objects_v2(
                    Bucket=self.bucket, Prefix=prefix, Delimiter="/", MaxKeys=1
                )
        except Exception as error:
            error = self._translate_error(error, prefix)
            if isinstance(error, (S3UnknownError, S3ConfigError, S3PermissionError)):
                raise error
            return False

        if not key:  # bucket is accessible
            return True

        if "KeyCount" in resp:
            return resp["KeyCount"] > 0

        return (
            len(resp.get("Contents", [])) > 0 or len(resp.get("CommonPrefixes", [])) > 0
        )

    async def is_file(self, key: str) -> bool:
        """
        Test if a key is an object.

        :returns: True if key is an object, else False
        """
        if not key or key.endswith("/"):
            return False

        try:
            async with self._get_client() as client:
                await client.head_object(Bucket=self.bucket, Key=key)
        except Exception as error:
            error = self._translate_error(error, key)
            if isinstance(error, (S3UnknownError, S3ConfigError, S3PermissionError)):
                raise error
            return False
        return True

    async def create_directory(self, key: str, config: WriteConfig) -> None:
        """
        Create a directory marker, an empty object named after the prefix.

        :raises: S3BucketNotFoundError, S3PermissionError
        """
        prefix = _become_prefix(key)
        try:
            async with self._get_client() as client:
                await client.put_object(
                    Bucket=self.bucket, Key=prefix, Body=b"", **_put_params(config)
                )
        except Exception as error:
            raise self._translate_error(error, prefix)

    async def write(self, key: str, data: bytes, config: WriteConfig) -> None:
        try:
            async with self._get_client() as client:
                await client.put_object(
                    Bucket=self.bucket, Key=key, Body=data, **_put_params(config)
                )
        except Exception as error:
            raise self._translate_error(error, key)

    async def file_size(self, key: str) -> int:
        """
        Get size of an object from its metadata.

        :raises: MetadataError
        """
        try:
            async with self._get_client() as client:
                content = await client.head_object(Bucket=self.bucket, Key=key)
        except Exception as error:
            error = self._translate_error(error, key)
            raise MetadataError(
                "Unable to retrieve file size: %r, error: %s" % (self._get_url(key), error)
            ) from error
        return content["ContentLength"]

    async def copy(self, src_key: str, dst_key: str, config: WriteConfig) -> None:
        params = _put_params(config)
        if "Metadata" in params:
            params["MetadataDirective"] = "REPLACE"
        try:
            async with self._get_client() as client:
                await client.copy_object(
                    CopySource={"Bucket": self.bucket, "Key": src_key},
                    Bucket=self.bucket,
                    Key=dst_key,
                    **params,
                )
        except Exception as error:
            raise self._translate_error(error, src_key)

    async def move(self, src_key: str, dst_key: str, config: WriteConfig) -> None:
        """
        Move an object, copy then delete.

        :raises: S3FileNotFoundError, S3PermissionError
        """
        if not await self.is_file(src_key):
            raise S3FileNotFoundError("No such file: %r" % self._get_url(src_key))
        await self.copy(src_key, dst_key, config)
        try:
            async with self._get_client() as client:
                await client.delete_object(Bucket=self.bucket, Key=src_key)
        except Exception as error:
            raise self._translate_error(error, src_key)
