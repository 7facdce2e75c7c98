import typing as T

from botocore.exceptions import ClientError, NoCredentialsError, ParamValidationError


def full_class_name(obj):
    # obj.__module__ is not guaranteed to be defined, builtins report bare names
    module = obj.__class__.__module__
    if module is None or module == str.__class__.__module__:
        return obj.__class__.__name__
    else:
        return module + "." + obj.__class__.__name__


def full_error_message(error):
    return "%s(%r)" % (full_class_name(error), str(error))


def client_error_code(error: ClientError) -> str:
    error_data = error.response.get("Error", {})
    return error_data.get("Code") or error_data.get("code", "Unknown")


def client_error_message(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Message", "Unknown")


def param_validation_error_report(error: ParamValidationError) -> str:
    return error.kwargs.get("report", "Unknown")


class StorageError(Exception):
    """
    Base type for every failure raised by an object store.
    """


class MetadataError(StorageError):
    """
    Raised when size or metadata of an object cannot be retrieved.
    """


class DirectoryAccessError(StorageError):
    """
    Raised when a directory cannot be listed while traversing storage.
    """


class UnknownError(StorageError):
    def __init__(
        self,
        error: Exception,
        path: str,
        extra: T.Optional[str] = None,
    ):
        message = "Unknown error encountered: %r, error: %s" % (
            path,
            full_error_message(error),
        )
        if extra is not None:
            message += ", " + extra
        super().__init__(message)
        self.path = path
        self.extra = extra
        self.__cause__ = error

    def __reduce__(self):
        return (self.__class__, (self.__cause__, self.path, self.extra))


class S3Exception(StorageError):
    """
    Base type for all s3 errors, should NOT be constructed directly.
    When you try to do so, consider adding a new type of error.
    """


class S3FileNotFoundError(S3Exception, FileNotFoundError):
    pass


class S3BucketNotFoundError(S3FileNotFoundError, PermissionError):
    pass


class S3PermissionError(S3Exception, PermissionError):
    pass


class S3ConfigError(S3Exception, EnvironmentError):
    """
    Error raised by wrong S3 config, including wrong config file format,
    wrong aws_secret_access_key / aws_access_key_id, and etc.
    """


class S3UnknownError(S3Exception, UnknownError):
    def __init__(
        self,
        error: Exception,
        path: str,
        extra: T.Optional[str] = None,
    ):
        UnknownError.__init__(self, error, path, extra)


def translate_s3_error(
    s3_error: Exception,
    s3_url: str,
    endpoint_url: T.Optional[str] = None,
) -> Exception:
    """:param s3_error: error raised by botocore
    :param s3_url: s3 url of the object being accessed
    :param endpoint_url: endpoint reported in error messages
    """
    if isinstance(s3_error, S3Exception):
        return s3_error
    elif isinstance(s3_error, ClientError):
        code = client_error_code(s3_error)
        if code == "NoSuchBucket":
            bucket_or_url = (
                s3_error.response.get("Error", {}).get("BucketName") or s3_url
            )
            return S3BucketNotFoundError(
                "No such bucket: %r, endpoint: %r" % (bucket_or_url, endpoint_url)
            )
        if code in ("404", "NoSuchKey"):
            return S3FileNotFoundError("No such file: %r" % s3_url)
        if code in ("401", "403", "AccessDenied"):
            message = client_error_message(s3_error)
            return S3PermissionError(
                "Permission denied: %r, code: %r, message: %r, endpoint: %r"
                % (s3_url, code, message, endpoint_url)
            )
        if code in ("InvalidAccessKeyId", "SignatureDoesNotMatch"):
            message = client_error_message(s3_error)
            return S3ConfigError(
                "Invalid configuration: %r, code: %r, message: %r, endpoint: %r"
                % (s3_url, code, message, endpoint_url)
            )
        return S3UnknownError(s3_error, s3_url, "endpoint: %r" % endpoint_url)
    elif isinstance(s3_error, ParamValidationError):
        report = param_validation_error_report(s3_error)
        if "Invalid bucket name" in report:
            return S3BucketNotFoundError("Invalid bucket name: %r" % s3_url)
        if "Invalid length for parameter Key" in report:
            return S3FileNotFoundError("Invalid length for parameter Key: %r" % s3_url)
        return S3UnknownError(s3_error, s3_url, "endpoint: %r" % endpoint_url)
    elif isinstance(s3_error, NoCredentialsError):
        return S3ConfigError(str(s3_error))
    return S3UnknownError(s3_error, s3_url, "endpoint: %r" % endpoint_url)


def translate_fs_error(fs_error: Exception, path: str) -> Exception:
    """:param fs_error: error raised by the local filesystem
    :param path: local path being accessed
    """
    if isinstance(fs_error, StorageError):
        return fs_error
    return UnknownError(fs_error, path)
