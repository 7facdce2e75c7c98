import pickle

from botocore.exceptions import ClientError, NoCredentialsError, ParamValidationError

from aioremotefs.errors import (
    MetadataError,
    S3BucketNotFoundError,
    S3ConfigError,
    S3FileNotFoundError,
    S3PermissionError,
    S3UnknownError,
    StorageError,
    UnknownError,
    full_error_message,
    translate_fs_error,
    translate_s3_error,
)

URL = "s3://bucket/key"
ENDPOINT = "http://s3.example.com"


def _client_error(code, **extra):
    error = {"Code": code, "Message": "message"}
    error.update(extra)
    return ClientError({"Error": error}, "HeadObject")


def test_hierarchy():
    assert issubclass(MetadataError, StorageError)
    assert issubclass(S3FileNotFoundError, StorageError)
    assert issubclass(S3FileNotFoundError, FileNotFoundError)
    assert issubclass(S3UnknownError, UnknownError)


def test_full_error_message():
    assert full_error_message(ValueError("bad")) == "ValueError('bad')"
    assert full_error_message(StorageError("bad")) == (
        "aioremotefs.errors.StorageError('bad')"
    )


def test_translate_client_errors():
    assert isinstance(
        translate_s3_error(_client_error("NoSuchBucket", BucketName="b"), URL),
        S3BucketNotFoundError,
    )
    assert isinstance(
        translate_s3_error(_client_error("404"), URL), S3FileNotFoundError
    )
    assert isinstance(
        translate_s3_error(_client_error("NoSuchKey"), URL), S3FileNotFoundError
    )
    error = translate_s3_error(_client_error("AccessDenied"), URL, ENDPOINT)
    assert isinstance(error, S3PermissionError)
    assert ENDPOINT in str(error)
    assert isinstance(
        translate_s3_error(_client_error("InvalidAccessKeyId"), URL), S3ConfigError
    )
    assert isinstance(
        translate_s3_error(_client_error("SlowDown"), URL), S3UnknownError
    )


def test_translate_other_errors():
    error = translate_s3_error(
        ParamValidationError(report="Invalid bucket name \"\""), URL
    )
    assert isinstance(error, S3BucketNotFoundError)
    assert isinstance(translate_s3_error(NoCredentialsError(), URL), S3ConfigError)

    cause = RuntimeError("boom")
    error = translate_s3_error(cause, URL, ENDPOINT)
    assert isinstance(error, S3UnknownError)
    assert error.__cause__ is cause
    assert URL in str(error)


def test_translate_keeps_storage_errors():
    error = S3FileNotFoundError("No such file")
    assert translate_s3_error(error, URL) is error


def test_translate_fs_error():
    cause = PermissionError("denied")
    error = translate_fs_error(cause, "/tmp/x")
    assert isinstance(error, UnknownError)
    assert error.__cause__ is cause
    metadata_error = MetadataError("x")
    assert translate_fs_error(metadata_error, "/tmp/x") is metadata_error


def test_unknown_error_pickle():
    error = UnknownError(RuntimeError("boom"), "/tmp/x", "extra")
    restored = pickle.loads(pickle.dumps(error))
    assert str(restored) == str(error)
    assert restored.path == "/tmp/x"
