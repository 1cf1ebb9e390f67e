"""S3-compatible object storage backend using s3fs."""

from __future__ import annotations

import io
import logging
import os
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, BinaryIO, TypeVar

from titan_s3._backend import Backend
from titan_s3._errors import (
    BackendUnavailable,
    NotFound,
    PermissionDenied,
    PreconditionFailed,
    TitanRemoteError,
)
from titan_s3._models import ObjectInfo

if TYPE_CHECKING:
    from collections.abc import Iterator

    from titan_s3._types import PathLike, UserMetadata, WritableContent

T = TypeVar("T")

log = logging.getLogger(__name__)


def _error_code(exc: BaseException) -> tuple[str, int | None]:
    """Find the botocore error code and HTTP status behind a translated s3fs error."""
    seen: BaseException | None = exc
    while seen is not None:
        response = getattr(seen, "response", None)
        if isinstance(response, dict):
            error = response.get("Error", {})
            status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            return str(error.get("Code", "")), status
        seen = seen.__cause__ or seen.__context__
    return "", None


class S3Backend(Backend):
    """S3-compatible object storage backend using s3fs.

    :param bucket: S3 bucket name (required, non-empty).
    :param endpoint_url: Custom endpoint URL (e.g. for MinIO).
    :param key: AWS access key ID.
    :param secret: AWS secret access key.
    :param token: AWS session token, for session-scoped credentials.
    :param region_name: AWS region name.
    :param client_options: Additional options passed to s3fs.
    """

    def __init__(
        self,
        bucket: str,
        *,
        endpoint_url: str | None = None,
        key: str | None = None,
        secret: str | None = None,
        token: str | None = None,
        region_name: str | None = None,
        client_options: dict[str, Any] | None = None,
    ) -> None:
        if not bucket or not bucket.strip():
            raise ValueError("bucket must be a non-empty string")
        self._bucket = bucket
        self._endpoint_url = endpoint_url
        self._key = key
        self._secret = secret
        self._token = token
        self._region_name = region_name
        self._client_options = client_options or {}
        self._fs_instance: Any = None

    @property
    def name(self) -> str:
        return "s3"

    @property
    def bucket(self) -> str:
        return self._bucket

    # region: lazy filesystem

    @property
    def _fs(self) -> Any:
        if self._fs_instance is None:
            import s3fs  # type: ignore[import-untyped]

            opts: dict[str, Any] = dict(self._client_options)
            if self._endpoint_url is not None:
                opts["endpoint_url"] = self._endpoint_url
            if self._key is not None:
                opts["key"] = self._key
            if self._secret is not None:
                opts["secret"] = self._secret
            if self._token is not None:
                opts["token"] = self._token
            if self._region_name is not None:
                client_kwargs: dict[str, Any] = opts.setdefault("client_kwargs", {})
                client_kwargs["region_name"] = self._region_name
            opts.setdefault("anon", False)
            self._fs_instance = s3fs.S3FileSystem(**opts)
        return self._fs_instance

    # endregion

    def _s3_path(self, key: str) -> str:
        return f"{self._bucket}/{key}"

    # region: error mapping

    @contextmanager
    def _errors(self, key: str = "") -> Iterator[None]:
        """Map s3fs/botocore exceptions to titan_s3 errors."""
        try:
            yield
        except TitanRemoteError:
            raise
        except FileNotFoundError:
            raise NotFound(f"Not found: {key}", key=key, bucket=self._bucket) from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {key}", key=key, bucket=self._bucket) from None
        except Exception as exc:
            raise self._classify_error(exc, key) from exc

    def _classify_error(self, exc: Exception, key: str) -> TitanRemoteError:
        """Classify an unknown exception into a titan_s3 error type."""
        code, status = _error_code(exc)
        if code == "PreconditionFailed" or status == 412:
            return PreconditionFailed(f"Precondition failed: {key}", key=key, bucket=self._bucket)
        if code in ("NoSuchKey", "NoSuchBucket", "404") or status == 404:
            return NotFound(f"Not found: {key}", key=key, bucket=self._bucket)
        if code in ("AccessDenied", "403") or status == 403:
            return PermissionDenied(f"Permission denied: {key}", key=key, bucket=self._bucket)
        msg = str(exc).lower()
        if "precondition" in msg:
            return PreconditionFailed(f"Precondition failed: {key}", key=key, bucket=self._bucket)
        if any(kw in msg for kw in ("endpoint", "connect", "timeout", "dns", "name or service")):
            return BackendUnavailable(str(exc), key=key, bucket=self._bucket)
        return TitanRemoteError(str(exc), key=key, bucket=self._bucket)

    # endregion

    # region: read operations

    def read(self, key: str) -> BinaryIO:
        with self._errors(key):
            data = self._fs.cat_file(self._s3_path(key))
            return io.BytesIO(data)

    def read_bytes(self, key: str) -> bytes:
        with self._errors(key):
            return bytes(self._fs.cat_file(self._s3_path(key)))

    def head(self, key: str) -> ObjectInfo:
        with self._errors(key):
            response = self._fs.call_s3("head_object", Bucket=self._bucket, Key=key)
        return ObjectInfo(
            key=key,
            size=int(response.get("ContentLength", 0) or 0),
            etag=response.get("ETag"),
            metadata=dict(response.get("Metadata") or {}),
        )

    def download(self, key: str, destination: PathLike) -> None:
        log.debug("Downloading s3://%s/%s to %s", self._bucket, key, destination)
        with self._errors(key):
            self._fs.get_file(self._s3_path(key), os.fspath(destination))

    # endregion

    # region: write operations

    @staticmethod
    def _read_content(content: WritableContent) -> bytes:
        if isinstance(content, bytes):
            return content
        return content.read()

    def write(
        self,
        key: str,
        content: WritableContent,
        *,
        metadata: UserMetadata | None = None,
        if_match: str | None = None,
        create_only: bool = False,
    ) -> None:
        kwargs: dict[str, Any] = {}
        if metadata:
            kwargs["Metadata"] = dict(metadata)
        if if_match is not None:
            kwargs["IfMatch"] = if_match
        elif create_only:
            kwargs["IfNoneMatch"] = "*"
        data = self._read_content(content)
        log.debug("Writing %d bytes to s3://%s/%s", len(data), self._bucket, key)
        with self._errors(key):
            self._fs.pipe_file(self._s3_path(key), data, **kwargs)

    def upload(self, key: str, source: PathLike) -> None:
        log.debug("Uploading %s to s3://%s/%s", source, self._bucket, key)
        with self._errors(key):
            self._fs.put_file(os.fspath(source), self._s3_path(key))

    # endregion

    # region: lifecycle

    def close(self) -> None:
        if self._fs_instance is not None:
            self._fs_instance.clear_instance_cache()
            self._fs_instance = None

    def unwrap(self, type_hint: type[T]) -> T:
        import s3fs

        if type_hint is s3fs.S3FileSystem:
            return self._fs  # type: ignore[no-any-return]
        return super().unwrap(type_hint)

    # endregion
