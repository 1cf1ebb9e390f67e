"""In-memory object store backend.

Objects live in a dictionary keyed by bucket, then key, holding
``(data, etag, metadata)``. ETags are quoted MD5 hex digests, as S3 reports
them for single-part uploads. Pass the same ``objects`` mapping to several
backends to let them share buckets.
"""

from __future__ import annotations

import hashlib
import io
import logging
import shutil
import threading
from typing import TYPE_CHECKING, BinaryIO, NamedTuple

from titan_s3._backend import Backend
from titan_s3._errors import NotFound, PreconditionFailed
from titan_s3._models import ObjectInfo

if TYPE_CHECKING:
    from titan_s3._types import PathLike, UserMetadata, WritableContent

log = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class MemoryObject(NamedTuple):
    data: bytes
    etag: str
    metadata: dict[str, str]


Buckets = dict[str, dict[str, MemoryObject]]


class MemoryBackend(Backend):
    """Backend that holds every object in process memory.

    :param bucket: Bucket name (required, non-empty).
    :param objects: Shared bucket mapping; a private one is created when omitted.
    :param key: Accepted for interface parity, ignored.
    :param secret: Accepted for interface parity, ignored.
    :param token: Accepted for interface parity, ignored.
    :param region_name: Accepted for interface parity, ignored.
    """

    def __init__(
        self,
        bucket: str,
        *,
        objects: Buckets | None = None,
        key: str | None = None,
        secret: str | None = None,
        token: str | None = None,
        region_name: str | None = None,
    ) -> None:
        if not bucket or not bucket.strip():
            raise ValueError("bucket must be a non-empty string")
        self._bucket = bucket
        self._buckets: Buckets = objects if objects is not None else {}
        self._objects = self._buckets.setdefault(bucket, {})
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "memory"

    @property
    def bucket(self) -> str:
        return self._bucket

    def _get(self, key: str) -> MemoryObject:
        obj = self._objects.get(key)
        if obj is None:
            raise NotFound(f"Not found: {key}", key=key, bucket=self._bucket)
        return obj

    def read(self, key: str) -> BinaryIO:
        return io.BytesIO(self._get(key).data)

    def read_bytes(self, key: str) -> bytes:
        return self._get(key).data

    def head(self, key: str) -> ObjectInfo:
        obj = self._get(key)
        return ObjectInfo(key=key, size=len(obj.data), etag=obj.etag, metadata=dict(obj.metadata))

    def write(
        self,
        key: str,
        content: WritableContent,
        *,
        metadata: UserMetadata | None = None,
        if_match: str | None = None,
        create_only: bool = False,
    ) -> None:
        data = content if isinstance(content, bytes) else content.read()
        etag = f'"{hashlib.md5(data).hexdigest()}"'  # noqa: S324
        with self._lock:
            current = self._objects.get(key)
            if if_match is not None and (current is None or current.etag != if_match):
                raise PreconditionFailed(f"Precondition failed: {key}", key=key, bucket=self._bucket)
            if if_match is None and create_only and current is not None:
                raise PreconditionFailed(f"Object already exists: {key}", key=key, bucket=self._bucket)
            self._objects[key] = MemoryObject(data, etag, dict(metadata or {}))
        log.debug("Stored %d bytes at memory://%s/%s", len(data), self._bucket, key)

    def download(self, key: str, destination: PathLike) -> None:
        source = self.read(key)
        with open(destination, "wb") as f:
            shutil.copyfileobj(source, f, _CHUNK_SIZE)

    def upload(self, key: str, source: PathLike) -> None:
        with open(source, "rb") as f:
            self.write(key, f)
