"""Metadata log — the JSON-lines object listing every commit in a repository."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, BinaryIO

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from titan_s3._errors import NotFound, PreconditionFailed
from titan_s3._index import iter_log_records
from titan_s3._models import CommitRecord
from titan_s3._path import metadata_key, resolve_path

if TYPE_CHECKING:
    from collections.abc import Callable

    from titan_s3._backend import Backend
    from titan_s3._config import Remote
    from titan_s3._types import Properties

log = logging.getLogger(__name__)


class MetadataStore:
    """Read, append to and rewrite one repository's metadata log.

    The object store offers no transactions, so every mutation is a plain
    read-modify-write of the whole log object. Two writers that overlap can
    lose each other's changes. With ``conditional_writes`` the write is
    guarded by the ETag observed at read time and the whole
    read-modify-write is retried on :class:`PreconditionFailed`.

    :param backend: Backend bound to the remote's bucket.
    :param remote: The remote whose log is managed.
    :param conditional_writes: Guard writes with ``If-Match``/``If-None-Match``.
    :param max_attempts: Attempts per mutation when conditional writes are on.
    """

    def __init__(
        self,
        backend: Backend,
        remote: Remote,
        *,
        conditional_writes: bool = False,
        max_attempts: int = 5,
    ) -> None:
        self._backend = backend
        self._remote = remote
        self._conditional = conditional_writes
        self._max_attempts = max_attempts
        _bucket, base = resolve_path(remote)
        self._key = metadata_key(base)

    def __repr__(self) -> str:
        return f"MetadataStore(bucket={self._remote.bucket!r}, key={self._key!r})"

    @property
    def key(self) -> str:
        """Object key of the log."""
        return self._key

    def read_log(self) -> BinaryIO:
        """Stream the log content; a log that was never written reads as empty."""
        try:
            return self._backend.read(self._key)
        except NotFound:
            return io.BytesIO(b"")

    def append(self, line: str) -> None:
        """Append one serialized record plus a trailing newline."""
        encoded = f"{line}\n".encode()
        self._update(lambda content: content + encoded)
        log.debug("Appended %d bytes to %s", len(encoded), self._key)

    def append_record(self, record: CommitRecord) -> None:
        self.append(record.to_json())

    def rewrite(self, commit_id: str, properties: Properties) -> None:
        """Replace the properties of ``commit_id`` and write back the whole log.

        Every other well-formed record is preserved in log order; malformed
        lines are dropped. A commit that has no record yet is appended.
        """

        def replace(content: bytes) -> bytes:
            records = list(iter_log_records(io.BytesIO(content)))
            replacement = CommitRecord(id=commit_id, properties=properties)
            found = False
            for i, record in enumerate(records):
                if record.id == commit_id:
                    records[i] = replacement
                    found = True
            if not found:
                log.warning("Commit %s has no metadata log record, appending it", commit_id)
                records.append(replacement)
            return "".join(f"{r.to_json()}\n" for r in records).encode()

        self._update(replace)
        log.debug("Rewrote %s for commit %s", self._key, commit_id)

    # region: write seam

    def _snapshot(self) -> tuple[bytes, str | None]:
        """Current content and, under conditional writes, its ETag."""
        etag = None
        try:
            if self._conditional:
                etag = self._backend.head(self._key).etag
            content = self._backend.read_bytes(self._key)
        except NotFound:
            return b"", None
        return content, etag

    def _write_once(self, transform: Callable[[bytes], bytes]) -> None:
        content, etag = self._snapshot()
        updated = transform(content)
        if self._conditional:
            self._backend.write(self._key, updated, if_match=etag, create_only=etag is None)
        else:
            self._backend.write(self._key, updated)

    def _update(self, transform: Callable[[bytes], bytes]) -> None:
        """Apply ``transform`` to the log content and store the result."""
        if not self._conditional:
            self._write_once(transform)
            return
        retrying = Retrying(
            retry=retry_if_exception_type(PreconditionFailed),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_random_exponential(multiplier=0.1, max=2),
            before_sleep=before_sleep_log(log, logging.WARNING),  # type: ignore[arg-type,unused-ignore]
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                self._write_once(transform)

    # endregion
