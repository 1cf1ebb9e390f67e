"""Operation context — binds one push or pull to a backend and commit key."""

from __future__ import annotations

import contextlib
import enum
import logging
import os
import tempfile
from typing import TYPE_CHECKING

from titan_s3._errors import OperationStateError
from titan_s3._models import CommitRecord
from titan_s3._path import METADATA_PROPERTY, archive_key, resolve_commit_key

if TYPE_CHECKING:
    from titan_s3._backend import Backend
    from titan_s3._metadata import MetadataStore
    from titan_s3._models import RemoteOperation
    from titan_s3._types import PathLike, Properties

log = logging.getLogger(__name__)


class OperationState(enum.Enum):
    """Lifecycle of an operation context. Transitions are strictly linear."""

    CREATED = "created"
    ACTIVE = "active"
    CLOSED = "closed"


class OperationContext:
    """Per-operation session returned by ``start_operation``.

    Holds the backend and the commit key for the operation's commit. A
    context is meant to be driven sequentially by its owning operation and
    performs no locking of its own.

    :param operation: The host's operation.
    :param backend: Backend bound to the remote's bucket.
    :param metadata: Metadata log of the remote's repository.
    """

    def __init__(self, operation: RemoteOperation, backend: Backend, metadata: MetadataStore) -> None:
        self._operation = operation
        self._backend = backend
        self._metadata = metadata
        self._bucket = operation.remote.bucket
        self._key = resolve_commit_key(operation.remote, operation.commit_id)
        self._state = OperationState.CREATED

    def __repr__(self) -> str:
        return (
            f"OperationContext(commit={self._operation.commit_id!r}, "
            f"bucket={self._bucket!r}, key={self._key!r}, state={self._state.value!r})"
        )

    @property
    def operation(self) -> RemoteOperation:
        return self._operation

    @property
    def state(self) -> OperationState:
        return self._state

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def key(self) -> str:
        """Key prefix of the operation's commit."""
        return self._key

    def _require(self, state: OperationState) -> None:
        if self._state is not state:
            raise OperationStateError(
                f"Operation {self._operation.operation_id or self._operation.commit_id!r} is "
                f"{self._state.value}, expected {state.value}",
                key=self._key,
                bucket=self._bucket,
            )

    def activate(self) -> None:
        self._require(OperationState.CREATED)
        self._state = OperationState.ACTIVE
        log.info(
            "Started %s of commit %s on %s/%s",
            self._operation.type.value,
            self._operation.commit_id,
            self._bucket,
            self._key,
        )

    def pull_archive(self, volume: str, destination: PathLike) -> None:
        """Download ``<key>/<volume>.tar.gz`` into ``destination``.

        The file is written to a temporary sibling and renamed into place
        once the stream has drained.

        :raises NotFound: If the archive does not exist.
        """
        self._require(OperationState.ACTIVE)
        key = archive_key(self._key, volume)
        directory = os.path.dirname(os.path.abspath(destination))
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=".titan-", suffix=".part")
        os.close(fd)
        try:
            self._backend.download(key, tmp)
            os.replace(tmp, destination)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp)
            raise
        log.debug("Pulled volume %s of commit %s", volume, self._operation.commit_id)

    def push_archive(self, volume: str, source: PathLike) -> None:
        """Upload ``source`` to ``<key>/<volume>.tar.gz``, overwriting it."""
        self._require(OperationState.ACTIVE)
        self._backend.upload(archive_key(self._key, volume), source)
        log.debug("Pushed volume %s of commit %s", volume, self._operation.commit_id)

    def push_metadata(self, properties: Properties, is_update: bool) -> None:
        """Store commit metadata on the commit object and in the metadata log.

        :param is_update: The commit already has a log record, which is
            rewritten; otherwise a new record is appended. Not verified here.
        """
        self._require(OperationState.ACTIVE)
        record = CommitRecord(id=self._operation.commit_id, properties=properties)
        envelope = record.to_json()
        # Commit object: empty body, metadata only.
        self._backend.write(self._key, b"", metadata={METADATA_PROPERTY: envelope})
        if is_update:
            self._metadata.rewrite(record.id, properties)
        else:
            self._metadata.append(envelope)
        log.debug("Pushed metadata of commit %s (update=%s)", record.id, is_update)

    def close(self, succeeded: bool) -> None:
        """Discard the context. Partial transfers are left in place."""
        self._require(OperationState.ACTIVE)
        self._state = OperationState.CLOSED
        self._backend.close()
        log.info(
            "Ended %s of commit %s (%s)",
            self._operation.type.value,
            self._operation.commit_id,
            "succeeded" if succeeded else "failed",
        )
