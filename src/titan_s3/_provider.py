"""S3Remote — the provider facade handed to the versioning host."""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO

from titan_s3._config import Parameters, ProviderConfig, Remote
from titan_s3._credentials import default_parameters
from titan_s3._index import CommitIndex
from titan_s3._metadata import MetadataStore
from titan_s3._operation import OperationContext
from titan_s3._registry import open_backend, registered_backends
from titan_s3._uri import parse_uri, to_uri

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from types import TracebackType

    from titan_s3._backend import Backend
    from titan_s3._models import CommitRecord, RemoteOperation
    from titan_s3._types import PathLike, Properties, TagFilter


class S3Remote:
    """Stores whole commits in an S3 bucket.

    Each commit is a key below the remote's path, for example
    ``s3://bucket/path/to/repo/<commit>``. Each volume is one
    ``<commit>/<volume>.tar.gz`` object. Commit metadata is kept twice: as
    user metadata on the commit key, and as one line in the ``titan``
    metadata log at the repository root, which is what listing reads.

    :param config: Optional provider configuration. Validates immediately.
    :raises ValueError: If config is invalid.
    """

    provider = "s3"

    def __init__(self, config: ProviderConfig | None = None) -> None:
        self._config = config or ProviderConfig()
        self._config.validate(registered_backends())
        self._open: set[OperationContext] = set()

    def __repr__(self) -> str:
        return f"S3Remote(backend={self._config.backend!r})"

    @property
    def config(self) -> ProviderConfig:
        return self._config

    # region: client side

    def parse_uri(self, uri: str, properties: Mapping[str, str] | None = None) -> Remote:
        """Parse ``s3://bucket[/path]`` into a remote."""
        return parse_uri(uri, properties)

    def to_uri(self, remote: Remote) -> tuple[str, dict[str, str]]:
        """Display URI and redacted properties for ``remote``."""
        return to_uri(remote)

    def get_parameters(self, remote: Remote) -> Parameters:
        """Resolve client-side credentials for ``remote``."""
        return default_parameters(remote)

    # endregion

    # region: server side

    def validate_remote(self, remote: Mapping[str, object]) -> Remote:
        return Remote.from_dict(remote)

    def validate_parameters(self, parameters: Mapping[str, object]) -> Parameters:
        return Parameters.from_dict(parameters)

    def _backend(self, remote: Remote, parameters: Parameters) -> Backend:
        return open_backend(self._config, remote, parameters)

    def _metadata(self, backend: Backend, remote: Remote) -> MetadataStore:
        return MetadataStore(
            backend,
            remote,
            conditional_writes=self._config.conditional_writes,
            max_attempts=self._config.max_write_attempts,
        )

    def read_log(self, remote: Remote, parameters: Parameters) -> BinaryIO:
        """Raw metadata log content; empty if the log does not exist yet."""
        with self._backend(remote, parameters) as backend:
            return self._metadata(backend, remote).read_log()

    def append_metadata(self, remote: Remote, parameters: Parameters, line: str) -> None:
        """Append one serialized commit record to the metadata log."""
        with self._backend(remote, parameters) as backend:
            self._metadata(backend, remote).append(line)

    def rewrite_metadata(
        self, remote: Remote, parameters: Parameters, commit_id: str, properties: Properties
    ) -> None:
        """Replace one commit's record in the metadata log."""
        with self._backend(remote, parameters) as backend:
            self._metadata(backend, remote).rewrite(commit_id, properties)

    def get_commit(self, remote: Remote, parameters: Parameters, commit_id: str) -> Properties | None:
        """Properties of a single commit, or ``None`` if it has none."""
        with self._backend(remote, parameters) as backend:
            return CommitIndex(backend, remote, self._metadata(backend, remote)).get_commit(commit_id)

    def list_commits(
        self, remote: Remote, parameters: Parameters, tags: Sequence[TagFilter] = ()
    ) -> list[CommitRecord]:
        """Commits whose tags match every filter, sorted by id descending."""
        with self._backend(remote, parameters) as backend:
            return CommitIndex(backend, remote, self._metadata(backend, remote)).list_commits(tags)

    # endregion

    # region: operations

    def start_operation(self, operation: RemoteOperation) -> OperationContext:
        """Bind ``operation`` to a backend and its commit key.

        :raises MissingCredentials: If credentials cannot be resolved.
        """
        backend = self._backend(operation.remote, operation.parameters)
        context = OperationContext(operation, backend, self._metadata(backend, operation.remote))
        context.activate()
        self._open.add(context)
        return context

    def pull_archive(self, context: OperationContext, volume: str, destination: PathLike) -> None:
        context.pull_archive(volume, destination)

    def push_archive(self, context: OperationContext, volume: str, source: PathLike) -> None:
        context.push_archive(volume, source)

    def push_metadata(self, context: OperationContext, properties: Properties, is_update: bool) -> None:
        context.push_metadata(properties, is_update)

    def end_operation(self, context: OperationContext, succeeded: bool) -> None:
        """Close ``context``. Nothing written by a failed operation is rolled back."""
        self._open.discard(context)
        context.close(succeeded)

    # endregion

    def close(self) -> None:
        """End every operation still open, marking them failed."""
        for context in list(self._open):
            self.end_operation(context, succeeded=False)

    def __enter__(self) -> S3Remote:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
