"""Backend abstract base class — the object store contract."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, BinaryIO, TypeVar

from titan_s3._errors import TitanRemoteError

if TYPE_CHECKING:
    from types import TracebackType

    from titan_s3._models import ObjectInfo
    from titan_s3._types import PathLike, UserMetadata, WritableContent

T = TypeVar("T")


class Backend(abc.ABC):
    """Abstract base class for the object stores commits are kept in.

    A backend is bound to one bucket. Keys are plain object keys, with no
    directory semantics. Backend-native exceptions must never leak; they
    must be mapped to ``titan_s3`` errors.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Unique identifier for this backend type (e.g. ``'s3'``, ``'memory'``)."""

    @property
    @abc.abstractmethod
    def bucket(self) -> str:
        """The bucket this backend is bound to."""

    @abc.abstractmethod
    def read(self, key: str) -> BinaryIO:
        """Open an object for reading and return a binary stream.

        :raises NotFound: If the object does not exist.
        """

    @abc.abstractmethod
    def read_bytes(self, key: str) -> bytes:
        """Read the full content of an object.

        :raises NotFound: If the object does not exist.
        """

    @abc.abstractmethod
    def head(self, key: str) -> ObjectInfo:
        """Fetch size, ETag and user metadata without the body.

        :raises NotFound: If the object does not exist.
        """

    @abc.abstractmethod
    def write(
        self,
        key: str,
        content: WritableContent,
        *,
        metadata: UserMetadata | None = None,
        if_match: str | None = None,
        create_only: bool = False,
    ) -> None:
        """Create or overwrite an object.

        :param metadata: User metadata to attach to the object.
        :param if_match: Only write if the current object carries this ETag.
        :param create_only: Only write if no object exists at ``key``.
        :raises PreconditionFailed: If ``if_match`` or ``create_only`` does not hold.
        """

    @abc.abstractmethod
    def download(self, key: str, destination: PathLike) -> None:
        """Stream an object into a local file.

        :raises NotFound: If the object does not exist.
        """

    @abc.abstractmethod
    def upload(self, key: str, source: PathLike) -> None:
        """Stream a local file into an object, overwriting any existing one."""

    def close(self) -> None:  # noqa: B027
        """Release resources. Default is a no-op."""

    def __enter__(self) -> Backend:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def unwrap(self, type_hint: type[T]) -> T:
        """Return the native client handle if it matches the requested type.

        :param type_hint: The expected type (e.g., ``s3fs.S3FileSystem``).
        :raises TitanRemoteError: If the backend cannot provide the requested type.
        """
        raise TitanRemoteError(
            f"Backend '{self.name}' does not expose native handle of type {type_hint.__name__}",
            bucket=self.bucket,
        )
