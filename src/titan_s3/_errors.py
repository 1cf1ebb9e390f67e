"""Normalized error hierarchy for titan_s3."""

from __future__ import annotations

from typing import Optional


class TitanRemoteError(Exception):
    """Base class for all titan_s3 errors.

    :param message: Human-readable error description.
    :param key: The object key involved in the error, if any.
    :param bucket: The bucket involved, if any.
    """

    def __init__(self, message: str = "", *, key: Optional[str] = None, bucket: Optional[str] = None) -> None:
        self.key = key
        self.bucket = bucket
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.bucket is not None:
            parts.append(f"bucket={self.bucket!r}")
        if self.key is not None:
            parts.append(f"key={self.key!r}")
        return " | ".join(parts) if len(parts) > 1 else parts[0]

    def __repr__(self) -> str:
        cls = type(self).__name__
        args = [repr(super().__str__())]
        if self.key is not None:
            args.append(f"key={self.key!r}")
        if self.bucket is not None:
            args.append(f"bucket={self.bucket!r}")
        return f"{cls}({', '.join(args)})"


class NotFound(TitanRemoteError):
    """Raised when an object does not exist."""


class PermissionDenied(TitanRemoteError):
    """Raised when access is denied by the object store."""


class PreconditionFailed(TitanRemoteError):
    """Raised when a conditional write loses to a concurrent writer."""


class BackendUnavailable(TitanRemoteError):
    """Raised when the object store cannot be reached or initialized."""


class InvalidRemote(TitanRemoteError):
    """Raised for malformed remote URIs, configurations, or parameters."""


class MissingCredentials(InvalidRemote):
    """Raised when an access key, secret key, or region cannot be resolved.

    :param field: The name of the unresolved credential field.
    """

    def __init__(self, message: str = "", *, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class OperationStateError(TitanRemoteError):
    """Raised when an operation context is used outside its active lifetime."""
