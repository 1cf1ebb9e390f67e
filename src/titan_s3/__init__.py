"""S3 remote provider for whole-commit, whole-volume repositories."""

from titan_s3._backend import Backend
from titan_s3._config import Parameters, ProviderConfig, Remote
from titan_s3._credentials import Credentials, default_parameters, resolve_credentials
from titan_s3._errors import (
    BackendUnavailable,
    InvalidRemote,
    MissingCredentials,
    NotFound,
    OperationStateError,
    PermissionDenied,
    PreconditionFailed,
    TitanRemoteError,
)
from titan_s3._index import CommitIndex, match_tags
from titan_s3._metadata import MetadataStore
from titan_s3._models import CommitRecord, ObjectInfo, OperationType, RemoteOperation
from titan_s3._operation import OperationContext, OperationState
from titan_s3._path import METADATA_PROPERTY, archive_key, metadata_key, resolve_commit_key, resolve_path
from titan_s3._provider import S3Remote
from titan_s3._registry import open_backend, register_backend
from titan_s3._uri import parse_uri, to_uri

__version__ = "0.1.0"

__all__ = [
    # Core
    "S3Remote",
    "Backend",
    "register_backend",
    "open_backend",
    # Key layout
    "resolve_path",
    "resolve_commit_key",
    "metadata_key",
    "archive_key",
    "METADATA_PROPERTY",
    # Commits & operations
    "CommitRecord",
    "CommitIndex",
    "MetadataStore",
    "match_tags",
    "ObjectInfo",
    "RemoteOperation",
    "OperationType",
    "OperationContext",
    "OperationState",
    # Config
    "Remote",
    "Parameters",
    "ProviderConfig",
    "Credentials",
    "resolve_credentials",
    "default_parameters",
    "parse_uri",
    "to_uri",
    # Errors
    "TitanRemoteError",
    "NotFound",
    "PermissionDenied",
    "PreconditionFailed",
    "BackendUnavailable",
    "InvalidRemote",
    "MissingCredentials",
    "OperationStateError",
    # Version
    "__version__",
]
