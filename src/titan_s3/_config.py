"""Configuration model — immutable data containers describing remotes and the provider."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping

from titan_s3._errors import InvalidRemote

_REMOTE_REQUIRED = ("bucket",)
_REMOTE_OPTIONAL = ("path", "accessKey", "secretKey", "region")
_PARAMETER_FIELDS = ("accessKey", "secretKey", "region", "sessionToken")


def _validate_fields(
    data: Mapping[str, object],
    required: tuple[str, ...],
    optional: tuple[str, ...],
    *,
    kind: str,
) -> None:
    for name in required:
        if data.get(name) is None:
            raise InvalidRemote(f"Missing required {kind} field '{name}'")
    allowed = set(required) | set(optional)
    for name, value in data.items():
        if name not in allowed:
            raise InvalidRemote(f"Invalid {kind} field '{name}'. Allowed fields: {sorted(allowed)}")
        if value is not None and not isinstance(value, str):
            raise InvalidRemote(f"{kind.capitalize()} field '{name}' must be a string")


@dataclasses.dataclass(frozen=True)
class Remote:
    """Describes where a repository lives in object storage.

    :param bucket: Bucket name (required, non-empty).
    :param path: Optional key prefix under which the repository lives.
    :param access_key: Optional static AWS access key ID.
    :param secret_key: Optional static AWS secret access key.
    :param region: Optional AWS region name.
    """

    bucket: str
    path: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str | None = None

    def __post_init__(self) -> None:
        if not self.bucket or not self.bucket.strip():
            raise InvalidRemote("bucket must be a non-empty string")
        if (self.access_key is None) != (self.secret_key is None):
            raise InvalidRemote("Either both access key and secret key must be set, or neither")

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Remote:
        """Construct from a plain remote mapping using the wire field names.

        Required field is ``bucket``; ``path``, ``accessKey``, ``secretKey``
        and ``region`` are optional.

        :raises InvalidRemote: On missing, unknown, or mistyped fields.
        """
        _validate_fields(data, _REMOTE_REQUIRED, _REMOTE_OPTIONAL, kind="remote")
        return cls(
            bucket=str(data["bucket"]),
            path=data.get("path"),  # type: ignore[arg-type]
            access_key=data.get("accessKey"),  # type: ignore[arg-type]
            secret_key=data.get("secretKey"),  # type: ignore[arg-type]
            region=data.get("region"),  # type: ignore[arg-type]
        )

    def to_dict(self) -> dict[str, str]:
        """Wire representation; absent fields are omitted."""
        values = {
            "bucket": self.bucket,
            "path": self.path,
            "accessKey": self.access_key,
            "secretKey": self.secret_key,
            "region": self.region,
        }
        return {k: v for k, v in values.items() if v is not None}


@dataclasses.dataclass(frozen=True)
class Parameters:
    """Per-call credential overrides. Never persisted.

    :param access_key: AWS access key ID.
    :param secret_key: AWS secret access key.
    :param region: AWS region name.
    :param session_token: Session token for temporary credentials.
    """

    access_key: str | None = None
    secret_key: str | None = None
    region: str | None = None
    session_token: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Parameters:
        """Construct from a plain parameter mapping. All fields are optional.

        :raises InvalidRemote: On unknown or mistyped fields.
        """
        _validate_fields(data, (), _PARAMETER_FIELDS, kind="parameter")
        return cls(
            access_key=data.get("accessKey"),  # type: ignore[arg-type]
            secret_key=data.get("secretKey"),  # type: ignore[arg-type]
            region=data.get("region"),  # type: ignore[arg-type]
            session_token=data.get("sessionToken"),  # type: ignore[arg-type]
        )

    def to_dict(self) -> dict[str, str]:
        values = {
            "accessKey": self.access_key,
            "secretKey": self.secret_key,
            "region": self.region,
            "sessionToken": self.session_token,
        }
        return {k: v for k, v in values.items() if v is not None}

    def __repr__(self) -> str:
        secret = "*****" if self.secret_key is not None else None
        token = "*****" if self.session_token is not None else None
        return (
            f"Parameters(access_key={self.access_key!r}, secret_key={secret!r}, "
            f"region={self.region!r}, session_token={token!r})"
        )


@dataclasses.dataclass(frozen=True)
class ProviderConfig:
    """Top-level provider configuration.

    :param backend: Backend type identifier (e.g. ``"s3"``, ``"memory"``).
    :param options: Backend-specific keyword arguments (e.g. ``endpoint_url``).
    :param conditional_writes: Guard metadata-log writes with the ETag seen at read time.
    :param max_write_attempts: Attempts per log mutation when conditional writes are on.
    """

    backend: str = "s3"
    options: dict[str, object] = dataclasses.field(default_factory=dict)
    conditional_writes: bool = False
    max_write_attempts: int = 5

    def validate(self, known_backends: list[str]) -> None:
        """Validate the backend type and retry bound.

        :param known_backends: Registered backend type names.
        :raises ValueError: If the config is invalid.
        """
        if self.backend not in known_backends:
            raise ValueError(f"Unknown backend type '{self.backend}'. Registered types: {sorted(known_backends)}")
        if self.max_write_attempts < 1:
            raise ValueError(f"max_write_attempts must be at least 1, got {self.max_write_attempts}")

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> ProviderConfig:
        """Construct from a plain dict (e.g. parsed TOML/JSON).

        :param data: Dict with optional ``backend``, ``options``,
            ``conditional_writes`` and ``max_write_attempts`` keys.
        """
        options = data.get("options", {})
        if not isinstance(options, dict):
            msg = "Expected 'options' to be a dict"
            raise TypeError(msg)
        attempts = data.get("max_write_attempts", 5)
        if not isinstance(attempts, int) or isinstance(attempts, bool):
            msg = "Expected 'max_write_attempts' to be an int"
            raise TypeError(msg)
        return cls(
            backend=str(data.get("backend", "s3")),
            options=dict(options),
            conditional_writes=bool(data.get("conditional_writes", False)),
            max_write_attempts=attempts,
        )
