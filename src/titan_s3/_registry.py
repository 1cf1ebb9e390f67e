"""Backend registry — maps type strings to backend classes and builds bound clients."""

from __future__ import annotations

from typing import TYPE_CHECKING

from titan_s3._credentials import resolve_credentials

if TYPE_CHECKING:
    from titan_s3._backend import Backend
    from titan_s3._config import Parameters, ProviderConfig, Remote

# Global backend factory registry: maps type strings to backend classes.
_BACKEND_FACTORIES: dict[str, type[Backend]] = {}


def register_backend(type_name: str, cls: type[Backend]) -> None:
    """Register a backend class for a given type string.

    :param type_name: The type identifier (e.g. ``"s3"``).
    :param cls: The backend class to instantiate.
    """
    _BACKEND_FACTORIES[type_name] = cls


def _register_builtin_backends() -> None:
    """Register the built-in backends."""
    from titan_s3.backends._memory import MemoryBackend
    from titan_s3.backends._s3 import S3Backend

    _BACKEND_FACTORIES.setdefault("s3", S3Backend)
    _BACKEND_FACTORIES.setdefault("memory", MemoryBackend)


def registered_backends() -> list[str]:
    """Names of every registered backend type."""
    _register_builtin_backends()
    return sorted(_BACKEND_FACTORIES)


def open_backend(config: ProviderConfig, remote: Remote, parameters: Parameters) -> Backend:
    """Build a backend bound to ``remote.bucket`` with resolved credentials.

    Construction makes no network call; backends connect lazily.

    :raises MissingCredentials: If credentials cannot be resolved.
    :raises ValueError: If the backend type is unknown or rejects its options.
    """
    _register_builtin_backends()
    credentials = resolve_credentials(remote, parameters)
    if config.backend not in _BACKEND_FACTORIES:
        raise ValueError(
            f"Unknown backend type '{config.backend}'. Registered types: {sorted(_BACKEND_FACTORIES.keys())}"
        )
    factory = _BACKEND_FACTORIES[config.backend]
    try:
        return factory(  # type: ignore[call-arg]
            remote.bucket,
            key=credentials.access_key,
            secret=credentials.secret_key,
            token=credentials.session_token,
            region_name=credentials.region,
            **config.options,
        )
    except TypeError as exc:
        raise ValueError(
            f"Invalid options for backend type {config.backend!r}: {exc}. "
            f"Provided options: {sorted(config.options.keys())}"
        ) from exc
