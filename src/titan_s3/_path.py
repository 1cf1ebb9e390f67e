"""Object key layout for repositories, commits, archives and the metadata log."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from titan_s3._config import Remote

METADATA_OBJECT: Final = "titan"
METADATA_PROPERTY: Final = "io.titan-data"
ARCHIVE_SUFFIX: Final = ".tar.gz"


def resolve_path(remote: Remote, commit_id: str | None = None) -> tuple[str, str | None]:
    """Return the ``(bucket, key)`` identifying a commit, or the repository root.

    Example: with ``path="key"``, ``resolve_path(remote, "id")`` returns
    ``(bucket, "key/id")``; without a path it returns ``(bucket, "id")``.
    A ``None`` key means the bucket root.
    """
    if remote.path is None:
        key = commit_id
    elif commit_id is None:
        key = remote.path
    else:
        key = f"{remote.path}/{commit_id}"
    return remote.bucket, key


def metadata_key(key: str | None) -> str:
    """Key of the metadata log below ``key`` (the bucket root when ``None``)."""
    if key is None:
        return METADATA_OBJECT
    return f"{key}/{METADATA_OBJECT}"


def archive_key(key: str, volume: str) -> str:
    """Key of the archive for ``volume`` below a commit key."""
    return f"{key}/{volume}{ARCHIVE_SUFFIX}"


def resolve_commit_key(remote: Remote, commit_id: str) -> str:
    """Key of a commit's own object. Never the bucket root."""
    if remote.path is None:
        return commit_id
    return f"{remote.path}/{commit_id}"
