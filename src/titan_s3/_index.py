"""Commit index — listing, filtering and point lookup of commits."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from titan_s3._errors import NotFound
from titan_s3._models import CommitRecord
from titan_s3._path import METADATA_PROPERTY, resolve_commit_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from titan_s3._backend import Backend
    from titan_s3._config import Remote
    from titan_s3._metadata import MetadataStore
    from titan_s3._types import Properties, TagFilter

log = logging.getLogger(__name__)


def iter_log_records(lines: Iterable[bytes | str]) -> Iterator[CommitRecord]:
    """Decode metadata-log lines in file order.

    Blank lines, lines that are not valid UTF-8 JSON, and records lacking ``id``
    or ``properties`` are skipped.
    """
    for lineno, raw in enumerate(lines, start=1):
        try:
            line = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            line = line.strip()
            if not line:
                continue
            envelope = json.loads(line)
        except ValueError:
            log.warning("Skipping malformed metadata log line %d", lineno)
            continue
        record = CommitRecord.from_envelope(envelope)
        if record is None:
            log.debug("Skipping incomplete metadata log line %d", lineno)
            continue
        yield record


def match_tags(properties: Properties, tags: Sequence[TagFilter]) -> bool:
    """Return ``True`` if ``properties["tags"]`` satisfies every filter.

    A filter ``(key, None)`` only requires the tag to exist; ``(key, value)``
    also requires an exact value match.
    """
    if not tags:
        return True
    commit_tags = properties.get("tags")
    if not isinstance(commit_tags, dict):
        return False
    for key, value in tags:
        if key not in commit_tags:
            return False
        if value is not None and commit_tags[key] != value:
            return False
    return True


class CommitIndex:
    """Read-side view of the commits in one repository.

    :param backend: Backend bound to the remote's bucket.
    :param remote: The remote whose commits are indexed.
    :param store: Metadata log the bulk listing reads from.
    """

    def __init__(self, backend: Backend, remote: Remote, store: MetadataStore) -> None:
        self._backend = backend
        self._remote = remote
        self._store = store

    def __repr__(self) -> str:
        return f"CommitIndex(bucket={self._remote.bucket!r}, path={self._remote.path!r})"

    def records(self) -> list[CommitRecord]:
        """Every well-formed log record, in log order."""
        with self._store.read_log() as stream:
            return list(iter_log_records(stream))

    def list_commits(self, tags: Sequence[TagFilter] = ()) -> list[CommitRecord]:
        """List commits matching all ``tags``, newest identifier first.

        Ordering is descending lexicographic by commit id, which is only
        chronological when ids are time-ordered.
        """
        matched = [r for r in self.records() if match_tags(r.properties, tags)]
        return sorted(matched, key=lambda r: r.id, reverse=True)

    def get_commit(self, commit_id: str) -> Properties | None:
        """Properties stored on the commit's own object, or ``None``.

        ``None`` is returned when the object does not exist, carries no
        commit metadata, or its envelope lacks ``properties``. Other store
        errors propagate.
        """
        key = resolve_commit_key(self._remote, commit_id)
        try:
            info = self._backend.head(key)
        except NotFound:
            return None
        raw = info.metadata.get(METADATA_PROPERTY)
        if raw is None:
            return None
        try:
            envelope = json.loads(raw)
        except ValueError:
            log.warning("Ignoring malformed commit metadata on %s", key)
            return None
        if not isinstance(envelope, dict):
            return None
        properties = envelope.get("properties")
        if not isinstance(properties, dict):
            return None
        return properties
