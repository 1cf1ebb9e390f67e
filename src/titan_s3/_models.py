"""Immutable commit, object and operation models."""

from __future__ import annotations

import dataclasses
import enum
import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from titan_s3._config import Parameters, Remote
    from titan_s3._types import Properties, UserMetadata


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    """One commit as stored in the metadata log and on its own object.

    :param id: Opaque commit identifier.
    :param properties: Open-schema commit properties; ``properties["tags"]``
        holds the string tags used for filtering.
    """

    id: str
    properties: Properties = dataclasses.field(default_factory=dict)

    @property
    def tags(self) -> dict[str, object]:
        """The ``tags`` sub-mapping, or an empty dict."""
        tags = self.properties.get("tags")
        if isinstance(tags, dict):
            return tags
        return {}

    def to_json(self) -> str:
        """Serialize as the ``{"id": ..., "properties": {...}}`` envelope."""
        return json.dumps({"id": self.id, "properties": self.properties})

    @classmethod
    def from_envelope(cls, envelope: object) -> CommitRecord | None:
        """Build from a decoded envelope, or ``None`` if ``id`` or ``properties`` is missing."""
        if not isinstance(envelope, dict):
            return None
        commit_id = envelope.get("id")
        properties = envelope.get("properties")
        if not isinstance(commit_id, str) or not isinstance(properties, dict):
            return None
        return cls(id=commit_id, properties=properties)


@dataclasses.dataclass(frozen=True)
class ObjectInfo:
    """Head-of-object snapshot.

    :param key: Object key within the bucket.
    :param size: Content length in bytes.
    :param etag: Entity tag, used for conditional writes.
    :param metadata: User metadata attached to the object.
    """

    key: str
    size: int
    etag: str | None = None
    metadata: UserMetadata = dataclasses.field(default_factory=dict)


class OperationType(enum.Enum):
    """Direction of a remote operation."""

    PUSH = "push"
    PULL = "pull"


@dataclasses.dataclass(frozen=True)
class RemoteOperation:
    """A push or pull of one commit, as handed over by the versioning host.

    :param remote: The remote being pushed to or pulled from.
    :param parameters: Per-call credential overrides.
    :param commit_id: The commit being transferred.
    :param operation_id: Host-assigned identifier, used for logging.
    :param type: Transfer direction.
    """

    remote: Remote
    parameters: Parameters
    commit_id: str
    operation_id: str = ""
    type: OperationType = OperationType.PUSH
