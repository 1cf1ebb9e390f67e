"""Remote URIs — ``s3://bucket/path`` parsing and redacted display."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final
from urllib.parse import urlsplit

from titan_s3._config import Remote
from titan_s3._errors import InvalidRemote

if TYPE_CHECKING:
    from collections.abc import Mapping

SCHEME: Final = "s3"
REDACTED: Final = "*****"

_URI_PROPERTIES = ("accessKey", "secretKey", "region")


def parse_uri(uri: str, properties: Mapping[str, str] | None = None) -> Remote:
    """Parse ``s3://bucket[/path]`` plus extra properties into a :class:`Remote`.

    :param uri: The remote URI.
    :param properties: Optional ``accessKey``, ``secretKey`` and ``region``.
    :raises InvalidRemote: On a wrong scheme, user info, a port, a missing
        bucket, an unknown property, or a lone access/secret key.
    """
    properties = dict(properties or {})
    parts = urlsplit(uri)
    if parts.scheme != SCHEME:
        raise InvalidRemote(f"Invalid remote URI {uri!r}: scheme must be '{SCHEME}'")
    netloc = parts.netloc
    if "@" in netloc:
        raise InvalidRemote(f"Invalid remote URI {uri!r}: user information is not supported")
    if ":" in netloc:
        raise InvalidRemote(f"Invalid remote URI {uri!r}: a port is not supported")
    if not netloc:
        raise InvalidRemote(f"Invalid remote URI {uri!r}: missing bucket name")

    for name in properties:
        if name not in _URI_PROPERTIES:
            raise InvalidRemote(f"Invalid remote property '{name}'. Allowed properties: {sorted(_URI_PROPERTIES)}")

    path = parts.path.strip("/") or None
    return Remote(
        bucket=netloc,
        path=path,
        access_key=properties.get("accessKey"),
        secret_key=properties.get("secretKey"),
        region=properties.get("region"),
    )


def to_uri(remote: Remote) -> tuple[str, dict[str, str]]:
    """Render a remote as a display URI plus its extra properties.

    The secret key is always shown as ``*****``; absent properties are omitted.
    """
    uri = f"{SCHEME}://{remote.bucket}"
    if remote.path is not None:
        uri = f"{uri}/{remote.path}"
    props: dict[str, str] = {}
    if remote.access_key is not None:
        props["accessKey"] = remote.access_key
    if remote.secret_key is not None:
        props["secretKey"] = REDACTED
    if remote.region is not None:
        props["region"] = remote.region
    return uri, props
