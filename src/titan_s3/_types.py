"""Type aliases used throughout titan_s3."""

from __future__ import annotations

import os  # noqa: TC003
from typing import BinaryIO, Optional, Union

PathLike = Union[str, "os.PathLike[str]"]  # noqa: UP007
WritableContent = BinaryIO | bytes
Properties = dict[str, object]
TagFilter = tuple[str, Optional[str]]  # noqa: UP045
UserMetadata = dict[str, str]
