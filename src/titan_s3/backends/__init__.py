"""Backend implementations."""

from titan_s3.backends._memory import MemoryBackend
from titan_s3.backends._s3 import S3Backend

__all__ = ["MemoryBackend", "S3Backend"]
