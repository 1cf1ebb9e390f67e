"""Shared test fixtures and marker registration."""

from __future__ import annotations

import pytest

from titan_s3._config import Parameters, ProviderConfig, Remote
from titan_s3._provider import S3Remote
from titan_s3.backends._memory import Buckets, MemoryBackend


def pytest_configure(config: object) -> None:
    """Register custom markers."""
    if isinstance(config, pytest.Config):
        config.addinivalue_line("markers", "integration: requires external services")


@pytest.fixture
def objects() -> Buckets:
    """Bucket mapping shared by every memory backend in a test."""
    return {}


@pytest.fixture
def remote() -> Remote:
    return Remote(bucket="bucket", path="repo")


@pytest.fixture
def params() -> Parameters:
    return Parameters(access_key="ACCESS", secret_key="SECRET", region="us-west-2")


@pytest.fixture
def memory_backend(objects: Buckets) -> MemoryBackend:
    return MemoryBackend("bucket", objects=objects)


@pytest.fixture
def provider(objects: Buckets) -> S3Remote:
    with S3Remote(ProviderConfig(backend="memory", options={"objects": objects})) as p:
        yield p  # type: ignore[misc]
