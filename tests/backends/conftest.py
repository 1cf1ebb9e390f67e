"""Backend test fixtures -- parameterized for conformance testing."""

from __future__ import annotations

import socket
import uuid
from typing import TYPE_CHECKING

import pytest

from titan_s3.backends._memory import MemoryBackend

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from titan_s3._backend import Backend

REGION = "us-east-1"


def _s3_available() -> bool:
    try:
        import moto  # noqa: F401
        import s3fs  # noqa: F401

        return True
    except ImportError:
        return False


def _free_port() -> int:
    with socket.socket() as s:
        s.bind(("", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def moto_server() -> Iterator[str | None]:
    """Start a moto HTTP server for the test session.

    Uses server mode instead of mock_aws() to avoid Python 3.13
    PEP 667 f_locals incompatibility with s3fs/aiobotocore.
    """
    if not _s3_available():
        yield None
        return
    from moto.moto_server.threaded_moto_server import ThreadedMotoServer

    port = _free_port()
    server = ThreadedMotoServer(port=port, verbose=False)
    server.start()
    yield f"http://127.0.0.1:{port}"
    server.stop()


def _create_bucket(endpoint_url: str) -> str:
    import boto3

    bucket = f"test-{uuid.uuid4().hex[:8]}"
    client = boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        region_name=REGION,
    )
    client.create_bucket(Bucket=bucket)
    return bucket


@pytest.fixture
def make_bucket(moto_server: str | None) -> Callable[[], str]:
    """Factory creating uniquely named buckets on the moto server."""
    assert moto_server is not None
    return lambda: _create_bucket(moto_server)


_s3_param = pytest.param(
    "s3",
    marks=pytest.mark.skipif(not _s3_available(), reason="moto/s3fs not installed"),
)


@pytest.fixture(params=["memory", _s3_param])
def backend(request: pytest.FixtureRequest, moto_server: str | None) -> Iterator[Backend]:
    """Parameterized backend fixture. Add new backends here."""
    if request.param == "memory":
        yield MemoryBackend("conformance")
    elif request.param == "s3":
        from titan_s3.backends._s3 import S3Backend

        assert moto_server is not None
        b = S3Backend(
            bucket=_create_bucket(moto_server),
            key="testing",
            secret="testing",
            region_name=REGION,
            endpoint_url=moto_server,
        )
        yield b
        b.close()
    else:
        pytest.skip(f"Unknown backend: {request.param}")
