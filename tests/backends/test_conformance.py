"""Backend conformance suite -- run against every backend."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from titan_s3._backend import Backend
from titan_s3._errors import NotFound, PreconditionFailed
from titan_s3._models import ObjectInfo

if TYPE_CHECKING:
    from pathlib import Path


class TestBackendIdentity:
    def test_backend_is_instance(self, backend: Backend) -> None:
        assert isinstance(backend, Backend)

    def test_name_is_string(self, backend: Backend) -> None:
        assert isinstance(backend.name, str)
        assert len(backend.name) > 0

    def test_bucket(self, backend: Backend) -> None:
        assert backend.bucket


class TestBackendRead:
    def test_read_bytes(self, backend: Backend) -> None:
        backend.write("a/b.txt", b"hello")
        assert backend.read_bytes("a/b.txt") == b"hello"

    def test_read_stream(self, backend: Backend) -> None:
        backend.write("stream.txt", b"stream data")
        assert backend.read("stream.txt").read() == b"stream data"

    def test_read_missing(self, backend: Backend) -> None:
        with pytest.raises(NotFound):
            backend.read("missing.txt")

    def test_read_bytes_missing(self, backend: Backend) -> None:
        with pytest.raises(NotFound):
            backend.read_bytes("missing.txt")


class TestBackendWrite:
    def test_overwrite(self, backend: Backend) -> None:
        backend.write("f.txt", b"one")
        backend.write("f.txt", b"two")
        assert backend.read_bytes("f.txt") == b"two"

    def test_write_stream(self, backend: Backend) -> None:
        backend.write("f.txt", io.BytesIO(b"from stream"))
        assert backend.read_bytes("f.txt") == b"from stream"

    def test_empty_object(self, backend: Backend) -> None:
        backend.write("empty", b"")
        assert backend.read_bytes("empty") == b""

    def test_object_and_prefix_coexist(self, backend: Backend) -> None:
        backend.write("repo/c1", b"")
        backend.write("repo/c1/vol.tar.gz", b"archive")
        assert backend.read_bytes("repo/c1") == b""
        assert backend.read_bytes("repo/c1/vol.tar.gz") == b"archive"


class TestBackendConditionalWrite:
    def test_if_match(self, backend: Backend) -> None:
        backend.write("titan", b"one")
        etag = backend.head("titan").etag
        backend.write("titan", b"two", if_match=etag)
        assert backend.read_bytes("titan") == b"two"

    def test_if_match_stale(self, backend: Backend) -> None:
        backend.write("titan", b"one")
        etag = backend.head("titan").etag
        backend.write("titan", b"two")
        with pytest.raises(PreconditionFailed):
            backend.write("titan", b"three", if_match=etag)
        assert backend.read_bytes("titan") == b"two"

    def test_create_only(self, backend: Backend) -> None:
        backend.write("titan", b"one", create_only=True)
        assert backend.read_bytes("titan") == b"one"

    def test_create_only_existing(self, backend: Backend) -> None:
        backend.write("titan", b"one")
        with pytest.raises(PreconditionFailed):
            backend.write("titan", b"two", create_only=True)
        assert backend.read_bytes("titan") == b"one"


class TestBackendHead:
    def test_size_and_etag(self, backend: Backend) -> None:
        backend.write("f.txt", b"12345")
        info = backend.head("f.txt")
        assert isinstance(info, ObjectInfo)
        assert info.key == "f.txt"
        assert info.size == 5
        assert info.etag

    def test_etag_changes(self, backend: Backend) -> None:
        backend.write("f.txt", b"one")
        first = backend.head("f.txt").etag
        backend.write("f.txt", b"two")
        assert backend.head("f.txt").etag != first

    def test_user_metadata(self, backend: Backend) -> None:
        backend.write("c1", b"", metadata={"io.titan-data": '{"id": "c1", "properties": {}}'})
        assert backend.head("c1").metadata == {"io.titan-data": '{"id": "c1", "properties": {}}'}

    def test_no_user_metadata(self, backend: Backend) -> None:
        backend.write("c1", b"")
        assert backend.head("c1").metadata == {}

    def test_head_missing(self, backend: Backend) -> None:
        with pytest.raises(NotFound):
            backend.head("missing")


class TestBackendTransfer:
    def test_upload_download(self, backend: Backend, tmp_path: Path) -> None:
        source = tmp_path / "source.tar.gz"
        source.write_bytes(bytes(range(256)) * 1024)
        backend.upload("c1/vol.tar.gz", source)
        destination = tmp_path / "dest.tar.gz"
        backend.download("c1/vol.tar.gz", destination)
        assert destination.read_bytes() == source.read_bytes()

    def test_download_missing(self, backend: Backend, tmp_path: Path) -> None:
        with pytest.raises(NotFound):
            backend.download("missing.tar.gz", tmp_path / "out")


def test_context_manager(backend: Backend) -> None:
    with backend as b:
        assert b is backend
