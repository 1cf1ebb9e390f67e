"""Tests for commit, object and operation models."""

from __future__ import annotations

import dataclasses
import json

import pytest

from titan_s3._config import Parameters, Remote
from titan_s3._models import CommitRecord, ObjectInfo, OperationType, RemoteOperation


class TestCommitRecord:
    def test_to_json(self) -> None:
        record = CommitRecord(id="a", properties={"tags": {"c": "d"}, "n": 1})
        assert json.loads(record.to_json()) == {"id": "a", "properties": {"tags": {"c": "d"}, "n": 1}}

    def test_to_json_is_single_line(self) -> None:
        record = CommitRecord(id="a", properties={"message": "line one\nline two"})
        assert "\n" not in record.to_json()

    def test_to_json_is_ascii(self) -> None:
        record = CommitRecord(id="a", properties={"author": "Zoë"})
        assert record.to_json().isascii()

    def test_tags(self) -> None:
        assert CommitRecord(id="a", properties={"tags": {"c": "d"}}).tags == {"c": "d"}

    def test_tags_absent(self) -> None:
        assert CommitRecord(id="a").tags == {}

    def test_tags_not_a_mapping(self) -> None:
        assert CommitRecord(id="a", properties={"tags": ["c"]}).tags == {}

    def test_from_envelope(self) -> None:
        record = CommitRecord.from_envelope({"id": "a", "properties": {"x": 1}})
        assert record == CommitRecord(id="a", properties={"x": 1})

    @pytest.mark.parametrize(
        "envelope",
        [{}, {"id": "a"}, {"properties": {}}, {"id": 1, "properties": {}}, {"id": "a", "properties": []}, []],
    )
    def test_from_incomplete_envelope(self, envelope: object) -> None:
        assert CommitRecord.from_envelope(envelope) is None


class TestObjectInfo:
    def test_defaults(self) -> None:
        info = ObjectInfo(key="k", size=0)
        assert info.etag is None
        assert info.metadata == {}


class TestRemoteOperation:
    def test_defaults(self) -> None:
        op = RemoteOperation(remote=Remote(bucket="b"), parameters=Parameters(), commit_id="c1")
        assert op.type is OperationType.PUSH
        assert op.operation_id == ""

    def test_immutable(self) -> None:
        op = RemoteOperation(remote=Remote(bucket="b"), parameters=Parameters(), commit_id="c1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            op.commit_id = "c2"  # type: ignore[misc]
