"""Quickstart: push a commit, list it, and pull it back with titan-s3-remote.

Demonstrates:
- Parsing an ``s3://`` remote URI
- Pushing a volume archive and commit metadata in one operation
- Listing commits by tag and looking one up by id
- Pulling the archive back into a local file

Uses the in-memory backend so no AWS account is needed.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from titan_s3 import OperationType, Parameters, ProviderConfig, RemoteOperation, S3Remote

if __name__ == "__main__":
    config = ProviderConfig(backend="memory", options={"objects": {}})
    params = Parameters(access_key="demo", secret_key="demo", region="us-east-1")

    with tempfile.TemporaryDirectory() as tmp, S3Remote(config) as provider:
        remote = provider.parse_uri("s3://demo-bucket/projects/db")
        uri, props = provider.to_uri(remote)
        print(f"Remote: {uri} {props}")

        archive = Path(tmp) / "data.tar.gz"
        archive.write_bytes(b"pretend this is a gzipped tarball")

        # Push
        push = provider.start_operation(RemoteOperation(remote=remote, parameters=params, commit_id="c1"))
        provider.push_archive(push, "data", archive)
        provider.push_metadata(push, {"tags": {"env": "dev"}}, is_update=False)
        provider.end_operation(push, succeeded=True)

        # Query
        for record in provider.list_commits(remote, params, [("env", "dev")]):
            print(f"Commit {record.id}: {record.properties}")
        print(f"Lookup c1: {provider.get_commit(remote, params, 'c1')}")

        # Pull
        pull = provider.start_operation(
            RemoteOperation(remote=remote, parameters=params, commit_id="c1", type=OperationType.PULL)
        )
        destination = Path(tmp) / "restored.tar.gz"
        provider.pull_archive(pull, "data", destination)
        provider.end_operation(pull, succeeded=True)
        print(f"Restored {destination.stat().st_size} bytes")

    print("Done!")
