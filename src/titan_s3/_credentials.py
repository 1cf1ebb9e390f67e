"""Credential resolution — merges parameters, remote config and the AWS provider chain."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import TYPE_CHECKING

import boto3

from titan_s3._config import Parameters
from titan_s3._errors import MissingCredentials

if TYPE_CHECKING:
    from titan_s3._config import Remote

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Credentials:
    """Fully resolved credentials for one (remote, parameters) pair.

    :param access_key: AWS access key ID.
    :param secret_key: AWS secret access key.
    :param region: AWS region name.
    :param session_token: Present for session-scoped (temporary) credentials.
    """

    access_key: str
    secret_key: str
    region: str
    session_token: str | None = None

    @property
    def is_session(self) -> bool:
        return self.session_token is not None

    def __repr__(self) -> str:
        return (
            f"Credentials(access_key={self.access_key!r}, secret_key='*****', "
            f"region={self.region!r}, session={self.is_session})"
        )


def resolve_credentials(remote: Remote, parameters: Parameters) -> Credentials:
    """Resolve the credentials a backend is built with.

    Each field comes from ``parameters`` first, then ``remote``. No
    environment lookup happens here; clients resolve that up front with
    :func:`default_parameters`.

    :raises MissingCredentials: If the access key, secret key or region is unresolved.
    """
    access_key = parameters.access_key if parameters.access_key is not None else remote.access_key
    if access_key is None:
        raise MissingCredentials("missing access key", field="accessKey")
    secret_key = parameters.secret_key if parameters.secret_key is not None else remote.secret_key
    if secret_key is None:
        raise MissingCredentials("missing secret key", field="secretKey")
    region = parameters.region if parameters.region is not None else remote.region
    if region is None:
        raise MissingCredentials("missing region", field="region")
    return Credentials(
        access_key=access_key,
        secret_key=secret_key,
        region=region,
        session_token=parameters.session_token,
    )


def default_parameters(remote: Remote) -> Parameters:
    """Build client-side parameters for ``remote``.

    Static keys on the remote win. Otherwise the default boto3 provider chain
    is consulted (``AWS_ACCESS_KEY_ID``, ``AWS_SECRET_ACCESS_KEY``,
    ``AWS_SESSION_TOKEN``, shared config files, instance metadata). The region
    comes from the remote, then ``AWS_REGION``, then the session's configured region.

    :raises MissingCredentials: If no access key, secret key or region can be found.
    """
    session = boto3.Session()
    region = remote.region or os.environ.get("AWS_REGION") or session.region_name

    if remote.access_key is not None and remote.secret_key is not None:
        access_key, secret_key, token = remote.access_key, remote.secret_key, None
    else:
        resolved = session.get_credentials()
        if resolved is None:
            raise MissingCredentials("unable to determine AWS credentials", field="accessKey")
        frozen = resolved.get_frozen_credentials()
        access_key, secret_key, token = frozen.access_key, frozen.secret_key, frozen.token
        if not access_key:
            raise MissingCredentials("unable to determine AWS access key", field="accessKey")
        if not secret_key:
            raise MissingCredentials("unable to determine AWS secret key", field="secretKey")
        log.debug("Resolved AWS credentials from the default provider chain (%s)", resolved.method)

    if not region:
        raise MissingCredentials("unable to determine AWS region", field="region")
    return Parameters(access_key=access_key, secret_key=secret_key, region=region, session_token=token)
