"""AWS Secrets Manager access for SSH key material."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import boto3

from ec2login.exceptions import SecretFetchError
from ec2login.providers.aws.errors import handle_aws_errors

logger = logging.getLogger(__name__)


class SecretStore:
    """Read secrets holding SSH private keys.

    Parameters
    ----------
    region : str | None
        AWS region, or None to use the boto3 default chain
    boto3_client_factory : Callable[..., Any] | None
        Optional factory for creating boto3 clients. If None, uses boto3.client
    """

    def __init__(
        self,
        region: str | None = None,
        boto3_client_factory: Callable[..., Any] | None = None,
    ) -> None:
        self.region = region
        self.boto3_client_factory = boto3_client_factory or boto3.client

        with handle_aws_errors("Creating Secrets Manager client", SecretFetchError):
            self.client = self.boto3_client_factory(
                "secretsmanager", region_name=region
            )

    def get_secret_bytes(self, secret_id: str) -> bytes:
        """Return the raw secret payload.

        A secret carries either ``SecretString`` or ``SecretBinary``. The
        string form is preferred when present.

        Parameters
        ----------
        secret_id : str
            Secret name or ARN

        Returns
        -------
        bytes
            Key material, unmodified

        Raises
        ------
        SecretFetchError
            If the call fails or the secret holds no value
        """
        logger.debug("Fetching secret %s", secret_id)

        with handle_aws_errors(
            f"Error retrieving key {secret_id} from Secrets Manager", SecretFetchError
        ):
            response = self.client.get_secret_value(SecretId=secret_id)

        secret_string = response.get("SecretString")
        if secret_string:
            return secret_string.encode("utf-8")

        secret_binary = response.get("SecretBinary")
        if secret_binary:
            return bytes(secret_binary)

        raise SecretFetchError(f"Secret {secret_id} has no value")
