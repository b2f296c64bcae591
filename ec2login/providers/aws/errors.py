"""Translation of botocore exceptions into ec2-login provider errors."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
)

from ec2login.exceptions import ProviderAPIError, ProviderCredentialsError

logger = logging.getLogger(__name__)


@contextmanager
def handle_aws_errors(
    action: str, error_class: type[ProviderAPIError] = ProviderAPIError
) -> Iterator[None]:
    """Convert botocore failures raised inside the block.

    Parameters
    ----------
    action : str
        Short description of the operation, used as message prefix
    error_class : type[ProviderAPIError]
        Error raised for API and transport failures

    Raises
    ------
    ProviderCredentialsError
        If credentials or the region cannot be resolved
    ProviderAPIError
        ``error_class`` for any other botocore failure, carrying the AWS
        error code when there is one
    """
    try:
        yield
    except (NoCredentialsError, PartialCredentialsError, NoRegionError) as e:
        raise ProviderCredentialsError(f"{action}: {e}") from e
    except ClientError as e:
        error = e.response.get("Error", {})
        error_code = error.get("Code")
        message = error.get("Message") or str(e)
        logger.debug("%s failed with %s: %s", action, error_code, message)
        raise error_class(f"{action}: {message}", error_code=error_code) from e
    except BotoCoreError as e:
        raise error_class(f"{action}: {e}") from e
