"""Exception hierarchy for ec2-login.

Every failure the login flow can hit is an ``Ec2LoginError``. All of them are
fatal except ``KeyNotFoundError``, which ends the run with a message instead of
an error report.
"""

from __future__ import annotations


class Ec2LoginError(Exception):
    """Base class for all ec2-login errors."""


class ProviderError(Ec2LoginError):
    """Base class for cloud provider failures."""


class ProviderCredentialsError(ProviderError):
    """Cloud credentials are missing or unusable."""


class ProviderAPIError(ProviderError):
    """A cloud API call failed.

    Parameters
    ----------
    message : str
        Human readable description including the underlying cause
    error_code : str | None
        Provider error code (e.g. ``UnauthorizedOperation``), if known
    """

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code


class QueryError(ProviderAPIError):
    """Listing instances failed."""


class StartError(ProviderAPIError):
    """The start command for an instance failed."""


class SecretFetchError(ProviderAPIError):
    """The secret store could not return the key material."""


class StartTimeoutError(Ec2LoginError):
    """An instance did not reach the running state in time."""


class InstanceStateError(Ec2LoginError):
    """An instance is in a state the login flow cannot work with."""


class KeyFileWriteError(Ec2LoginError):
    """The transient key file could not be created or written."""


class DirectoryReadError(Ec2LoginError):
    """The local SSH directory could not be listed."""


class InsecureKeyError(Ec2LoginError):
    """A local key file is readable by users other than its owner."""


class SessionError(Ec2LoginError):
    """The ssh client could not be started or exited with a failure."""


class SelectionError(Ec2LoginError):
    """The operator picked something that is not on the menu."""


class KeyNotFoundError(Ec2LoginError):
    """No usable key material exists for the selected instance."""
