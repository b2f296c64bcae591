"""CLI entry point for ec2-login."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import fire

from ec2login.constants import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
)
from ec2login.core.signals import setup_signal_handlers
from ec2login.exceptions import (
    Ec2LoginError,
    KeyNotFoundError,
    ProviderAPIError,
    ProviderCredentialsError,
    SelectionError,
)
from ec2login.logging import StreamFormatter, StreamRoutingFilter
from ec2login.providers.aws.utils import get_aws_credentials_error_message
from ec2login.utils import log_and_print_error


def get_ec2login_base_class() -> type:
    """Get Ec2Login base class on-demand to avoid circular imports.

    Returns
    -------
    type
        Ec2Login base class
    """
    from ec2login.__main__ import Ec2Login

    return Ec2Login


def create_cli(**kwargs: Any) -> Any:
    """Create the object exposed through Fire.

    The returned subclass turns the exit code of ``login`` into a process
    exit so Fire does not print it.

    Parameters
    ----------
    **kwargs : Any
        Dependency overrides passed to Ec2Login

    Returns
    -------
    Any
        Ec2LoginCLI instance
    """
    Ec2Login = get_ec2login_base_class()

    class Ec2LoginCLI(Ec2Login):
        """CLI wrapper implementation for Ec2Login."""

        def login(
            self,
            region: str | None = None,
            username: str | None = None,
            ssh_dir: str | None = None,
            address: str | None = None,
            start_timeout: int | None = None,
            strict_host_keys: bool | str | None = None,
            verbose: bool = False,
        ) -> None:
            """Interactively pick an EC2 instance and open an ssh session to it.

            Parameters
            ----------
            region : str | None
                AWS region, defaults to the AWS SDK default chain
            username : str | None
                Remote login user (default: ec2-user)
            ssh_dir : str | None
                Directory searched for local keys (default: ~/.ssh)
            address : str | None
                Connect to the ``private`` (default) or ``public`` address
            start_timeout : int | None
                Seconds to wait for a started instance (default: 300)
            strict_host_keys : bool | str | None
                Keep ssh host key verification enabled
            verbose : bool
                Enable debug logging
            """
            exit_code = super().login(
                region=region,
                username=username,
                ssh_dir=ssh_dir,
                address=address,
                start_timeout=start_timeout,
                strict_host_keys=strict_host_keys,
                verbose=verbose,
            )
            sys.exit(exit_code)

    return Ec2LoginCLI(**kwargs)


def handle_credentials_error(debug_mode: bool) -> None:
    """Handle provider credentials error.

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(get_aws_credentials_error_message(), file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Handle invalid configuration values.

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_operator_error(error: Ec2LoginError, debug_mode: bool) -> None:
    """Handle an invalid selection or a missing key.

    These are outcomes of the operator's choices rather than faults, so the
    message is printed as-is on stdout.

    Raises
    ------
    Ec2LoginError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(str(error))
    sys.exit(EXIT_ERROR)


def handle_api_error(error: ProviderAPIError, debug_mode: bool) -> None:
    """Handle AWS API error with context-specific messages.

    Raises
    ------
    ProviderAPIError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    error_code = error.error_code

    if error_code in ["UnauthorizedOperation", "AccessDeniedException"]:
        print("Insufficient IAM permissions\n", file=sys.stderr)
        print(f"{error}\n", file=sys.stderr)
        print("Ask your AWS administrator to grant:", file=sys.stderr)
        print(
            "  - EC2 permissions (DescribeInstances, StartInstances)",
            file=sys.stderr,
        )
        print("  - Secrets Manager permissions (GetSecretValue)", file=sys.stderr)
    elif error_code == "ResourceNotFoundException":
        print(f"Secret not found: {error}\n", file=sys.stderr)
        print(
            "The secret must be named after the instance's key pair.",
            file=sys.stderr,
        )
    elif error_code in ["ExpiredToken", "RequestExpired", "ExpiredTokenException"]:
        print("AWS credentials have expired\n", file=sys.stderr)
        print("Fix it:", file=sys.stderr)
        print("  aws sso login           # If using AWS SSO", file=sys.stderr)
        print("  aws configure           # Re-configure credentials", file=sys.stderr)
    else:
        log_and_print_error("%s", error)

    sys.exit(EXIT_ERROR)


def handle_ec2login_error(error: Ec2LoginError, debug_mode: bool) -> None:
    """Handle any other fatal error.

    Raises
    ------
    Ec2LoginError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    log_and_print_error("%s", error)
    sys.exit(EXIT_ERROR)


def configure_logging() -> None:
    """Route INFO and below to stdout, warnings and errors to stderr."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(StreamFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(StreamFormatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=logging.INFO,
        handlers=[stdout_handler, stderr_handler],
    )


def main() -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps the methods of the Ec2Login class to CLI commands; every
    ec2-login error is turned into a message and a non-zero exit code.
    Set ``EC2LOGIN_DEBUG=1`` to get tracebacks instead.
    """
    configure_logging()
    setup_signal_handlers()

    debug_mode = os.environ.get("EC2LOGIN_DEBUG") == "1"

    try:
        fire.Fire(create_cli())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    except ProviderCredentialsError:
        handle_credentials_error(debug_mode)
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except (SelectionError, KeyNotFoundError) as e:
        handle_operator_error(e, debug_mode)
    except ProviderAPIError as e:
        handle_api_error(e, debug_mode)
    except Ec2LoginError as e:
        handle_ec2login_error(e, debug_mode)
