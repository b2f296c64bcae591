"""Runtime configuration for ec2-login.

Settings come from built-in defaults, overridden by ``EC2LOGIN_*`` environment
variables, overridden by CLI flags. The merged result is read-only and is
handed to every component that needs it.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from omegaconf import DictConfig, OmegaConf

from ec2login.constants import (
    DEFAULT_KEY_SUFFIX,
    DEFAULT_SSH_BINARY,
    DEFAULT_SSH_DIR,
    DEFAULT_SSH_USERNAME,
    START_TIMEOUT_SECONDS,
    WAITER_DELAY_SECONDS,
    AddressKind,
)

logger = logging.getLogger(__name__)

ENV_VARS = {
    "region": "EC2LOGIN_REGION",
    "ssh_username": "EC2LOGIN_SSH_USERNAME",
    "ssh_dir": "EC2LOGIN_SSH_DIR",
    "key_suffix": "EC2LOGIN_KEY_SUFFIX",
    "address": "EC2LOGIN_ADDRESS",
    "start_timeout": "EC2LOGIN_START_TIMEOUT",
    "waiter_delay": "EC2LOGIN_WAITER_DELAY",
    "strict_host_key_checking": "EC2LOGIN_STRICT_HOST_KEYS",
    "ssh_binary": "EC2LOGIN_SSH_BINARY",
}

INT_KEYS = ("start_timeout", "waiter_delay")
BOOL_KEYS = ("strict_host_key_checking",)


def parse_bool(value: str | bool) -> bool:
    """Parse a boolean flag from the environment or the command line.

    Raises
    ------
    ValueError
        If the string is not a recognised boolean
    """
    if isinstance(value, bool):
        return value

    lowered = str(value).strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Invalid boolean value: '{value}'")


class ConfigLoader:
    """Load and merge configuration with defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS: dict[str, Any] = {
            "region": None,
            "ssh_username": DEFAULT_SSH_USERNAME,
            "ssh_dir": DEFAULT_SSH_DIR,
            "key_suffix": DEFAULT_KEY_SUFFIX,
            "address": AddressKind.PRIVATE.value,
            "start_timeout": START_TIMEOUT_SECONDS,
            "waiter_delay": WAITER_DELAY_SECONDS,
            "strict_host_key_checking": False,
            "ssh_binary": DEFAULT_SSH_BINARY,
        }

    def load_env_overrides(self, environ: dict[str, str] | None = None) -> dict[str, Any]:
        """Collect overrides from ``EC2LOGIN_*`` environment variables.

        Parameters
        ----------
        environ : dict[str, str] | None
            Environment mapping, defaults to os.environ

        Returns
        -------
        dict[str, Any]
            Overrides keyed by config name, with typed values

        Raises
        ------
        ValueError
            If a numeric or boolean variable cannot be parsed
        """
        if environ is None:
            environ = dict(os.environ)

        overrides: dict[str, Any] = {}

        for key, var_name in ENV_VARS.items():
            raw = environ.get(var_name)
            if raw is None or raw == "":
                continue

            if key in INT_KEYS:
                try:
                    overrides[key] = int(raw)
                except ValueError:
                    raise ValueError(
                        f"{var_name} must be an integer, got: '{raw}'"
                    ) from None
            elif key in BOOL_KEYS:
                overrides[key] = parse_bool(raw)
            else:
                overrides[key] = raw

        return overrides

    def load_config(
        self,
        cli_overrides: dict[str, Any] | None = None,
        environ: dict[str, str] | None = None,
    ) -> DictConfig:
        """Merge defaults, environment and CLI values into a frozen config.

        Parameters
        ----------
        cli_overrides : dict[str, Any] | None
            Values from command line flags; None entries are ignored
        environ : dict[str, str] | None
            Environment mapping, defaults to os.environ

        Returns
        -------
        DictConfig
            Read-only merged configuration

        Raises
        ------
        ValueError
            If any value fails validation
        """
        cli = {
            key: value
            for key, value in (cli_overrides or {}).items()
            if value is not None
        }

        unknown = sorted(set(cli) - set(self.BUILT_IN_DEFAULTS))
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        merged = OmegaConf.merge(
            OmegaConf.create(self.BUILT_IN_DEFAULTS),
            OmegaConf.create(self.load_env_overrides(environ)),
            OmegaConf.create(cli),
        )

        self.validate_config(merged)
        OmegaConf.set_readonly(merged, True)

        logger.debug("Loaded configuration: %s", OmegaConf.to_container(merged))
        return merged

    def validate_config(self, config: DictConfig) -> None:
        """Validate merged configuration values.

        Raises
        ------
        ValueError
            If a value is out of range or of the wrong kind
        """
        valid_addresses = [kind.value for kind in AddressKind]
        if config.address not in valid_addresses:
            raise ValueError(
                f"address must be one of {', '.join(valid_addresses)}, "
                f"got: '{config.address}'"
            )

        for key in INT_KEYS:
            value = config[key]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{key} must be a positive integer, got: {value!r}")

        if not config.ssh_username:
            raise ValueError("ssh_username must not be empty")

        if not config.key_suffix:
            raise ValueError("key_suffix must not be empty")

        if not isinstance(config.strict_host_key_checking, bool):
            raise ValueError(
                "strict_host_key_checking must be a boolean, "
                f"got: {config.strict_host_key_checking!r}"
            )
