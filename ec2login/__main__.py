#!/usr/bin/env python3
"""ec2-login - find an EC2 instance, start it if needed and ssh into it."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable

import boto3

for _boto_module in ["botocore", "boto3", "urllib3"]:
    logging.getLogger(_boto_module).setLevel(logging.WARNING)

from ec2login.cli.prompts import Prompter  # noqa: E402
from ec2login.constants import WAITER_DELAY_SECONDS  # noqa: E402
from ec2login.core.config import ConfigLoader, parse_bool  # noqa: E402
from ec2login.core.login_executor import LoginExecutor  # noqa: E402
from ec2login.providers.aws.compute import EC2Manager  # noqa: E402
from ec2login.providers.aws.secrets import SecretStore  # noqa: E402
from ec2login.services.ssh import SSHSessionLauncher  # noqa: E402
from ec2login.cli.main import main  # noqa: E402


class Ec2Login:
    """Main CLI interface for ec2-login.

    Fire turns every public member into a command, so ``login`` is the only
    public one.
    """

    def __init__(
        self,
        compute_provider_factory: Callable[[str | None], Any] | None = None,
        secret_store_factory: Callable[[str | None], Any] | None = None,
        session_launcher_factory: Callable[[Any], Any] | None = None,
        boto3_client_factory: Callable | None = None,
        prompter: Prompter | None = None,
    ) -> None:
        """Initialize ec2-login with optional dependency injection."""
        self._config_loader = ConfigLoader()
        self._boto3_client_factory = boto3_client_factory or boto3.client
        self._compute_provider_factory = compute_provider_factory
        self._secret_store_factory = secret_store_factory or self._create_secret_store
        self._session_launcher_factory = (
            session_launcher_factory or self._create_session_launcher
        )
        self._prompter = prompter

    def _compute_provider_factory_for(
        self, config: Any
    ) -> Callable[[str | None], Any]:
        """Return the injected compute factory or one bound to ``config``."""
        if self._compute_provider_factory is not None:
            return self._compute_provider_factory
        return partial(self._create_compute_provider, waiter_delay=config.waiter_delay)

    def _create_compute_provider(
        self, region: str | None, waiter_delay: int = WAITER_DELAY_SECONDS
    ) -> EC2Manager:
        return EC2Manager(
            region=region,
            boto3_client_factory=self._boto3_client_factory,
            waiter_delay=waiter_delay,
        )

    def _create_secret_store(self, region: str | None) -> SecretStore:
        return SecretStore(
            region=region, boto3_client_factory=self._boto3_client_factory
        )

    @staticmethod
    def _create_session_launcher(config: Any) -> SSHSessionLauncher:
        return SSHSessionLauncher(
            username=config.ssh_username,
            strict_host_key_checking=config.strict_host_key_checking,
            ssh_binary=config.ssh_binary,
        )

    def login(
        self,
        region: str | None = None,
        username: str | None = None,
        ssh_dir: str | None = None,
        address: str | None = None,
        start_timeout: int | None = None,
        strict_host_keys: bool | str | None = None,
        verbose: bool = False,
    ) -> int:
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

        Returns
        -------
        int
            Exit code
        """
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)
            logging.debug("Verbose mode enabled")

        config = self._config_loader.load_config(
            cli_overrides={
                "region": region,
                "ssh_username": username,
                "ssh_dir": ssh_dir,
                "address": address,
                "start_timeout": start_timeout,
                "strict_host_key_checking": (
                    None if strict_host_keys is None else parse_bool(strict_host_keys)
                ),
            }
        )
        executor = LoginExecutor(
            config=config,
            compute_provider_factory=self._compute_provider_factory_for(config),
            secret_store_factory=self._secret_store_factory,
            session_launcher_factory=self._session_launcher_factory,
            prompter=self._prompter,
        )
        return executor.execute()


if __name__ == "__main__":
    main()
