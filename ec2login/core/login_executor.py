from __future__ import annotations

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Any

from omegaconf import DictConfig

from ec2login.cli.prompts import (
    INCLUDE_STOPPED_PROMPT,
    SEARCH_BY_ID_PROMPT,
    SEARCH_TERM_PROMPT,
    USE_SECRETS_PROMPT,
    Prompter,
)
from ec2login.constants import EXIT_SUCCESS
from ec2login.exceptions import KeyNotFoundError, SessionError
from ec2login.models import InstanceDescriptor, SearchCriteria
from ec2login.services.keys import (
    check_key_permissions,
    fetch_secret_key,
    find_local_key,
)

logger = logging.getLogger(__name__)


class LoginExecutor:
    """Orchestrates the login flow.

    Asks for search criteria, lists matching instances, lets the operator
    pick one, starts it if needed, resolves its SSH key and hands the
    terminal to ssh.

    Parameters
    ----------
    config : DictConfig
        Read-only merged configuration
    compute_provider_factory : Any
        Factory ``(region) -> EC2Manager``-like object
    secret_store_factory : Any
        Factory ``(region) -> SecretStore``-like object
    session_launcher_factory : Any
        Factory ``(config) -> SSHSessionLauncher``-like object
    prompter : Prompter | None
        Operator I/O, defaults to stdin/stdout
    """

    def __init__(
        self,
        config: DictConfig,
        compute_provider_factory: Any,
        secret_store_factory: Any,
        session_launcher_factory: Any,
        prompter: Prompter | None = None,
    ) -> None:
        self.config = config
        self.compute_provider_factory = compute_provider_factory
        self.secret_store_factory = secret_store_factory
        self.session_launcher_factory = session_launcher_factory
        self.prompter = prompter or Prompter()

    def read_criteria(self) -> SearchCriteria:
        include_stopped = self.prompter.confirm(INCLUDE_STOPPED_PROMPT)
        search_by_id = self.prompter.confirm(SEARCH_BY_ID_PROMPT)
        term = self.prompter.ask(SEARCH_TERM_PROMPT)

        return SearchCriteria(
            search_by_id=search_by_id,
            term=term,
            include_stopped=include_stopped,
        )

    def execute(self) -> int:
        """Run the interactive login flow.

        Returns
        -------
        int
            Process exit code, 0 after a normal session or when nothing
            matched

        Raises
        ------
        Ec2LoginError
            Any fatal error from the query, start, key or session steps,
            ``SelectionError`` for an invalid menu choice and
            ``KeyNotFoundError`` when no key is available
        """
        criteria = self.read_criteria()

        compute_provider = self.compute_provider_factory(self.config.region)
        instances = compute_provider.list_instances(criteria)

        if not instances:
            self.prompter.output_func("No matching instances found.")
            return EXIT_SUCCESS

        selected = self.prompter.choose_instance(instances)

        instance = compute_provider.ensure_running(
            selected, timeout=self.config.start_timeout
        )

        use_secrets = self.prompter.confirm(USE_SECRETS_PROMPT)

        with ExitStack() as stack:
            key_path = self.resolve_key(instance, use_secrets, stack)
            return self.launch_session(instance, key_path)

    def resolve_key(
        self, instance: InstanceDescriptor, use_secrets: bool, stack: ExitStack
    ) -> Path:
        """Resolve the private key file for the instance.

        A key fetched from Secrets Manager is written to a transient file
        whose removal is registered on ``stack`` before the file exists.

        Raises
        ------
        KeyNotFoundError
            If the instance has no key pair or no local file matches
        """
        key_name = instance.key_name
        if not key_name:
            raise KeyNotFoundError(
                f"Instance {instance.instance_id} was launched without a key pair"
            )

        if use_secrets:
            logger.info("Fetching key %s from Secrets Manager", key_name)
            secret_store = self.secret_store_factory(self.config.region)
            key_file = fetch_secret_key(
                secret_store, key_name, suffix=self.config.key_suffix, stack=stack
            )
            return key_file.path

        key_path = find_local_key(
            key_name, self.config.ssh_dir, suffix=self.config.key_suffix
        )
        if key_path is None:
            raise KeyNotFoundError(
                f"No matching SSH key found locally for KeyName {key_name}"
            )

        check_key_permissions(key_path)
        logger.info("Using local key %s", key_path)
        return key_path

    def launch_session(self, instance: InstanceDescriptor, key_path: Path) -> int:
        """Open the ssh session to the instance.

        Raises
        ------
        SessionError
            If the instance has no usable address or ssh fails
        """
        address = instance.address(self.config.address)
        if not address:
            raise SessionError(
                f"Instance {instance.instance_id} has no {self.config.address} "
                "IP address"
            )

        launcher = self.session_launcher_factory(self.config)
        return launcher.launch(address, key_path)
