"""Interactive ssh session handoff."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ec2login.constants import DEFAULT_SSH_BINARY, DEFAULT_SSH_USERNAME
from ec2login.exceptions import SessionError

logger = logging.getLogger(__name__)


def build_ssh_command(
    host: str,
    key_file: str | Path,
    username: str = DEFAULT_SSH_USERNAME,
    strict_host_key_checking: bool = False,
    ssh_binary: str = DEFAULT_SSH_BINARY,
) -> list[str]:
    """Build the ssh client argument list.

    Parameters
    ----------
    host : str
        Address of the instance
    key_file : str | Path
        Private key used as identity file
    username : str
        Remote login user
    strict_host_key_checking : bool
        Keep ssh's own host key verification when True
    ssh_binary : str
        ssh client executable

    Returns
    -------
    list[str]
        Command suitable for subprocess
    """
    cmd = [ssh_binary]

    if not strict_host_key_checking:
        cmd.extend(["-o", "StrictHostKeyChecking=no"])

    cmd.extend(["-i", str(key_file), f"{username}@{host}"])
    return cmd


class SSHSessionLauncher:
    """Hand the operator's terminal over to an ssh client process.

    Host key verification is disabled unless ``strict_host_key_checking`` is
    set, so any host answering on the address is accepted.

    Parameters
    ----------
    username : str
        Remote login user
    strict_host_key_checking : bool
        Keep ssh's host key verification
    ssh_binary : str
        ssh client executable
    run_command : Callable[..., Any] | None
        Optional replacement for subprocess.run
    """

    def __init__(
        self,
        username: str = DEFAULT_SSH_USERNAME,
        strict_host_key_checking: bool = False,
        ssh_binary: str = DEFAULT_SSH_BINARY,
        run_command: Callable[..., Any] | None = None,
    ) -> None:
        self.username = username
        self.strict_host_key_checking = strict_host_key_checking
        self.ssh_binary = ssh_binary
        self.run_command = run_command or subprocess.run

    def launch(self, host: str, key_file: str | Path) -> int:
        """Run ssh attached to the current terminal and wait for it to exit.

        Parameters
        ----------
        host : str
            Address of the instance
        key_file : str | Path
            Private key file, already restricted to the owner

        Returns
        -------
        int
            Exit status of the ssh client (always 0)

        Raises
        ------
        SessionError
            If ssh cannot be started or exits with a non-zero status
        """
        cmd = build_ssh_command(
            host,
            key_file,
            username=self.username,
            strict_host_key_checking=self.strict_host_key_checking,
            ssh_binary=self.ssh_binary,
        )

        if not self.strict_host_key_checking:
            logger.warning(
                "Host key verification is disabled for %s; "
                "the remote host identity is not checked.",
                host,
            )

        logger.debug("Executing: %s", " ".join(cmd))

        try:
            result = self.run_command(cmd, check=False)
        except OSError as e:
            raise SessionError(f"SSH command failed: {e}") from e

        if result.returncode != 0:
            raise SessionError(
                f"SSH command failed with exit code {result.returncode}"
            )

        return result.returncode
