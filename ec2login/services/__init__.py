"""Local services: key resolution and ssh handoff."""

from ec2login.services.keys import SecretKeyFile, fetch_secret_key, find_local_key
from ec2login.services.ssh import SSHSessionLauncher, build_ssh_command

__all__ = [
    "SecretKeyFile",
    "fetch_secret_key",
    "find_local_key",
    "SSHSessionLauncher",
    "build_ssh_command",
]
