"""Global constants for ec2-login.

Defaults here can be overridden through environment variables or CLI flags,
see ``ec2login.core.config``.
"""

from enum import Enum

NO_NAME = "No Name"
"""Display name used when an instance carries no Name tag."""

NAME_TAG_KEY = "Name"

START_TIMEOUT_SECONDS = 300
"""Maximum time to wait for a started instance to report running.

Five minutes covers a normal EC2 cold start including EBS attach.
"""

WAITER_DELAY_SECONDS = 15
"""Delay between waiter polling attempts in seconds."""

DEFAULT_SSH_USERNAME = "ec2-user"
"""Remote user for Amazon Linux AMIs."""

DEFAULT_SSH_DIR = "~/.ssh"

DEFAULT_KEY_SUFFIX = ".pem"

DEFAULT_SSH_BINARY = "ssh"

SECRET_KEY_FILE_PREFIX = "ec2-key-"

EXIT_SUCCESS = 0
"""Exit code for a normal session completion."""

EXIT_ERROR = 1
"""Exit code for any fatal error, an invalid selection or a missing key."""

EXIT_CONFIG_ERROR = 2
"""Exit code for invalid configuration values."""

EXIT_INTERRUPTED = 130
"""Exit code when the operator presses Ctrl-C."""


class InstanceState(str, Enum):
    """EC2 instance state names."""

    PENDING = "pending"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"


class AddressKind(str, Enum):
    """Which instance address the session connects to."""

    PRIVATE = "private"
    PUBLIC = "public"
