"""Behave environment configuration for ec2-login tests."""

import logging
import os
import tempfile
from pathlib import Path

from behave.model import Scenario
from behave.runner import Context
from moto import mock_aws

from ec2login.core.config import ENV_VARS

logger = logging.getLogger(__name__)

AWS_TEST_ENV = {
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "AWS_DEFAULT_REGION": "us-east-1",
}


def before_all(context: Context) -> None:
    """Setup executed before all tests."""
    context.saved_env = {
        name: os.environ.get(name)
        for name in (*AWS_TEST_ENV, *ENV_VARS.values(), "EC2LOGIN_DEBUG")
    }

    for name in (*ENV_VARS.values(), "EC2LOGIN_DEBUG"):
        os.environ.pop(name, None)

    os.environ.update(AWS_TEST_ENV)
    os.environ["EC2LOGIN_WAITER_DELAY"] = "1"


def before_scenario(context: Context, scenario: Scenario) -> None:
    """Start a fresh moto backend and scratch directories per scenario."""
    context.mock_aws_env = mock_aws()
    context.mock_aws_env.start()

    context.scratch = tempfile.TemporaryDirectory(prefix="ec2login-behave-")
    root = Path(context.scratch.name)
    context.ssh_dir = root / "ssh"
    context.ssh_dir.mkdir()
    context.key_dir = root / "keys"
    context.key_dir.mkdir()

    context.saved_tempdir = tempfile.tempdir
    tempfile.tempdir = str(context.key_dir)

    context.ssh_exit_code = 0
    context.launches = []
    context.output = []
    context.error = None
    context.exit_code = None
    context.instance_id = None

    logger.debug("Prepared scenario: %s", scenario.name)


def after_scenario(context: Context, scenario: Scenario) -> None:
    """Cleanup executed after each scenario."""
    tempfile.tempdir = context.saved_tempdir

    if getattr(context, "mock_aws_env", None):
        context.mock_aws_env.stop()
        context.mock_aws_env = None

    if getattr(context, "scratch", None):
        context.scratch.cleanup()
        context.scratch = None


def after_all(context: Context) -> None:
    """Restore the process environment."""
    for name, value in context.saved_env.items():
        if value is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = value
