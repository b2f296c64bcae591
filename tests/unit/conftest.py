"""Pytest configuration and fixtures for ec2-login tests."""

import os
import sys
from collections.abc import Callable, Generator, Iterable
from pathlib import Path
from typing import Any

import pytest
from omegaconf import DictConfig

from ec2login.cli.prompts import Prompter
from ec2login.core.config import ConfigLoader

tests_root = Path(__file__).parent.parent
if str(tests_root) not in sys.path:
    sys.path.insert(0, str(tests_root))


@pytest.fixture
def aws_credentials() -> Generator[None, None, None]:
    """Fixture to set AWS credentials for testing with proper cleanup.

    Sets mock AWS credentials in environment variables for the duration of the test,
    then restores the original environment state.

    Yields
    ------
    None
        Control back to test after setting credentials
    """
    names = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION")
    saved = {name: os.environ.get(name) for name in names}

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

    yield

    for name, value in saved.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)


@pytest.fixture
def ssh_dir(tmp_path: Path) -> Path:
    """Create an empty stand-in for ~/.ssh."""
    directory = tmp_path / "ssh"
    directory.mkdir()
    return directory


@pytest.fixture
def make_config(ssh_dir: Path) -> Callable[..., DictConfig]:
    """Build a frozen config isolated from the real environment.

    Returns
    -------
    Callable[..., DictConfig]
        Factory accepting config overrides as keyword arguments
    """

    def _make(**overrides: Any) -> DictConfig:
        values = {"region": "us-east-1", "ssh_dir": str(ssh_dir)}
        values.update(overrides)
        return ConfigLoader().load_config(cli_overrides=values, environ={})

    return _make


class ScriptedInput:
    """Input function replaying canned answers and recording prompts."""

    def __init__(self, answers: Iterable[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def scripted_prompter() -> Callable[..., tuple[Prompter, ScriptedInput, list[str]]]:
    """Build a Prompter fed from a list of answers.

    Returns
    -------
    Callable
        Factory returning (prompter, scripted input, captured output lines)
    """

    def _make(*answers: str) -> tuple[Prompter, ScriptedInput, list[str]]:
        scripted = ScriptedInput(answers)
        output: list[str] = []
        return Prompter(input_func=scripted, output_func=output.append), scripted, output

    return _make
