"""Tests for configuration loading."""

import pytest
from omegaconf.errors import ReadonlyConfigError

from ec2login.core.config import ConfigLoader, parse_bool


@pytest.fixture
def loader() -> ConfigLoader:
    return ConfigLoader()


def test_defaults(loader) -> None:
    config = loader.load_config(environ={})

    assert config.region is None
    assert config.ssh_username == "ec2-user"
    assert config.ssh_dir == "~/.ssh"
    assert config.key_suffix == ".pem"
    assert config.address == "private"
    assert config.start_timeout == 300
    assert config.waiter_delay == 15
    assert config.strict_host_key_checking is False
    assert config.ssh_binary == "ssh"


def test_environment_overrides_defaults(loader) -> None:
    config = loader.load_config(
        environ={
            "EC2LOGIN_REGION": "eu-west-1",
            "EC2LOGIN_SSH_USERNAME": "ubuntu",
            "EC2LOGIN_START_TIMEOUT": "120",
            "EC2LOGIN_STRICT_HOST_KEYS": "true",
            "EC2LOGIN_ADDRESS": "public",
        }
    )

    assert config.region == "eu-west-1"
    assert config.ssh_username == "ubuntu"
    assert config.start_timeout == 120
    assert config.strict_host_key_checking is True
    assert config.address == "public"


def test_cli_overrides_environment(loader) -> None:
    config = loader.load_config(
        cli_overrides={"region": "us-west-2", "ssh_username": None},
        environ={"EC2LOGIN_REGION": "eu-west-1", "EC2LOGIN_SSH_USERNAME": "admin"},
    )

    assert config.region == "us-west-2"
    assert config.ssh_username == "admin"


def test_config_is_read_only(loader) -> None:
    config = loader.load_config(environ={})

    with pytest.raises(ReadonlyConfigError):
        config.region = "us-east-2"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"address": "ipv6"}, "address must be one of"),
        ({"start_timeout": 0}, "start_timeout must be a positive integer"),
        ({"start_timeout": "soon"}, "start_timeout must be a positive integer"),
        ({"ssh_username": ""}, "ssh_username must not be empty"),
        ({"unknown": 1}, "Unknown configuration keys"),
    ],
)
def test_invalid_values_raise_value_error(loader, overrides, message) -> None:
    with pytest.raises(ValueError, match=message):
        loader.load_config(cli_overrides=overrides, environ={})


def test_non_integer_environment_value(loader) -> None:
    with pytest.raises(ValueError, match="EC2LOGIN_START_TIMEOUT must be an integer"):
        loader.load_config(environ={"EC2LOGIN_START_TIMEOUT": "5m"})


@pytest.mark.parametrize(
    "value, expected",
    [("1", True), ("yes", True), ("ON", True), ("0", False), ("no", False), (True, True)],
)
def test_parse_bool(value, expected) -> None:
    assert parse_bool(value) is expected


def test_parse_bool_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_bool("maybe")
