"""Tests for stream routing of log records."""

import logging
import signal

import pytest

from ec2login.core.signals import HANDLED_SIGNALS, setup_signal_handlers
from ec2login.logging import StreamFormatter, StreamRoutingFilter


def make_record(level: int, msg: str = "message") -> logging.LogRecord:
    return logging.LogRecord("ec2login", level, __file__, 1, msg, None, None)


@pytest.mark.parametrize(
    "level, expected",
    [
        (logging.DEBUG, "message"),
        (logging.INFO, "message"),
        (logging.WARNING, "Warning: message"),
        (logging.ERROR, "Error: message"),
        (logging.CRITICAL, "Error: message"),
    ],
)
def test_formatter_prefixes_by_level(level, expected) -> None:
    assert StreamFormatter("%(message)s").format(make_record(level)) == expected


def test_info_routes_to_stdout_only() -> None:
    record = make_record(logging.INFO)

    assert StreamRoutingFilter("stdout").filter(record)
    assert not StreamRoutingFilter("stderr").filter(record)


def test_warning_routes_to_stderr_only() -> None:
    record = make_record(logging.WARNING)

    assert StreamRoutingFilter("stderr").filter(record)
    assert not StreamRoutingFilter("stdout").filter(record)


def test_unknown_stream_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown stream"):
        StreamRoutingFilter("file")


def test_termination_signals_raise_system_exit() -> None:
    previous = {signum: signal.getsignal(signum) for signum in HANDLED_SIGNALS}
    try:
        setup_signal_handlers()
        handler = signal.getsignal(signal.SIGTERM)

        with pytest.raises(SystemExit) as exc_info:
            handler(signal.SIGTERM, None)

        assert exc_info.value.code == 128 + signal.SIGTERM
        assert signal.getsignal(signal.SIGHUP) is handler
    finally:
        for signum, old in previous.items():
            signal.signal(signum, old)
