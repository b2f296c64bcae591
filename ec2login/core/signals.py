"""Signal handling so that cleanup runs on termination."""

from __future__ import annotations

import logging
import signal
import types

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


def _raise_system_exit(signum: int, frame: types.FrameType | None) -> None:
    """Turn a termination signal into SystemExit.

    Raising unwinds the stack, so context managers holding the transient key
    file get to delete it.
    """
    logger.debug("Received signal %s, exiting", signum)
    raise SystemExit(128 + signum)


def setup_signal_handlers() -> None:
    """Register SIGTERM and SIGHUP handlers.

    SIGINT already raises KeyboardInterrupt and needs no handler.
    """
    for signum in HANDLED_SIGNALS:
        signal.signal(signum, _raise_system_exit)
