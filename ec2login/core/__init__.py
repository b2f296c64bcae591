"""Core ec2-login functionality."""

from __future__ import annotations

from ec2login.core.config import ConfigLoader
from ec2login.core.signals import setup_signal_handlers

__all__ = [
    "ConfigLoader",
    "setup_signal_handlers",
]
