"""Utility functions for ec2-login."""

import logging
import sys
from typing import Any

logger = logging.getLogger(__name__)


def log_and_print_error(message: str, *args: Any) -> None:
    """Log error message at debug level and print it to stderr.

    Parameters
    ----------
    message : str
        Error message with optional format placeholders
    *args : Any
        Format arguments for message
    """
    logger.debug(message, *args)
    formatted_msg = message % args if args else message
    print(f"Error: {formatted_msg}", file=sys.stderr)
