"""CLI prompts and entry point."""

from __future__ import annotations

from ec2login.cli.prompts import (
    Prompter,
    format_menu_entry,
    parse_selection,
    parse_yes_no,
)

__all__ = [
    "Prompter",
    "format_menu_entry",
    "parse_selection",
    "parse_yes_no",
]
