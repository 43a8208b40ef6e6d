"""Slack Bolt handler exports for the slash command and block actions."""

from .callback import handle_link_button
from .command import ctrl_command

__all__ = [
    "ctrl_command",
    "handle_link_button",
]
