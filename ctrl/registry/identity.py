"""Slack user to GitHub username resolution."""

import re
from typing import Optional

from ..exceptions import InvalidCommandError
from .models import Manifest

# <@U123ABC> or <@U123ABC|display-name>
_MENTION_RE = re.compile(r"^<@([UW][A-Z0-9]+)(?:\|[^>]*)?>$")
_USER_ID_RE = re.compile(r"^[UW][A-Z0-9]+$")


def parse_mention(token: str) -> str:
    """Extract a Slack user id from a mention token or a bare id."""
    token = token.strip()
    match = _MENTION_RE.match(token)
    if match:
        return match.group(1)
    if _USER_ID_RE.match(token):
        return token
    raise InvalidCommandError(f"Not a user mention: {token!r}", reason="mention")


class IdentityLinker:
    """Resolves Slack user ids and GitHub usernames against one manifest.

    Ownership is stored by GitHub username while commands address people by
    Slack user id, so every owner mutation goes through here first.
    """

    def __init__(self, manifest: Manifest) -> None:
        self.manifest = manifest

    def username_for(self, chat_id: str) -> Optional[str]:
        profile = self.manifest.get_profile(chat_id)
        return profile.external_username if profile else None

    def chat_id_for(self, username: str) -> Optional[str]:
        """First Slack user linked to ``username``, if any."""
        found = self.manifest.find_profile_by_username(username)
        return found[0] if found else None
