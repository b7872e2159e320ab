"""Slack message formatting and author resolution for the posting/reading commands."""

from __future__ import annotations

import logging
import re

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
_UNDERLINE_RE = re.compile(r"__([^_]+)__")
_SHELL_ESCAPE_RE = re.compile(r"\\([!?])")


def format_for_slack(text: str) -> str:
    """Convert markdown to Slack mrkdwn and strip shell escape artifacts.

    - ``## heading``   → ``heading`` (Slack has no headings)
    - ``[text](url)``  → ``text`` and ``url`` on the next line
    - ``**bold**``     → ``*bold*``
    - ``__text__``     → ``_text_`` (no underline in Slack; italic instead)
    - ``\\!`` ``\\?``  → ``!`` ``?`` (zsh escapes these even in single quotes)
    """
    result = _HEADING_RE.sub("", text)
    result = _LINK_RE.sub(r"\1\n\2", result)
    result = _BOLD_RE.sub(r"*\1*", result)
    result = _UNDERLINE_RE.sub(r"_\1_", result)
    result = _SHELL_ESCAPE_RE.sub(r"\1", result)
    return result


def is_bot_message(msg: dict) -> bool:
    """Posted by an app or integration rather than a workspace user."""
    return bool(msg.get("bot_id")) or msg.get("subtype") == "bot_message"


class UserDirectory:
    """Cached user ID → display name lookups on a blocking WebClient."""

    def __init__(self, client: WebClient):
        self.client = client
        self._cache: dict[str, str] = {}

    def name(self, user_id: str) -> str:
        if user_id in self._cache:
            return self._cache[user_id]
        try:
            response = self.client.users_info(user=user_id)
        except SlackApiError as e:
            logger.debug(f"Failed to resolve user {user_id}: {e.response.get('error')}")
            return user_id
        user = response.get("user") or {}
        name = user.get("real_name") or user.get("name") or user_id
        self._cache[user_id] = name
        return name

    def author(self, msg: dict) -> str:
        """Display name for a message: bot username, resolved user, or ``Unknown``."""
        if is_bot_message(msg):
            return msg.get("username") or "Bot"
        if msg.get("user"):
            return self.name(msg["user"])
        return "Unknown"
