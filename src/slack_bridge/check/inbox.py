"""Unread team-message inbox carried over between check runs.

The inbox is read-once, replace-always: whatever a run loads is printed again,
then the file is replaced either with nothing (a quiet run confirms the
previous batch was seen) or with exactly this run's team messages.
"""

from __future__ import annotations

import logging
from pathlib import Path

from slack_bridge.check.models import ChannelResult, CheckTotals, InboxEntry
from slack_bridge.check.storage import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class InboxStore:
    """JSON-array inbox file of team messages not yet confirmed seen."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> list[InboxEntry]:
        """Return stored entries; missing or corrupt files yield an empty list."""
        if not self.path.exists():
            return []
        try:
            data = read_json(self.path)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable inbox file {self.path}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring inbox file {self.path}: expected a JSON array")
            return []

        entries = []
        for item in data:
            try:
                entries.append(InboxEntry.from_dict(item))
            except (KeyError, TypeError) as e:
                logger.warning(f"Dropping malformed inbox entry: {e}")
        return entries

    def save(self, entries: list[InboxEntry]) -> None:
        """Replace the inbox file. Write failures are logged, not raised."""
        try:
            write_json_atomic(self.path, [e.to_dict() for e in entries])
        except OSError as e:
            logger.error(f"Failed to write inbox file {self.path}: {e}")


def next_inbox(results: list[ChannelResult], totals: CheckTotals) -> list[InboxEntry]:
    """Inbox contents after a run: empty on a quiet run, else this run's team messages."""
    if totals.empty:
        return []
    return [
        InboxEntry(
            channel=result.channel_name,
            user=msg.user,
            text=msg.text,
            ts=msg.ts,
            timestamp=msg.timestamp,
        )
        for result in results
        for msg in result.team_messages
    ]
