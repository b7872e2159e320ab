"""Per-channel read cursors ("watermarks") persisted between check runs."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from slack_bridge.check.models import CurrentState, LegacyState
from slack_bridge.check.storage import read_json, write_json_atomic

logger = logging.getLogger(__name__)

# Watermark for channels never read before: fetch from the epoch
EPOCH_TS = "0"


def valid_ts(value: Any) -> bool:
    """True for a Slack ts as stored: a numeric string or a JSON number."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return False
    try:
        return Decimal(str(value)).is_finite()
    except InvalidOperation:
        return False


def parse_state(data: Any) -> CurrentState | LegacyState | None:
    """Recognize the persisted cursor shape, or None if it is neither known form."""
    if not isinstance(data, dict):
        return None

    channels = data.get("channels")
    if isinstance(channels, dict):
        cursors = {}
        for channel_id, ts in channels.items():
            if not valid_ts(ts):
                logger.warning(f"Ignoring invalid cursor for {channel_id}: {ts!r}")
                continue
            cursors[str(channel_id)] = str(ts)
        return CurrentState(channels=cursors)

    last_read_ts = data.get("last_read_ts")
    if valid_ts(last_read_ts):
        channel_id = data.get("channel_id")
        return LegacyState(
            last_read_ts=str(last_read_ts),
            channel_id=str(channel_id) if channel_id else None,
        )
    return None


class CursorStore:
    """Load and save the ``{"channels": {channel_id: ts}}`` cursor file.

    Args:
        path: Location of the cursor file.
        fallback_channel_id: Channel to attribute a legacy cursor to when the
            legacy file does not name one (first configured channel).
    """

    def __init__(self, path: Path, fallback_channel_id: str | None = None):
        self.path = path
        self.fallback_channel_id = fallback_channel_id

    def load(self) -> dict[str, str]:
        """Return the channel → watermark mapping. Never raises."""
        if not self.path.exists():
            return {}
        try:
            data = read_json(self.path)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cursor file {self.path}: {e}")
            return {}

        state = parse_state(data)
        if isinstance(state, CurrentState):
            return dict(state.channels)
        if isinstance(state, LegacyState):
            channel_id = state.channel_id or self.fallback_channel_id
            if channel_id:
                logger.info(f"Migrating legacy cursor file to multi-channel form ({channel_id})")
                return {channel_id: state.last_read_ts}
            logger.warning("Legacy cursor file names no channel and none is configured")
            return {}

        logger.warning(f"Unrecognized cursor file shape in {self.path}; starting fresh")
        return {}

    def save(self, channels: dict[str, str]) -> None:
        """Overwrite the cursor file with the multi-channel shape."""
        write_json_atomic(self.path, {"channels": dict(channels)})
