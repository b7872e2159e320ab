"""Data models for the check (incremental polling) pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Literal

AttachmentKind = Literal["image", "file"]


def ts_to_iso(ts: str) -> str:
    """Convert a Slack ``ts`` ("1700000000.123456") to ISO 8601 UTC, millisecond precision."""
    dt = datetime.fromtimestamp(float(ts), tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class CurrentState:
    """Persisted cursor file, multi-channel shape: ``{"channels": {id: ts}}``."""

    channels: dict[str, str]


@dataclass
class LegacyState:
    """Persisted cursor file, single-channel shape (read only)."""

    last_read_ts: str
    channel_id: str | None = None


@dataclass
class FileAttachment:
    """A file shared on a Slack message."""

    id: str
    name: str = ""
    mimetype: str | None = None
    url_private: str | None = None
    url_private_download: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> FileAttachment:
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            mimetype=data.get("mimetype") or None,
            url_private=data.get("url_private") or None,
            url_private_download=data.get("url_private_download") or None,
        )

    @property
    def download_url(self) -> str | None:
        return self.url_private_download or self.url_private

    @property
    def is_image(self) -> bool:
        return bool(self.mimetype and self.mimetype.startswith("image/"))


@dataclass
class FormattedMessage:
    """A fetched message normalized for classification and display."""

    timestamp: str  # ISO 8601
    user: str  # resolved display name
    text: str
    ts: str
    user_id: str | None = None  # Slack user ID, used for team classification
    thread_ts: str | None = None
    images: list[str] = field(default_factory=list)  # local paths
    files: list[str] = field(default_factory=list)  # local paths

    @property
    def is_thread_reply(self) -> bool:
        return bool(self.thread_ts) and self.thread_ts != self.ts


@dataclass
class ChannelMessages:
    """Result of one incremental fetch."""

    channel_name: str
    channel_id: str
    messages: list[FormattedMessage]
    latest_ts: str | None  # newest ts the platform returned, before any filtering


@dataclass
class ChannelResult:
    """Per-channel outcome of a check run (only for channels with messages)."""

    channel_name: str
    channel_id: str
    team_messages: list[FormattedMessage]
    automated_message_count: int
    latest_ts: str | None


@dataclass
class CheckTotals:
    team: int = 0
    automated: int = 0

    @property
    def empty(self) -> bool:
        return self.team == 0 and self.automated == 0


@dataclass
class InboxEntry:
    """A team message carried over until a later check confirms it was seen."""

    channel: str
    user: str
    text: str
    ts: str
    timestamp: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> InboxEntry:
        return cls(
            channel=str(data["channel"]),
            user=str(data["user"]),
            text=str(data["text"]),
            ts=str(data["ts"]),
            timestamp=str(data["timestamp"]),
        )


@dataclass
class CheckReport:
    """Everything a check run produced, returned to the caller."""

    previous_inbox: list[InboxEntry]
    results: list[ChannelResult]
    totals: CheckTotals
    inbox: list[InboxEntry]
    cursors: dict[str, str]
    lines: list[str]
    failed_channels: list[str] = field(default_factory=list)
