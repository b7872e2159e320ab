"""Incremental per-channel message retrieval and normalization."""

from __future__ import annotations

import logging

from slack_bridge.check.downloader import AttachmentDownloader
from slack_bridge.check.models import ChannelMessages, FileAttachment, FormattedMessage, ts_to_iso
from slack_bridge.exceptions import SlackError
from slack_bridge.formatting import is_bot_message

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
NO_TEXT = "(no text)"


def bot_label(msg: dict) -> str:
    """Name a bot message carries itself, if any (``username`` or ``bot_profile.name``)."""
    return msg.get("username") or (msg.get("bot_profile") or {}).get("name") or ""


class ChannelFetcher:
    """Fetch messages newer than a watermark and turn them into FormattedMessages.

    Args:
        gateway: Provides ``history_page`` and ``user_name`` coroutines.
        downloader: Saves attachments; failures yield no path.
        self_bot_name: Messages whose bot label contains this string are the
            tool's own posts and are dropped.
    """

    def __init__(self, gateway, downloader: AttachmentDownloader, self_bot_name: str = ""):
        self.gateway = gateway
        self.downloader = downloader
        self.self_bot_name = self_bot_name

    async def fetch_since(
        self,
        channel_id: str,
        channel_name: str,
        watermark: str,
    ) -> ChannelMessages:
        """Return messages strictly newer than ``watermark``, oldest first.

        ``latest_ts`` is the newest ts of the raw page, so filtered-out
        messages still advance the cursor.
        """
        page = await self.gateway.history_page(channel_id, oldest=watermark, limit=PAGE_SIZE)
        raw_messages = page.get("messages") or []
        if not raw_messages:
            return ChannelMessages(channel_name, channel_id, [], None)

        if page.get("has_more"):
            logger.warning(
                f"#{channel_name}: more than {PAGE_SIZE} new messages since {watermark}; "
                "only the newest page is reported"
            )

        latest_ts = next((m["ts"] for m in raw_messages if m.get("ts")), None)

        user_cache: dict[str, str] = {}
        messages: list[FormattedMessage] = []
        for msg in reversed(raw_messages):
            formatted = await self._format(msg, user_cache)
            if formatted is not None:
                messages.append(formatted)

        return ChannelMessages(channel_name, channel_id, messages, latest_ts)

    def _is_own_message(self, msg: dict) -> bool:
        return bool(self.self_bot_name) and self.self_bot_name in bot_label(msg)

    async def _format(self, msg: dict, user_cache: dict[str, str]) -> FormattedMessage | None:
        ts = msg.get("ts")
        if not ts:
            return None
        raw_files = msg.get("files") or []
        if not msg.get("text") and not raw_files:
            return None
        if self._is_own_message(msg):
            return None

        user_id = msg.get("user") or None
        if is_bot_message(msg):
            username = bot_label(msg) or f"Bot ({msg.get('bot_id', '')})"
        elif user_id:
            username = await self._resolve_user(user_id, user_cache)
        else:
            username = "Unknown"

        images: list[str] = []
        files: list[str] = []
        for raw_file in raw_files:
            attachment = FileAttachment.from_dict(raw_file)
            if attachment.is_image:
                path = await self.downloader.download(attachment, ts, "image")
                if path:
                    images.append(path)
            elif attachment.mimetype:
                path = await self.downloader.download(attachment, ts, "file")
                if path:
                    files.append(path)

        return FormattedMessage(
            timestamp=ts_to_iso(ts),
            user=username,
            user_id=user_id,
            text=msg.get("text") or NO_TEXT,
            ts=ts,
            thread_ts=msg.get("thread_ts"),
            images=images,
            files=files,
        )

    async def _resolve_user(self, user_id: str, user_cache: dict[str, str]) -> str:
        if user_id in user_cache:
            return user_cache[user_id]
        try:
            name = await self.gateway.user_name(user_id)
        except SlackError as e:
            logger.warning(f"Could not resolve user {user_id}: {e}")
            name = user_id
        user_cache[user_id] = name
        return name
