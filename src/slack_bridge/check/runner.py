"""The ``check`` operation: poll every configured channel once and print a digest."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from typing import Callable

from slack_bridge.check.classifier import aggregate
from slack_bridge.check.cursor import EPOCH_TS, CursorStore
from slack_bridge.check.digest import render_digest
from slack_bridge.check.downloader import AttachmentDownloader
from slack_bridge.check.fetcher import ChannelFetcher
from slack_bridge.check.gateway import SlackGateway
from slack_bridge.check.inbox import InboxStore, next_inbox
from slack_bridge.check.models import ChannelMessages, CheckReport
from slack_bridge.config import BridgeConfig

logger = logging.getLogger(__name__)


def _advances(candidate: str, current: str | None) -> bool:
    """True if ``candidate`` is strictly newer than ``current`` (Slack ts order)."""
    if not current:
        return True
    try:
        return Decimal(candidate) > Decimal(current)
    except InvalidOperation:
        return candidate != current


def _legacy_channel_id(config: BridgeConfig) -> str | None:
    if config.channels:
        return config.channels[0].id
    return config.channel_id or None


async def run_check(
    config: BridgeConfig,
    gateway=None,
    out: Callable[[str], None] = print,
) -> CheckReport:
    """Fetch new messages from every channel, emit the digest, persist inbox and cursors.

    Channels are processed one after another; a failing channel is logged and
    keeps its previous cursor while the others proceed.

    Args:
        config: Validated bridge configuration.
        gateway: Slack access object; a SlackGateway on ``config.bot_token``
            is created (and closed) when omitted.
        out: Receives each digest line.
    """
    if not config.team_ids:
        logger.warning("SLACK_TEAM_IDS not set. All messages will show as automated.")

    owns_gateway = gateway is None
    if gateway is None:
        gateway = SlackGateway(config.bot_token)

    cursor_store = CursorStore(config.state_file, fallback_channel_id=_legacy_channel_id(config))
    cursors = cursor_store.load()

    fetcher = ChannelFetcher(
        gateway,
        AttachmentDownloader(gateway, config.download_dir),
        self_bot_name=config.self_bot_name,
    )

    fetched: list[ChannelMessages] = []
    failed: list[str] = []
    try:
        for channel in config.channels_to_check():
            watermark = cursors.get(channel.id) or EPOCH_TS
            try:
                channel_messages = await fetcher.fetch_since(channel.id, channel.name, watermark)
            except Exception as e:
                logger.error(f"Error fetching messages from #{channel.name}: {e}")
                failed.append(channel.name)
                continue

            fetched.append(channel_messages)
            latest = channel_messages.latest_ts
            if latest and _advances(latest, cursors.get(channel.id)):
                cursors[channel.id] = latest
            logger.debug(
                f"#{channel.name}: {len(channel_messages.messages)} new message(s), "
                f"cursor {cursors.get(channel.id, EPOCH_TS)}"
            )
    finally:
        if owns_gateway:
            await gateway.aclose()

    results, totals = aggregate(fetched, config.team_ids)

    inbox_store = InboxStore(config.inbox_file)
    previous_inbox = inbox_store.load()

    lines = render_digest(previous_inbox, results, totals)
    for line in lines:
        out(line)

    inbox = next_inbox(results, totals)
    inbox_store.save(inbox)
    cursor_store.save(cursors)

    return CheckReport(
        previous_inbox=previous_inbox,
        results=results,
        totals=totals,
        inbox=inbox,
        cursors=dict(cursors),
        lines=lines,
        failed_channels=failed,
    )


def run_check_sync(config: BridgeConfig, out: Callable[[str], None] = print) -> CheckReport:
    """Blocking entry point used by the CLI."""
    return asyncio.run(run_check(config, out=out))
