"""Read-only commands: recent channel history and substring search."""

from __future__ import annotations

import logging
from datetime import datetime

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from slack_bridge.check.models import ts_to_iso
from slack_bridge.commands.client import error_code, posting_client
from slack_bridge.config import BridgeConfig, ChannelConfig
from slack_bridge.exceptions import ChannelNotFoundError, SlackCommandError
from slack_bridge.formatting import UserDirectory

logger = logging.getLogger(__name__)

SEARCH_SCAN_LIMIT = 200
SEARCH_PREVIEW_CHARS = 200
_INACCESSIBLE = {"channel_not_found", "not_in_channel"}


def _local_time(ts: str) -> str:
    """``Jan 5, 03:04 PM`` in local time."""
    dt = datetime.fromtimestamp(float(ts or 0))
    return f"{dt:%b} {dt.day}, {dt:%I:%M %p}"


def _attachment_lines(msg: dict) -> list[str]:
    lines = []
    for f in msg.get("files") or []:
        name = f.get("name") or "unnamed"
        mimetype = f.get("mimetype") or "unknown"
        url = f.get("url_private") or f.get("permalink") or ""
        if mimetype.startswith("image/"):
            lines.append(f"  [Image: {name}] {url}")
        else:
            lines.append(f"  [File: {name} ({mimetype})] {url}")
    return lines


def history(
    config: BridgeConfig,
    channel: str | None = None,
    limit: int = 10,
    agent: str | None = None,
    client: WebClient | None = None,
) -> list[str]:
    """The last ``limit`` messages of a channel, oldest first."""
    client, agent = posting_client(config, agent, client)
    target = config.resolve_channel(channel)

    try:
        response = client.conversations_history(channel=target.id, limit=limit)
    except SlackApiError as e:
        raise SlackCommandError(f"Error fetching history: {error_code(e) or e}", error_code(e)) from e

    messages = list(response.get("messages") or [])
    if not messages:
        return [f"No messages found in #{target.name}."]

    users = UserDirectory(client)
    lines = [f"Last {len(messages)} message(s) in #{target.name}:", ""]
    for msg in reversed(messages):
        lines.append(f"[{_local_time(msg.get('ts', '0'))}] {users.author(msg)}:")
        lines.append(f"  {msg.get('text') or '(no text)'}")
        lines.extend(_attachment_lines(msg))
        lines.append(f"  ts: {msg.get('ts')}")
        lines.append("")
    return lines


def _search_channel(
    client: WebClient,
    users: UserDirectory,
    channel: ChannelConfig,
    query: str,
    limit: int,
) -> list[dict]:
    results: list[dict] = []
    needle = query.lower()
    try:
        response = client.conversations_history(channel=channel.id, limit=SEARCH_SCAN_LIMIT)
    except SlackApiError as e:
        if error_code(e) not in _INACCESSIBLE:
            logger.error(f"Error searching #{channel.name}: {error_code(e) or e}")
        return results

    for msg in response.get("messages") or []:
        text, ts = msg.get("text"), msg.get("ts")
        if not text or not ts or needle not in text.lower():
            continue
        results.append({
            "channel": channel.name,
            "channel_id": channel.id,
            "user": users.author(msg),
            "text": text,
            "ts": ts,
            "timestamp": ts_to_iso(ts),
        })
        if len(results) >= limit:
            break
    return results


def search(
    config: BridgeConfig,
    query: str,
    limit: int = 10,
    channel: str | None = None,
    agent: str | None = None,
    client: WebClient | None = None,
) -> list[str]:
    """Case-insensitive substring search over recent history of configured channels."""
    if not query:
        raise SlackCommandError("Search query is required")

    channels = [c for c in config.channels if c.name == channel] if channel else list(config.channels)
    if not channels:
        raise ChannelNotFoundError("No channels to search")

    client, agent = posting_client(config, agent, client)
    users = UserDirectory(client)

    lines = [f'Searching for "{query}" in {len(channels)} channel(s)...', ""]
    found: list[dict] = []
    for c in channels:
        found.extend(_search_channel(client, users, c, query, limit))

    found.sort(key=lambda r: float(r["ts"]), reverse=True)
    found = found[:limit]

    if not found:
        lines.append("No messages found matching your query.")
        return lines

    lines.extend([f"Found {len(found)} message(s):", ""])
    for r in found:
        preview = r["text"][:SEARCH_PREVIEW_CHARS]
        if len(r["text"]) > SEARCH_PREVIEW_CHARS:
            preview += "..."
        lines.append(f"[{_local_time(r['ts'])}] #{r['channel']} - {r['user']}:")
        lines.append(f"  {preview}")
        lines.append(f"  ts: {r['ts']}")
        lines.append("")
    return lines
