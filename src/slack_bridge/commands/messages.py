"""Post, edit and delete messages."""

from __future__ import annotations

import logging

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from slack_bridge.commands.client import agent_suffix, error_code, posting_client
from slack_bridge.config import BridgeConfig
from slack_bridge.exceptions import SlackCommandError
from slack_bridge.formatting import format_for_slack

logger = logging.getLogger(__name__)

_EDIT_ERRORS = {
    "cant_update_message": "Cannot edit this message. You can only edit messages posted by the bot.",
    "message_not_found": "Message not found. Check the timestamp.",
}

_DELETE_ERRORS = {
    "cant_delete_message": "Cannot delete this message. You can only delete messages posted by the bot.",
    "message_not_found": "Message not found. Check the timestamp.",
}


def reply(
    config: BridgeConfig,
    message: str,
    channel: str | None = None,
    channel_id: str | None = None,
    thread_ts: str | None = None,
    agent: str | None = None,
    client: WebClient | None = None,
) -> list[str]:
    """Post a message (optionally into a thread). Returns the confirmation lines."""
    if not message:
        raise SlackCommandError("Message is required")

    client, agent = posting_client(config, agent, client)

    if channel_id:
        target_id, target_name = channel_id, channel_id
    else:
        target = config.resolve_channel(channel)
        target_id, target_name = target.id, target.name

    try:
        response = client.chat_postMessage(
            channel=target_id,
            text=format_for_slack(message),
            thread_ts=thread_ts,
        )
    except SlackApiError as e:
        raise SlackCommandError(f"Error posting message: {error_code(e) or e}", error_code(e)) from e

    logger.info(f"Posted to #{target_name} ts={response.get('ts')}")
    lines = [
        f"Message posted successfully{agent_suffix(agent)}.",
        f"  Channel: #{target_name} ({response.get('channel')})",
        f"  Timestamp: {response.get('ts')}",
    ]
    if thread_ts:
        lines.append(f"  Thread: {thread_ts}")
    return lines


def edit(
    config: BridgeConfig,
    ts: str,
    message: str,
    channel: str | None = None,
    agent: str | None = None,
    client: WebClient | None = None,
) -> list[str]:
    """Replace the text of a message the bot posted."""
    if not ts:
        raise SlackCommandError("Timestamp is required")
    if not message:
        raise SlackCommandError("New message text is required")

    client, agent = posting_client(config, agent, client)
    target = config.resolve_channel(channel)

    try:
        client.chat_update(channel=target.id, ts=ts, text=format_for_slack(message))
    except SlackApiError as e:
        code = error_code(e)
        raise SlackCommandError(
            _EDIT_ERRORS.get(code, f"Error editing message: {code or e}"), code
        ) from e

    return [
        f"Message edited successfully{agent_suffix(agent)}.",
        f"  Channel: #{target.name}",
        f"  Timestamp: {ts}",
    ]


def delete_message(
    config: BridgeConfig,
    ts: str,
    channel: str | None = None,
    agent: str | None = None,
    client: WebClient | None = None,
) -> list[str]:
    """Delete a message the bot posted."""
    if not ts:
        raise SlackCommandError("Timestamp is required")

    client, agent = posting_client(config, agent, client)
    target = config.resolve_channel(channel)

    try:
        client.chat_delete(channel=target.id, ts=ts)
    except SlackApiError as e:
        code = error_code(e)
        raise SlackCommandError(
            _DELETE_ERRORS.get(code, f"Error deleting message: {code or e}"), code
        ) from e

    return [
        f"Message deleted successfully{agent_suffix(agent)}.",
        f"  Channel: #{target.name}",
        f"  Timestamp: {ts}",
    ]
