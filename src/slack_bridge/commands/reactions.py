"""Add or remove emoji reactions."""

from __future__ import annotations

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from slack_bridge.commands.client import agent_suffix, error_code, posting_client
from slack_bridge.config import BridgeConfig
from slack_bridge.exceptions import SlackCommandError


def normalize_emoji(name: str) -> str:
    """``:thumbsup:`` → ``thumbsup``."""
    return name.strip().strip(":")


def react(
    config: BridgeConfig,
    ts: str,
    emoji: str,
    channel: str | None = None,
    remove: bool = False,
    agent: str | None = None,
    client: WebClient | None = None,
) -> list[str]:
    """React to a message. Already-present / already-absent reactions are not errors."""
    emoji = normalize_emoji(emoji)
    if not ts:
        raise SlackCommandError("Timestamp is required")
    if not emoji:
        raise SlackCommandError("Emoji name is required")

    client, agent = posting_client(config, agent, client)
    target = config.resolve_channel(channel)

    try:
        if remove:
            client.reactions_remove(channel=target.id, timestamp=ts, name=emoji)
        else:
            client.reactions_add(channel=target.id, timestamp=ts, name=emoji)
    except SlackApiError as e:
        code = error_code(e)
        if code == "already_reacted":
            return [f"Already reacted with :{emoji}: on this message."]
        if code == "no_reaction":
            return [f"No :{emoji}: reaction to remove on this message."]
        if code == "message_not_found":
            raise SlackCommandError("Message not found. Check the timestamp.", code) from e
        raise SlackCommandError(f"Error: {code or e}", code) from e

    action = "Removed" if remove else "Added"
    return [
        f"{action} :{emoji}: reaction{agent_suffix(agent)}.",
        f"  Channel: #{target.name}",
        f"  Timestamp: {ts}",
    ]
