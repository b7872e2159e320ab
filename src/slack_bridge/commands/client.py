"""Shared plumbing for the request/response commands."""

from __future__ import annotations

import logging

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from slack_bridge.config import BridgeConfig

logger = logging.getLogger(__name__)


def posting_client(
    config: BridgeConfig,
    agent_name: str | None,
    client: WebClient | None = None,
) -> tuple[WebClient, str | None]:
    """Validate ``--as`` and return a WebClient on that agent's token.

    A pre-built ``client`` is returned as-is once the agent checks pass.
    """
    agent = config.resolve_agent(agent_name)
    token = config.posting_token(agent)
    if client is None:
        client = WebClient(token=token)
    return client, agent


def error_code(e: SlackApiError) -> str:
    """The Slack ``error`` string of a failed call (e.g. ``message_not_found``)."""
    try:
        return str(e.response.get("error") or "")
    except AttributeError:
        return ""


def agent_suffix(agent: str | None) -> str:
    return f" as {agent}" if agent else ""
