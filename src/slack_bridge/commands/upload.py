"""Upload a local file to a channel."""

from __future__ import annotations

import logging
from pathlib import Path

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from slack_bridge.commands.client import agent_suffix, error_code, posting_client
from slack_bridge.config import BridgeConfig
from slack_bridge.exceptions import SlackCommandError
from slack_bridge.formatting import format_for_slack

logger = logging.getLogger(__name__)

BINARY_EXTENSIONS = {
    ".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".pdf", ".zip", ".tar", ".gz",
    ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
}


def upload(
    config: BridgeConfig,
    file_path: str,
    comment: str = "",
    channel: str | None = None,
    agent: str | None = None,
    client: WebClient | None = None,
) -> list[str]:
    """Upload ``file_path``; binary types are sent as bytes, everything else as text."""
    if not file_path:
        raise SlackCommandError("File path is required")
    path = Path(file_path)
    if not path.is_file():
        raise SlackCommandError(f"File not found: {file_path}")

    client, agent = posting_client(config, agent, client)
    target = config.resolve_channel(channel)

    initial_comment = format_for_slack(comment or f"Transmitting {path.name}")
    kwargs: dict = {
        "channel": target.id,
        "filename": path.name,
        "initial_comment": initial_comment,
    }
    if path.suffix.lower() in BINARY_EXTENSIONS:
        kwargs["file"] = path.read_bytes()
    else:
        try:
            kwargs["content"] = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.debug(f"{path.name} is not UTF-8 text; uploading raw bytes")
            kwargs["file"] = path.read_bytes()

    try:
        client.files_upload_v2(**kwargs)
    except SlackApiError as e:
        raise SlackCommandError(f"Upload failed: {error_code(e) or e}", error_code(e)) from e

    logger.info(f"Uploaded {path.name} to #{target.name}")
    return [
        f"Upload successful{agent_suffix(agent)}.",
        f"  Channel: #{target.name}",
    ]
