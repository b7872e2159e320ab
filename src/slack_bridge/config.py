"""Bridge configuration, built once from the environment and passed explicitly.

Each agent repo keeps its own ``.env`` with its own tokens and channel list::

    SLACK_BOT_TOKEN=xoxb-...
    SLACK_CHANNELS=general:C0123,ops:C0456
    SLACK_DEFAULT_CHANNEL=general
    SLACK_BOT_TOKEN_EMILY=xoxb-...        # posting identity for --as emily
    SLACK_TEAM_IDS=patrick:U0AFEP22HV2,sam:U0AES1Q2NR1
    SLACK_AGENT_IDS=emily:U0AF8Q4EHFX
    SLACK_SELF_BOT_NAME=emily
    SLACK_STATE_DIR=./memory
    SLACK_DOWNLOAD_DIR=./slack
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from slack_bridge.exceptions import AgentTokenError, ChannelNotFoundError, ConfigError

logger = logging.getLogger(__name__)

_AGENT_TOKEN_RE = re.compile(r"^SLACK_BOT_TOKEN_(\w+)$")

STATE_FILENAME = "slack_state.json"
INBOX_FILENAME = "slack_inbox.json"


@dataclass(frozen=True)
class ChannelConfig:
    """A statically configured channel: human label plus Slack channel ID."""

    name: str
    id: str


@dataclass(frozen=True)
class BridgeConfig:
    """Complete bridge configuration."""

    bot_token: str
    state_dir: Path
    download_dir: Path
    channels: tuple[ChannelConfig, ...] = ()
    default_channel: str = ""
    channel_id: str = ""  # legacy single-channel setup
    agent_tokens: dict[str, str] = field(default_factory=dict)
    self_bot_name: str = ""
    team_ids: frozenset[str] = frozenset()
    agent_ids: dict[str, str] = field(default_factory=dict)

    @property
    def state_file(self) -> Path:
        return self.state_dir / STATE_FILENAME

    @property
    def inbox_file(self) -> Path:
        return self.state_dir / INBOX_FILENAME

    def validate(self) -> None:
        """Raise ConfigError when the bot token or channel list is missing."""
        if not self.bot_token:
            raise ConfigError("SLACK_BOT_TOKEN is required in .env")
        if not self.channels and not self.channel_id:
            raise ConfigError("SLACK_CHANNELS or SLACK_CHANNEL_ID is required in .env")

    def channels_to_check(self) -> list[ChannelConfig]:
        """Channels polled by ``check``; the legacy channel is labelled ``default``."""
        if self.channels:
            return list(self.channels)
        return [ChannelConfig(name="default", id=self.channel_id)]

    def channel_by_name(self, name: str) -> ChannelConfig | None:
        return next((c for c in self.channels if c.name == name), None)

    def resolve_channel(self, name: str | None = None) -> ChannelConfig:
        """Resolve ``--channel`` (or the default channel) to a configured channel."""
        if name:
            target = self.channel_by_name(name)
        else:
            target = self.channel_by_name(self.default_channel) or (
                self.channels[0] if self.channels else None
            )

        if target is None and self.channel_id:
            target = ChannelConfig(name="default", id=self.channel_id)

        if target is None:
            available = ", ".join(c.name for c in self.channels) or "(none)"
            raise ChannelNotFoundError(
                f'Channel "{name or "default"}" not found. Available channels: {available}'
            )
        return target

    def resolve_agent(self, agent_name: str | None) -> str | None:
        """Validate ``--as``: mandatory once any agent tokens are configured."""
        if not agent_name and self.agent_tokens:
            available = ", ".join(sorted(self.agent_tokens))
            raise AgentTokenError(f"--as <agent> is required. Available: {available}")
        return agent_name

    def posting_token(self, agent_name: str | None = None) -> str:
        """Token to post with: the agent's own token, or the default bot token."""
        if agent_name:
            token = self.agent_tokens.get(agent_name.lower())
            if not token:
                raise AgentTokenError(
                    f'No token configured for agent "{agent_name}". '
                    f"Set SLACK_BOT_TOKEN_{agent_name.upper()} in .env"
                )
            return token
        return self.bot_token


def parse_channels(value: str) -> tuple[ChannelConfig, ...]:
    """Parse ``name:id,name:id`` into channel descriptors."""
    channels = []
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, _, channel_id = entry.partition(":")
        if not name or not channel_id:
            logger.warning(f"Ignoring malformed SLACK_CHANNELS entry: {entry!r}")
            continue
        channels.append(ChannelConfig(name=name.strip(), id=channel_id.strip()))
    return tuple(channels)


def parse_id_map(value: str | None) -> dict[str, str] | None:
    """Parse ``name:id,name:id`` into a dict; None when unset or empty."""
    if not value:
        return None
    ids: dict[str, str] = {}
    for pair in value.split(","):
        name, _, user_id = pair.partition(":")
        if name.strip() and user_id.strip():
            ids[name.strip()] = user_id.strip()
    return ids or None


def parse_agent_tokens(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect ``SLACK_BOT_TOKEN_<AGENT>`` variables keyed by lower-cased agent name."""
    tokens = {}
    for key, value in environ.items():
        match = _AGENT_TOKEN_RE.match(key)
        if match and value:
            tokens[match.group(1).lower()] = value
    return tokens


def load_env_file(cwd: Path | None = None) -> bool:
    """Load ``<cwd>/.env`` without overriding variables already set."""
    from dotenv import load_dotenv

    env_path = (cwd or Path.cwd()) / ".env"
    return load_dotenv(env_path, override=False)


def load_config(
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> BridgeConfig:
    """Build a BridgeConfig from an environment mapping (defaults to os.environ).

    Does not validate; call ``BridgeConfig.validate()`` before use.
    """
    env = os.environ if environ is None else environ
    base = cwd or Path.cwd()

    team_map = parse_id_map(env.get("SLACK_TEAM_IDS"))
    agent_map = parse_id_map(env.get("SLACK_AGENT_IDS"))
    # Agent IDs only count as team members when a team list is configured
    team_ids: list[str] = []
    if team_map:
        team_ids.extend(team_map.values())
        team_ids.extend((agent_map or {}).values())

    return BridgeConfig(
        bot_token=env.get("SLACK_BOT_TOKEN", ""),
        channels=parse_channels(env.get("SLACK_CHANNELS", "")),
        default_channel=env.get("SLACK_DEFAULT_CHANNEL", ""),
        channel_id=env.get("SLACK_CHANNEL_ID", ""),
        agent_tokens=parse_agent_tokens(env),
        self_bot_name=env.get("SLACK_SELF_BOT_NAME", ""),
        state_dir=Path(env.get("SLACK_STATE_DIR") or base / "memory"),
        download_dir=Path(env.get("SLACK_DOWNLOAD_DIR") or base / "slack"),
        team_ids=frozenset(team_ids),
        agent_ids=agent_map or {},
    )
