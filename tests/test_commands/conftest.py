"""Shared fixtures for command tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from slack_sdk.errors import SlackApiError

from slack_bridge.config import BridgeConfig, ChannelConfig


def api_error(code):
    return SlackApiError(f"The request failed: {code}", {"ok": False, "error": code})


@pytest.fixture
def config():
    return BridgeConfig(
        bot_token="xoxb-default",
        state_dir=Path("/tmp/state"),
        download_dir=Path("/tmp/slack"),
        channels=(ChannelConfig("general", "C1"), ChannelConfig("ops", "C2")),
        default_channel="general",
    )


@pytest.fixture
def agent_config(config):
    return BridgeConfig(
        bot_token=config.bot_token,
        state_dir=config.state_dir,
        download_dir=config.download_dir,
        channels=config.channels,
        default_channel=config.default_channel,
        agent_tokens={"emily": "xoxb-emily"},
    )


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def make_error():
    return api_error
