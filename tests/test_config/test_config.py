"""Tests for configuration loading and channel/agent resolution."""

import os
from pathlib import Path

import pytest

from slack_bridge.config import (
    BridgeConfig,
    ChannelConfig,
    load_config,
    load_env_file,
    parse_agent_tokens,
    parse_channels,
    parse_id_map,
)
from slack_bridge.exceptions import AgentTokenError, ChannelNotFoundError, ConfigError


def _config(**kwargs):
    defaults = dict(
        bot_token="xoxb-default",
        state_dir=Path("/tmp/state"),
        download_dir=Path("/tmp/slack"),
        channels=(ChannelConfig("general", "C1"), ChannelConfig("ops", "C2")),
    )
    defaults.update(kwargs)
    return BridgeConfig(**defaults)


def test_parse_channels():
    assert parse_channels("general:C1, ops:C2") == (ChannelConfig("general", "C1"), ChannelConfig("ops", "C2"))
    assert parse_channels("") == ()


def test_parse_channels_skips_malformed():
    assert parse_channels("general:C1,broken,:C3,ops:") == (ChannelConfig("general", "C1"),)


def test_parse_id_map():
    assert parse_id_map("patrick:U1, sam:U2") == {"patrick": "U1", "sam": "U2"}
    assert parse_id_map("") is None
    assert parse_id_map(None) is None
    assert parse_id_map("garbage") is None


def test_parse_agent_tokens():
    env = {
        "SLACK_BOT_TOKEN": "xoxb-default",
        "SLACK_BOT_TOKEN_EMILY": "xoxb-emily",
        "SLACK_BOT_TOKEN_Max": "xoxb-max",
        "SLACK_BOT_TOKEN_EMPTY": "",
        "OTHER": "x",
    }
    assert parse_agent_tokens(env) == {"emily": "xoxb-emily", "max": "xoxb-max"}


def test_load_config(tmp_path):
    env = {
        "SLACK_BOT_TOKEN": "xoxb-default",
        "SLACK_CHANNELS": "general:C1,ops:C2",
        "SLACK_DEFAULT_CHANNEL": "ops",
        "SLACK_BOT_TOKEN_EMILY": "xoxb-emily",
        "SLACK_TEAM_IDS": "patrick:U1,sam:U2",
        "SLACK_AGENT_IDS": "emily:U9",
        "SLACK_SELF_BOT_NAME": "emily",
    }
    config = load_config(env, cwd=tmp_path)

    assert config.bot_token == "xoxb-default"
    assert [c.name for c in config.channels] == ["general", "ops"]
    assert config.default_channel == "ops"
    assert config.agent_tokens == {"emily": "xoxb-emily"}
    assert config.team_ids == frozenset({"U1", "U2", "U9"})
    assert config.agent_ids == {"emily": "U9"}
    assert config.self_bot_name == "emily"
    assert config.state_file == tmp_path / "memory" / "slack_state.json"
    assert config.inbox_file == tmp_path / "memory" / "slack_inbox.json"
    assert config.download_dir == tmp_path / "slack"


def test_agent_ids_alone_are_not_team_members(tmp_path):
    config = load_config({"SLACK_AGENT_IDS": "emily:U9"}, cwd=tmp_path)
    assert config.team_ids == frozenset()


def test_directory_overrides(tmp_path):
    env = {"SLACK_STATE_DIR": str(tmp_path / "s"), "SLACK_DOWNLOAD_DIR": str(tmp_path / "d")}
    config = load_config(env, cwd=tmp_path)
    assert config.state_dir == tmp_path / "s"
    assert config.download_dir == tmp_path / "d"


def test_load_env_file_does_not_override(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("SLACK_TEST_FROM_FILE=file\nSLACK_TEST_PRESET=file\n")
    monkeypatch.setenv("SLACK_TEST_PRESET", "shell")
    monkeypatch.delenv("SLACK_TEST_FROM_FILE", raising=False)

    assert load_env_file(tmp_path) is True

    assert os.environ["SLACK_TEST_FROM_FILE"] == "file"
    assert os.environ["SLACK_TEST_PRESET"] == "shell"


def test_validate():
    _config().validate()
    _config(channels=(), channel_id="CLEGACY").validate()
    with pytest.raises(ConfigError, match="SLACK_BOT_TOKEN"):
        _config(bot_token="").validate()
    with pytest.raises(ConfigError, match="SLACK_CHANNELS or SLACK_CHANNEL_ID"):
        _config(channels=()).validate()


def test_channels_to_check_legacy():
    assert _config(channels=(), channel_id="CL").channels_to_check() == [ChannelConfig("default", "CL")]
    assert len(_config().channels_to_check()) == 2


def test_resolve_channel():
    config = _config(default_channel="ops")
    assert config.resolve_channel("general").id == "C1"
    assert config.resolve_channel().id == "C2"
    assert _config().resolve_channel().id == "C1"
    assert _config(channels=(), channel_id="CL").resolve_channel() == ChannelConfig("default", "CL")


def test_resolve_unknown_channel():
    with pytest.raises(ChannelNotFoundError, match="Available channels: general, ops"):
        _config().resolve_channel("random")


def test_resolve_agent_required_when_tokens_exist():
    config = _config(agent_tokens={"emily": "xoxb-e", "max": "xoxb-m"})
    with pytest.raises(AgentTokenError, match="Available: emily, max"):
        config.resolve_agent(None)
    assert config.resolve_agent("emily") == "emily"
    assert _config().resolve_agent(None) is None


def test_posting_token():
    config = _config(agent_tokens={"emily": "xoxb-e"})
    assert config.posting_token("Emily") == "xoxb-e"
    assert config.posting_token(None) == "xoxb-default"
    with pytest.raises(AgentTokenError, match="SLACK_BOT_TOKEN_MAX"):
        config.posting_token("max")
