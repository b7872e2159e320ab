"""Tests for history and search."""

import pytest

from slack_bridge.commands.history import history, search
from slack_bridge.exceptions import ChannelNotFoundError, SlackCommandError


def _messages():
    # newest first, as Slack returns them
    return [
        {"ts": "300.0", "text": "deploy done", "bot_id": "B1", "username": "ci"},
        {"ts": "200.0", "text": "Deploy please", "user": "U1"},
        {"ts": "100.0", "text": "", "user": "U1", "files": [
            {"name": "shot.png", "mimetype": "image/png", "url_private": "https://img"},
            {"name": "log.txt", "mimetype": "text/plain", "url_private": "https://log"},
        ]},
    ]


@pytest.fixture
def history_client(client):
    client.conversations_history.return_value = {"messages": _messages()}
    client.users_info.return_value = {"user": {"real_name": "Pat"}}
    return client


def test_history_oldest_first(config, history_client):
    lines = history(config, limit=3, client=history_client)

    history_client.conversations_history.assert_called_once_with(channel="C1", limit=3)
    assert lines[0] == "Last 3 message(s) in #general:"
    ts_lines = [line for line in lines if line.startswith("  ts: ")]
    assert ts_lines == ["  ts: 100.0", "  ts: 200.0", "  ts: 300.0"]
    assert "  [Image: shot.png] https://img" in lines
    assert "  [File: log.txt (text/plain)] https://log" in lines
    assert "  (no text)" in lines
    assert any(line.endswith("] ci:") for line in lines)
    assert any(line.endswith("] Pat:") for line in lines)
    history_client.users_info.assert_called_once_with(user="U1")


def test_history_empty(config, client):
    client.conversations_history.return_value = {"messages": []}
    assert history(config, channel="ops", client=client) == ["No messages found in #ops."]


def test_history_api_error(config, client, make_error):
    client.conversations_history.side_effect = make_error("not_in_channel")
    with pytest.raises(SlackCommandError, match="not_in_channel"):
        history(config, client=client)


def test_search_is_case_insensitive_and_newest_first(config, history_client):
    lines = search(config, "DEPLOY", client=history_client)

    assert lines[0] == 'Searching for "DEPLOY" in 2 channel(s)...'
    # both channels return the same fixture page
    assert "Found 4 message(s):" in lines
    previews = [line for line in lines if line.startswith("  ") and not line.startswith("  ts:")]
    assert previews == ["  deploy done", "  deploy done", "  Deploy please", "  Deploy please"]
    assert history_client.conversations_history.call_args.kwargs["limit"] == 200


def test_search_limit_and_channel_filter(config, history_client):
    lines = search(config, "deploy", limit=1, channel="ops", client=history_client)
    history_client.conversations_history.assert_called_once_with(channel="C2", limit=200)
    assert "Found 1 message(s):" in lines
    assert any("#ops - ci:" in line for line in lines)


def test_search_truncates_long_previews(config, client):
    client.conversations_history.return_value = {"messages": [{"ts": "1.0", "text": "x" * 250, "user": "U1"}]}
    client.users_info.return_value = {"user": {"name": "pat"}}
    lines = search(config, "x", channel="general", client=client)
    assert f"  {'x' * 200}..." in lines


def test_search_skips_inaccessible_channels(config, client, make_error):
    client.conversations_history.side_effect = make_error("not_in_channel")
    lines = search(config, "deploy", client=client)
    assert lines[-1] == "No messages found matching your query."


def test_search_requires_query(config, client):
    with pytest.raises(SlackCommandError, match="Search query is required"):
        search(config, "", client=client)


def test_search_unknown_channel(config, client):
    with pytest.raises(ChannelNotFoundError, match="No channels to search"):
        search(config, "x", channel="random", client=client)
