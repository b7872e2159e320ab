"""Tests for Slack text formatting and author resolution."""

from unittest.mock import MagicMock

from slack_sdk.errors import SlackApiError

from slack_bridge.formatting import UserDirectory, format_for_slack, is_bot_message


def test_headings_stripped():
    assert format_for_slack("## Status\nall good") == "Status\nall good"


def test_links_split():
    assert format_for_slack("see [docs](https://x.io)") == "see docs\nhttps://x.io"


def test_bold_and_underline():
    assert format_for_slack("**done** and __soon__") == "*done* and _soon_"


def test_shell_escapes_removed():
    assert format_for_slack("Ship it\\! Ready\\?") == "Ship it! Ready?"


def test_plain_text_unchanged():
    assert format_for_slack("just *text* here") == "just *text* here"


def test_is_bot_message():
    assert is_bot_message({"bot_id": "B1"})
    assert is_bot_message({"subtype": "bot_message"})
    assert not is_bot_message({"user": "U1"})


def test_user_directory_caches():
    client = MagicMock()
    client.users_info.return_value = {"user": {"real_name": "Pat", "name": "pat"}}
    users = UserDirectory(client)

    assert users.name("U1") == "Pat"
    assert users.name("U1") == "Pat"
    client.users_info.assert_called_once_with(user="U1")


def test_user_directory_falls_back_to_id():
    client = MagicMock()
    client.users_info.side_effect = SlackApiError("boom", {"ok": False, "error": "user_not_found"})
    assert UserDirectory(client).name("U404") == "U404"


def test_author():
    client = MagicMock()
    client.users_info.return_value = {"user": {"name": "pat"}}
    users = UserDirectory(client)
    assert users.author({"bot_id": "B1", "username": "ci"}) == "ci"
    assert users.author({"bot_id": "B1"}) == "Bot"
    assert users.author({"user": "U1"}) == "pat"
    assert users.author({}) == "Unknown"
