"""Tests for exception hierarchy."""

from slack_bridge.exceptions import (
    SlackBridgeError,
    ConfigError,
    ChannelNotFoundError,
    AgentTokenError,
    SlackError,
    SlackFetchError,
    SlackCommandError,
)


def test_all_inherit_from_base():
    for exc_class in [
        ConfigError, ChannelNotFoundError, AgentTokenError,
        SlackError, SlackFetchError, SlackCommandError,
    ]:
        assert issubclass(exc_class, SlackBridgeError)


def test_config_hierarchy():
    assert issubclass(ChannelNotFoundError, ConfigError)
    assert issubclass(AgentTokenError, ConfigError)


def test_slack_hierarchy():
    assert issubclass(SlackFetchError, SlackError)
    assert issubclass(SlackCommandError, SlackError)


def test_exception_message():
    e = SlackFetchError("test error")
    assert str(e) == "test error"


def test_command_error_code():
    e = SlackCommandError("Message not found. Check the timestamp.", "message_not_found")
    assert str(e) == "Message not found. Check the timestamp."
    assert e.code == "message_not_found"
    assert SlackCommandError("x").code is None
