"""Unified exception hierarchy for slack-bridge."""


class SlackBridgeError(Exception):
    """Base exception for all slack-bridge errors."""


# Configuration
class ConfigError(SlackBridgeError):
    """Missing or invalid configuration (token, channels, agent)."""


class ChannelNotFoundError(ConfigError):
    """A channel name could not be resolved from the configured channels."""


class AgentTokenError(ConfigError):
    """No posting token is configured for the requested agent."""


# Slack Web API
class SlackError(SlackBridgeError):
    """Base exception for Slack Web API operations."""


class SlackFetchError(SlackError):
    """Failed to fetch channel history."""


class SlackCommandError(SlackError):
    """A posting/editing/reacting/uploading call was rejected or failed.

    ``code`` carries the Slack error string (e.g. ``message_not_found``)
    when the platform returned one.
    """

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code
