"""slack-bridge: a Slack command-line bridge for agents and humans.

Heavy imports are deferred. Use explicit imports:
    from slack_bridge.check import run_check
    from slack_bridge.commands import reply, edit, react
    etc.
"""

# Light imports only (no Slack SDK at import time)
from slack_bridge.config import BridgeConfig, ChannelConfig, load_config
from slack_bridge.exceptions import SlackBridgeError

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy imports for entry points that pull in the Slack SDK."""
    if name == "run_check":
        from slack_bridge.check.runner import run_check
        return run_check
    if name == "run_check_sync":
        from slack_bridge.check.runner import run_check_sync
        return run_check_sync
    raise AttributeError(f"module 'slack_bridge' has no attribute {name!r}")


__all__ = [
    "BridgeConfig",
    "ChannelConfig",
    "load_config",
    "SlackBridgeError",
    "run_check",
    "run_check_sync",
]
