"""Single request/response commands (post, edit, delete, react, upload, read)."""

from slack_bridge.commands.history import history, search
from slack_bridge.commands.messages import delete_message, edit, reply
from slack_bridge.commands.reactions import react
from slack_bridge.commands.upload import upload

__all__ = [
    "reply",
    "edit",
    "delete_message",
    "react",
    "upload",
    "search",
    "history",
]
