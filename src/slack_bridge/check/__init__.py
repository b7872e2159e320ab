"""Incremental multi-channel polling ("check") pipeline."""

from slack_bridge.check.classifier import aggregate, classify, is_team_message
from slack_bridge.check.cursor import CursorStore
from slack_bridge.check.digest import render_digest
from slack_bridge.check.downloader import AttachmentDownloader
from slack_bridge.check.fetcher import ChannelFetcher
from slack_bridge.check.gateway import SlackGateway
from slack_bridge.check.inbox import InboxStore, next_inbox
from slack_bridge.check.models import (
    ChannelMessages,
    ChannelResult,
    CheckReport,
    CheckTotals,
    FileAttachment,
    FormattedMessage,
    InboxEntry,
)
from slack_bridge.check.runner import run_check, run_check_sync

__all__ = [
    "run_check",
    "run_check_sync",
    "CursorStore",
    "InboxStore",
    "next_inbox",
    "ChannelFetcher",
    "AttachmentDownloader",
    "SlackGateway",
    "aggregate",
    "classify",
    "is_team_message",
    "render_digest",
    "ChannelMessages",
    "ChannelResult",
    "CheckReport",
    "CheckTotals",
    "FileAttachment",
    "FormattedMessage",
    "InboxEntry",
]
