"""``slack-bridge`` command-line entry point.

Reads ``.env`` from the current directory for tokens and channels, so each
agent repo can carry its own configuration.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from slack_bridge.check.runner import run_check_sync
from slack_bridge.commands import delete_message, edit, history, react, reply, search, upload
from slack_bridge.config import BridgeConfig, load_config, load_env_file
from slack_bridge.exceptions import ConfigError, SlackBridgeError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slack-bridge",
        description="Slack CLI for agents and humans sharing one workspace integration.",
        epilog="Reads .env from the current directory for Slack tokens and channels.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    def posting(p: argparse.ArgumentParser) -> None:
        p.add_argument("--as", dest="agent", help="Agent identity to act as (SLACK_BOT_TOKEN_<AGENT>)")

    p = sub.add_parser("reply", help="Post a message")
    p.add_argument("message", nargs="?", default="", help="Message text (markdown is converted)")
    p.add_argument("--channel", help="Channel name (default: SLACK_DEFAULT_CHANNEL)")
    p.add_argument("--channel-id", help="Direct channel ID (alternative to --channel)")
    p.add_argument("--thread", help="Thread timestamp to reply to")
    p.add_argument("--stdin", action="store_true", help="Read message from stdin")
    posting(p)

    p = sub.add_parser("edit", help="Edit a message")
    p.add_argument("ts", help="Message timestamp")
    p.add_argument("message", help="New message text")
    p.add_argument("--channel", help="Channel name")
    posting(p)

    p = sub.add_parser("delete", help="Delete a message")
    p.add_argument("ts", help="Message timestamp")
    p.add_argument("--channel", help="Channel name")
    posting(p)

    p = sub.add_parser("react", help="Add/remove a reaction")
    p.add_argument("ts", help="Message timestamp")
    p.add_argument("emoji", help="Emoji name, with or without colons")
    p.add_argument("--channel", help="Channel name")
    p.add_argument("--remove", action="store_true", help="Remove the reaction instead")
    posting(p)

    p = sub.add_parser("upload", help="Upload a file")
    p.add_argument("filepath", help="Local file to upload")
    p.add_argument("comment", nargs="?", default="", help=argparse.SUPPRESS)
    p.add_argument("--message", help="Comment to include with the upload")
    p.add_argument("--channel", help="Channel name")
    posting(p)

    p = sub.add_parser("search", help="Search message history")
    p.add_argument("query", help="Case-insensitive text to look for")
    p.add_argument("--limit", type=int, default=10, help="Maximum results (default: 10)")
    p.add_argument("--channel", help="Only search this channel")
    posting(p)

    p = sub.add_parser("history", help="Show recent messages")
    p.add_argument("channel", nargs="?", help="Channel name (default: SLACK_DEFAULT_CHANNEL)")
    p.add_argument("--channel", dest="channel_opt", help=argparse.SUPPRESS)
    p.add_argument("--limit", type=int, default=10, help="Number of messages (default: 10)")
    posting(p)

    sub.add_parser("check", help="Fetch new messages from all configured channels")
    return parser


def dispatch(config: BridgeConfig, args: argparse.Namespace) -> list[str]:
    """Run the selected command and return its output lines (check prints as it goes)."""
    command = args.command
    if command == "reply":
        message = sys.stdin.read().strip() if args.stdin else args.message
        return reply(
            config,
            message,
            channel=args.channel,
            channel_id=args.channel_id,
            thread_ts=args.thread,
            agent=args.agent,
        )
    if command == "edit":
        return edit(config, args.ts, args.message, channel=args.channel, agent=args.agent)
    if command == "delete":
        return delete_message(config, args.ts, channel=args.channel, agent=args.agent)
    if command == "react":
        return react(
            config, args.ts, args.emoji, channel=args.channel, remove=args.remove, agent=args.agent
        )
    if command == "upload":
        return upload(
            config,
            args.filepath,
            comment=args.message or args.comment,
            channel=args.channel,
            agent=args.agent,
        )
    if command == "search":
        return search(config, args.query, limit=args.limit, channel=args.channel, agent=args.agent)
    if command == "history":
        return history(
            config, channel=args.channel or args.channel_opt, limit=args.limit, agent=args.agent
        )
    if command == "check":
        run_check_sync(config)
        return []
    raise SlackBridgeError(f"Unknown command: {command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    load_env_file(Path.cwd())
    config = load_config()
    try:
        config.validate()
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        print(
            f"Make sure .env exists in {Path.cwd()} with SLACK_BOT_TOKEN and SLACK_CHANNELS.",
            file=sys.stderr,
        )
        return 1

    try:
        lines = dispatch(config, args)
    except SlackBridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
