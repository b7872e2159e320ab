"""Render the plain-text digest printed by ``check``."""

from __future__ import annotations

from slack_bridge.check.models import ChannelResult, CheckTotals, InboxEntry

INBOX_PREVIEW_CHARS = 500
RULE = "=" * 60


def render_inbox(entries: list[InboxEntry]) -> list[str]:
    if not entries:
        return []
    lines = [f"!! {len(entries)} UNREAD TEAM MESSAGE(S) FROM PREVIOUS CHECK !!"]
    for e in entries:
        lines.append(
            f"  [{e.timestamp}] {e.user} in #{e.channel}: {e.text[:INBOX_PREVIEW_CHARS]}"
        )
    lines.append("")
    return lines


def render_team_messages(results: list[ChannelResult], team_total: int) -> list[str]:
    lines = ["", RULE, f"  {team_total} TEAM MESSAGE(S)", RULE, ""]
    for result in results:
        if not result.team_messages:
            continue
        lines.append(f"--- #{result.channel_name} ({len(result.team_messages)} message(s)) ---")
        lines.append("")
        for msg in result.team_messages:
            lines.append(f"[{msg.timestamp}] {msg.user}:")
            lines.append(f"  {msg.text}")
            if msg.images:
                lines.append("  [Images attached:]")
                lines.extend(f"    - {path}" for path in msg.images)
            if msg.files:
                lines.append("  [Files attached:]")
                lines.extend(f"    - {path}" for path in msg.files)
            if msg.is_thread_reply:
                lines.append(f"  (reply in thread {msg.thread_ts})")
            lines.append(f"  [channel: #{result.channel_name}] [ts: {msg.ts}]")
            lines.append("")
    return lines


def summary_line(results: list[ChannelResult], totals: CheckTotals) -> str:
    """``TOTAL: T team, A automated | #name: ...`` with quiet channels omitted."""
    parts = []
    for result in results:
        t = len(result.team_messages)
        a = result.automated_message_count
        if t and a:
            parts.append(f"#{result.channel_name}: {t} team, {a} auto")
        elif t:
            parts.append(f"#{result.channel_name}: {t} team")
        elif a:
            parts.append(f"#{result.channel_name}: {a} auto")
    return f"TOTAL: {totals.team} team, {totals.automated} automated | {' | '.join(parts)}"


def render_digest(
    previous_inbox: list[InboxEntry],
    results: list[ChannelResult],
    totals: CheckTotals,
) -> list[str]:
    """Digest lines: carried-over inbox, automated counts, team messages, summary."""
    lines = render_inbox(previous_inbox)

    if totals.empty:
        if not previous_inbox:
            lines.append("No new messages.")
        return lines

    for result in results:
        if result.automated_message_count > 0:
            lines.append(
                f"#{result.channel_name}: {result.automated_message_count} automated message(s)"
            )

    if totals.team > 0:
        lines.extend(render_team_messages(results, totals.team))

    lines.append("")
    lines.append(summary_line(results, totals))
    return lines
