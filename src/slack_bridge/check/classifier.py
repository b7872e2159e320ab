"""Split fetched messages into team vs automated and tally them per run."""

from __future__ import annotations

from typing import AbstractSet, Iterable

from slack_bridge.check.models import ChannelMessages, ChannelResult, CheckTotals, FormattedMessage


def is_team_message(message: FormattedMessage, team_ids: AbstractSet[str]) -> bool:
    """Team iff the sender ID is present and configured; everything else is automated."""
    return bool(message.user_id) and message.user_id in team_ids


def classify(
    messages: Iterable[FormattedMessage],
    team_ids: AbstractSet[str],
) -> tuple[list[FormattedMessage], list[FormattedMessage]]:
    """Partition messages into (team, automated), keeping chronological order."""
    team: list[FormattedMessage] = []
    automated: list[FormattedMessage] = []
    for message in messages:
        (team if is_team_message(message, team_ids) else automated).append(message)
    return team, automated


def aggregate(
    fetched: Iterable[ChannelMessages],
    team_ids: AbstractSet[str],
) -> tuple[list[ChannelResult], CheckTotals]:
    """One ChannelResult per channel that had messages, plus grand totals."""
    results: list[ChannelResult] = []
    totals = CheckTotals()
    for channel in fetched:
        if not channel.messages:
            continue
        team, automated = classify(channel.messages, team_ids)
        results.append(
            ChannelResult(
                channel_name=channel.channel_name,
                channel_id=channel.channel_id,
                team_messages=team,
                automated_message_count=len(automated),
                latest_ts=channel.latest_ts,
            )
        )
        totals.team += len(team)
        totals.automated += len(automated)
    return results, totals
