"""Formatting helpers and text reports for the time breakdown.

This module provides utilities for:
- Formatting second-based durations as ``HH:MM:SS`` or compact ``"1h 5m"`` text.
- Building the artist view (estimated video/feedback split per artist).
- Building the user view for one period granularity, newest period first.
- Building the per-day drill-down listing each work session.
- Building the message history of a single submission.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from .breakdown import UNKNOWN_USER_NAME
from .models import ActorTimeSummary, Message, TimeBlock, TimeBreakdown
from .normalize import parse_timestamp
from .periods import sort_periods_desc

PERIOD_RANGES = ("day", "week", "month", "year")


def format_duration(seconds: Optional[float]) -> str:
    """Format seconds as ``HH:MM:SS``.

    Args:
        seconds: Duration in seconds.

    Returns:
        ``"n/a"`` when ``seconds`` is ``None``; otherwise a rounded
        ``HH:MM:SS`` string.
    """
    if seconds is None:
        return "n/a"

    total_seconds = int(round(seconds))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    remaining_seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{remaining_seconds:02d}"


def format_duration_short(seconds: float) -> str:
    """Format seconds compactly: ``"2h 5m"``, ``"12m"`` or ``"40s"``."""
    total_seconds = int(seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60

    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m"
    return f"{total_seconds % 60}s"


def _period_bucket(actor: ActorTimeSummary, period_range: str) -> Dict[str, int]:
    buckets = {
        "day": actor.daily_time,
        "week": actor.weekly_time,
        "month": actor.monthly_time,
        "year": actor.yearly_time,
    }
    return buckets[period_range]


def _totals_lines(breakdown: TimeBreakdown) -> List[str]:
    lines = [
        f"Total Time: {format_duration(breakdown.total_project_time)}",
        f"Submissions: {breakdown.total_submissions}",
        f"Feedbacks: {breakdown.total_feedbacks}",
        f"Artists: {len(breakdown.artists)}",
    ]
    if breakdown.skipped_records:
        lines.append(f"Skipped records (invalid timestamps): {breakdown.skipped_records}")
    return lines


def generate_artist_report(breakdown: TimeBreakdown) -> str:
    """Generate the per-artist report, largest total first.

    Video and feedback columns are a fixed 70/30 estimate of the
    session-reconstructed total and are labelled as such.
    """
    lines = ["Time Breakdown by Artist", ""]
    lines.extend(_totals_lines(breakdown))
    lines.append("")

    if not breakdown.artists:
        lines.append("No artist data.")
        return "\n".join(lines)

    for index, artist in enumerate(breakdown.artists, start=1):
        share = (
            artist.total_time / breakdown.total_project_time * 100
            if breakdown.total_project_time
            else 0.0
        )
        lines.extend(
            [
                f"{index}) {artist.artist_name}",
                f"   Submissions: {artist.submission_count}",
                f"   Total: {format_duration(artist.total_time)} ({share:.1f}%)",
                f"   Video (est. 70%): {format_duration(artist.video_time)}",
                f"   Feedback (est. 30%): {format_duration(artist.feedback_time)}",
            ]
        )

    return "\n".join(lines)


def generate_user_report(breakdown: TimeBreakdown, period_range: str = "month") -> str:
    """Generate the per-user report for one period granularity.

    Raises:
        ValueError: If ``period_range`` is not one of ``PERIOD_RANGES``.
    """
    if period_range not in PERIOD_RANGES:
        raise ValueError(f"Unknown period range '{period_range}'; expected one of {PERIOD_RANGES}.")

    lines = [f"Time Breakdown by User ({period_range})", ""]
    lines.extend(_totals_lines(breakdown))
    lines.append("")

    if not breakdown.actors:
        lines.append("No user data.")
        return "\n".join(lines)

    for index, actor in enumerate(breakdown.actors, start=1):
        lines.append(f"{index}) {actor.actor_name} - Total: {format_duration_short(actor.total_time)}")
        for period, seconds in sort_periods_desc(_period_bucket(actor, period_range)):
            lines.append(f"   {period}: {format_duration_short(seconds)}")

    return "\n".join(lines)


def generate_day_report(actor_name: str, day: str, blocks: List[TimeBlock]) -> str:
    """Generate the drill-down for one user and day: each session with its feedback."""
    day_total = sum(block.total_duration for block in blocks)
    lines = [
        f"Time Blocks for {actor_name} on {day}",
        f"Sessions: {len(blocks)}",
        f"Total: {format_duration(day_total)}",
    ]

    if not blocks:
        lines.extend(["", "No feedback on this day."])
        return "\n".join(lines)

    for index, block in enumerate(blocks, start=1):
        lines.extend(
            [
                "",
                f"Block {index}: {block.start_time:%H:%M:%S} - {block.end_time:%H:%M:%S} "
                f"({format_duration_short(block.total_duration)})",
            ]
        )
        for feedback in block.feedbacks:
            lines.append(
                f"   {feedback.timestamp:%H:%M:%S}  {feedback.subject_label}  "
                f"+{format_duration_short(feedback.duration)}  (submission {feedback.subject_id})"
            )

    return "\n".join(lines)


def generate_message_report(
    submission_id: str,
    messages: List[Message],
    profile_names: Optional[Mapping[str, str]] = None,
) -> str:
    """Generate the message history of one submission, in the order given.

    Admin messages are attributed to the staff member's profile name; other
    messages are shown as coming from the artist.
    """
    names = profile_names or {}
    lines = [f"Messages for submission {submission_id}", f"Messages: {len(messages)}"]

    if not messages:
        lines.extend(["", "No messages found for this submission."])
        return "\n".join(lines)

    lines.append("")
    for message in messages:
        timestamp = parse_timestamp(message.createdAt)
        when = f"{timestamp:%Y-%m-%d %H:%M:%S}" if timestamp is not None else str(message.createdAt)
        if message.isAdmin:
            author = names.get(message.userId or "", UNKNOWN_USER_NAME)
            lines.append(f"[{when}] {author} (admin): {message.text or ''}")
        else:
            lines.append(f"[{when}] artist: {message.text or ''}")

    return "\n".join(lines)
