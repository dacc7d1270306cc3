"""Time breakdown views over normalized feedback events.

This module exposes the reporting operations:
- Per-actor period accessors (daily/weekly/monthly/yearly/total seconds).
- A per-day drill-down returning the reconstructed work sessions.
- Per-artist summaries with an estimated video/feedback split.
- Assembly of the full breakdown consumed by the report.

All functions are pure: they take explicit inputs and return new structures.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .blocks import group_feedbacks_into_blocks
from .config import DEFAULT_EXCLUDED_ARTISTS
from .models import (
    ActorTimeSummary,
    ArtistTimeSummary,
    DeletedVideoLog,
    FeedbackEvent,
    Submission,
    TimeBlock,
    TimeBreakdown,
)
from .normalize import UNKNOWN_ARTIST_NAME, normalize_submission_feedback
from .periods import (
    DayLike,
    aggregate_daily,
    as_date,
    day_key,
    group_events_by_day,
    rollup_from_daily,
    total_time,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_EXCLUDED_ARTISTS",
    "UNKNOWN_USER_NAME",
    "VIDEO_TIME_SHARE",
    "FEEDBACK_TIME_SHARE",
    "blocks_for_day",
    "build_actor_summaries",
    "compute_time_breakdown",
    "daily_time_for",
    "events_for_actor",
    "group_feedbacks_into_blocks",
    "monthly_time_for",
    "per_artist_summary",
    "total_time_for",
    "weekly_time_for",
    "yearly_time_for",
]

UNKNOWN_USER_NAME = "Unknown User"

# Fixed estimate, not derived from video lengths.
VIDEO_TIME_SHARE = 0.7
FEEDBACK_TIME_SHARE = 0.3


def events_for_actor(events: Iterable[FeedbackEvent], actor_id: str) -> List[FeedbackEvent]:
    return [event for event in events if event.actor_id == actor_id]


def daily_time_for(events: Iterable[FeedbackEvent], actor_id: str) -> Dict[str, int]:
    """Return reconstructed seconds per UTC day for one actor."""
    return aggregate_daily(events_for_actor(events, actor_id))


def weekly_time_for(events: Iterable[FeedbackEvent], actor_id: str) -> Dict[str, int]:
    return rollup_from_daily(daily_time_for(events, actor_id)).weekly


def monthly_time_for(events: Iterable[FeedbackEvent], actor_id: str) -> Dict[str, int]:
    return rollup_from_daily(daily_time_for(events, actor_id)).monthly


def yearly_time_for(events: Iterable[FeedbackEvent], actor_id: str) -> Dict[str, int]:
    return rollup_from_daily(daily_time_for(events, actor_id)).yearly


def total_time_for(events: Iterable[FeedbackEvent], actor_id: str) -> int:
    """Return total reconstructed seconds for one actor; ``0`` when there is no feedback."""
    return total_time(daily_time_for(events, actor_id))


def blocks_for_day(events: Iterable[FeedbackEvent], actor_id: str, day: DayLike) -> List[TimeBlock]:
    """Return the ordered work sessions of one actor on one UTC day.

    The block totals of the result add up to that day's entry in
    :func:`daily_time_for`.
    """
    key = as_date(day).isoformat()
    day_events = [event for event in events_for_actor(events, actor_id) if day_key(event.timestamp) == key]
    return group_feedbacks_into_blocks(day_events)


def build_actor_summaries(
    events: Iterable[FeedbackEvent],
    profile_names: Optional[Mapping[str, str]] = None,
) -> List[ActorTimeSummary]:
    """Build per-actor period breakdowns sorted by total time, largest first.

    Display names come from ``profile_names``; actors without a profile are
    shown as ``"Unknown User"``.
    """
    names = profile_names or {}
    events_by_actor: Dict[str, List[FeedbackEvent]] = defaultdict(list)
    for event in events:
        events_by_actor[event.actor_id].append(event)

    summaries: List[ActorTimeSummary] = []
    for actor_id, actor_events in events_by_actor.items():
        daily = aggregate_daily(actor_events)
        rollup = rollup_from_daily(daily)
        summaries.append(
            ActorTimeSummary(
                actor_id=actor_id,
                actor_name=names.get(actor_id) or UNKNOWN_USER_NAME,
                daily_time=daily,
                weekly_time=rollup.weekly,
                monthly_time=rollup.monthly,
                yearly_time=rollup.yearly,
                total_time=total_time(daily),
                daily_feedbacks=group_events_by_day(actor_events),
            )
        )

    summaries.sort(key=lambda summary: summary.total_time, reverse=True)
    return summaries


def per_artist_summary(
    submissions: Iterable[Submission],
    deleted_videos: Iterable[DeletedVideoLog] = (),
    excluded_artists: Sequence[str] = DEFAULT_EXCLUDED_ARTISTS,
    events: Optional[Iterable[FeedbackEvent]] = None,
) -> List[ArtistTimeSummary]:
    """Summarize time per artist, largest total first.

    Business logic:
    - Every submission and every deleted-video log entry counts towards
      ``submission_count``.
    - ``total_time`` is the block total over all of the artist's admin
      feedback, blocked as a single stream.
    - ``video_time`` and ``feedback_time`` are an estimate: a fixed
      ``VIDEO_TIME_SHARE``/``FEEDBACK_TIME_SHARE`` split of ``total_time``.
    - Artists whose name is in ``excluded_artists`` are left out.

    ``events`` may carry feedback already normalized from ``submissions``;
    otherwise the submissions are normalized here, skipping messages with
    invalid timestamps.
    """
    submissions = list(submissions)
    if events is None:
        events = normalize_submission_feedback(submissions).events

    excluded = set(excluded_artists)
    names: Dict[str, str] = {}
    counts: Dict[str, int] = defaultdict(int)
    artist_by_submission: Dict[str, str] = {}
    events_by_artist: Dict[str, List[FeedbackEvent]] = defaultdict(list)

    for log in deleted_videos:
        name = log.artistName or UNKNOWN_ARTIST_NAME
        if name in excluded:
            continue
        names.setdefault(log.artistId, name)
        counts[log.artistId] += 1

    for submission in submissions:
        name = submission.artistName or UNKNOWN_ARTIST_NAME
        if name in excluded:
            continue
        names.setdefault(submission.artistId, name)
        counts[submission.artistId] += 1
        artist_by_submission[submission.id] = submission.artistId

    for event in events:
        artist_id = artist_by_submission.get(event.subject_id)
        if artist_id is not None:
            events_by_artist[artist_id].append(event)

    summaries: List[ArtistTimeSummary] = []
    for artist_id, name in names.items():
        blocks = group_feedbacks_into_blocks(events_by_artist.get(artist_id, []))
        artist_total = sum(block.total_duration for block in blocks)
        summaries.append(
            ArtistTimeSummary(
                artist_id=artist_id,
                artist_name=name,
                video_time=artist_total * VIDEO_TIME_SHARE,
                feedback_time=artist_total * FEEDBACK_TIME_SHARE,
                total_time=artist_total,
                submission_count=counts[artist_id],
            )
        )

    summaries.sort(key=lambda summary: summary.total_time, reverse=True)
    return summaries


def compute_time_breakdown(
    submissions: Sequence[Submission],
    profile_names: Optional[Mapping[str, str]] = None,
    deleted_videos: Sequence[DeletedVideoLog] = (),
    excluded_artists: Sequence[str] = DEFAULT_EXCLUDED_ARTISTS,
) -> TimeBreakdown:
    """Build both breakdown views and the project-wide totals.

    The actor view includes every admin feedback event; the artist view
    honors ``excluded_artists``. ``total_feedbacks`` counts validated admin
    feedback events and ``skipped_records`` the messages dropped for invalid
    timestamps.
    """
    feedback = normalize_submission_feedback(submissions)

    artists = per_artist_summary(submissions, deleted_videos, excluded_artists, events=feedback.events)
    actors = build_actor_summaries(feedback.events, profile_names)

    breakdown = TimeBreakdown(
        artists=artists,
        actors=actors,
        total_project_time=sum(artist.total_time for artist in artists),
        total_submissions=sum(artist.submission_count for artist in artists),
        total_feedbacks=len(feedback.events),
        skipped_records=feedback.skipped,
    )

    logger.info(
        "Computed time breakdown",
        extra={
            "artists": len(artists),
            "actors": len(actors),
            "submissions": breakdown.total_submissions,
            "feedbacks": breakdown.total_feedbacks,
            "skipped_records": breakdown.skipped_records,
        },
    )

    return breakdown
