"""Domain models for feedback time breakdown processing.

Row models (``Message``, ``Submission``, ``DeletedVideoLog``)
intentionally mirror only the subset of backend payload fields required for
the breakdown; their timestamps stay raw until normalization. The remaining
models are derived on every run and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

BASE_FEEDBACK_SECONDS = 5 * 60
UNKNOWN_ACTOR_ID = "unknown"


@dataclass(slots=True)
class Message:
    """Represents one chat message posted on a submission."""

    id: str
    createdAt: Optional[str]
    isAdmin: bool
    userId: Optional[str]
    text: Optional[str] = None


@dataclass(slots=True)
class Submission:
    """Represents a video submission with its artist and message history."""

    id: str
    artistId: str
    artistName: Optional[str]
    projectName: Optional[str]
    messages: List[Message] = field(default_factory=list)


@dataclass(slots=True)
class DeletedVideoLog:
    """Represents a ``video_deleted`` log entry for a removed submission."""

    artistId: str
    artistName: Optional[str]


@dataclass(slots=True)
class FeedbackEvent:
    """One admin feedback timestamp, the unit of work reconstruction.

    ``duration`` is derived: callers may seed it, but the session blocker
    overwrites it on the copies it returns.
    """

    timestamp: datetime
    subject_id: str
    subject_label: str
    actor_id: str = UNKNOWN_ACTOR_ID
    duration: int = BASE_FEEDBACK_SECONDS


@dataclass(slots=True)
class TimeBlock:
    """A contiguous work session made of merged feedback events."""

    start_time: datetime
    end_time: datetime
    feedbacks: List[FeedbackEvent]
    total_duration: int = 0


@dataclass(slots=True)
class PeriodRollup:
    """Seconds accumulated per ISO week label, ``YYYY-MM`` month and ``YYYY`` year."""

    weekly: Dict[str, int]
    monthly: Dict[str, int]
    yearly: Dict[str, int]


@dataclass(slots=True)
class NormalizedFeedback:
    """Validated feedback events plus the number of rows dropped at the boundary."""

    events: List[FeedbackEvent]
    skipped: int = 0


@dataclass(slots=True)
class ActorTimeSummary:
    """Reconstructed working time for one staff member."""

    actor_id: str
    actor_name: str
    daily_time: Dict[str, int]
    weekly_time: Dict[str, int]
    monthly_time: Dict[str, int]
    yearly_time: Dict[str, int]
    total_time: int
    daily_feedbacks: Dict[str, List[FeedbackEvent]]


@dataclass(slots=True)
class ArtistTimeSummary:
    """Per-artist time summary.

    ``total_time`` is session-accurate. ``video_time`` and ``feedback_time``
    are a fixed 70/30 estimate of that total, not measured values.
    """

    artist_id: str
    artist_name: str
    video_time: float
    feedback_time: float
    total_time: int
    submission_count: int


@dataclass(slots=True)
class TimeBreakdown:
    """Both breakdown views plus project-wide totals."""

    artists: List[ArtistTimeSummary]
    actors: List[ActorTimeSummary]
    total_project_time: int
    total_submissions: int
    total_feedbacks: int
    skipped_records: int
