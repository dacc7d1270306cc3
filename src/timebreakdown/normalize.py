"""Boundary validation turning backend rows into typed feedback events.

Everything downstream of this module assumes timezone-aware UTC timestamps and
non-empty actor ids. Rows that cannot satisfy that are dropped here, one at a
time, so a single bad record never costs the rest of the batch.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from .models import FeedbackEvent, NormalizedFeedback, Submission, UNKNOWN_ACTOR_ID
from .periods import week_key

logger = logging.getLogger(__name__)

UNKNOWN_ARTIST_NAME = "Unknown Artist"
UNTITLED_PROJECT_NAME = "Untitled Project"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into a timezone-aware UTC datetime.

    Naive values are treated as UTC. Fractions of any precision are accepted,
    as PostgREST trims trailing zeros. Returns ``None`` for missing,
    unparseable or out-of-range input instead of raising.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        normalized = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def _has_calendar_week(timestamp: datetime) -> bool:
    try:
        week_key(timestamp)
    except ValueError:
        return False
    return True


def build_subject_label(artist_name: Optional[str], project_name: Optional[str]) -> str:
    """Build the ``"<artist> - <project>"`` label used to compare feedback subjects."""
    return f"{artist_name or UNKNOWN_ARTIST_NAME} - {project_name or UNTITLED_PROJECT_NAME}"


def normalize_submission_feedback(submissions: Iterable[Submission]) -> NormalizedFeedback:
    """Extract admin feedback events from submissions.

    Business logic:
    - Only admin messages count as feedback.
    - Missing ``userId`` maps to the ``"unknown"`` actor.
    - Messages with a missing, unparseable or out-of-range ``createdAt``
      are skipped, logged and counted in ``NormalizedFeedback.skipped``.
    """
    events: List[FeedbackEvent] = []
    skipped = 0

    for submission in submissions:
        label = build_subject_label(submission.artistName, submission.projectName)
        for message in submission.messages:
            if not message.isAdmin:
                continue

            timestamp = parse_timestamp(message.createdAt)
            if timestamp is None or not _has_calendar_week(timestamp):
                skipped += 1
                logger.warning(
                    "Skipping feedback message with invalid timestamp",
                    extra={
                        "submission_id": submission.id,
                        "message_id": message.id,
                        "created_at": message.createdAt,
                    },
                )
                continue

            events.append(
                FeedbackEvent(
                    timestamp=timestamp,
                    subject_id=submission.id,
                    subject_label=label,
                    actor_id=message.userId or UNKNOWN_ACTOR_ID,
                )
            )

    logger.info(
        "Normalized feedback events",
        extra={"events": len(events), "skipped": skipped},
    )

    return NormalizedFeedback(events=events, skipped=skipped)
