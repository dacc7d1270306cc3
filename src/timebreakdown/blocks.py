"""Session reconstruction from feedback timestamps.

Two thresholds drive the reconstruction:
- Feedback on the same subject within ``MERGE_WINDOW`` of the previous merged
  entry collapses into that entry (repeated corrections to one video).
- Merged feedback within ``BLOCK_GAP`` of the previous one extends the current
  work session; a longer pause opens a new session.

Within a session the first feedback is credited ``BASE_FEEDBACK_SECONDS`` and
each later feedback the real elapsed time since its predecessor.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, List

from .models import BASE_FEEDBACK_SECONDS, FeedbackEvent, TimeBlock

logger = logging.getLogger(__name__)

MERGE_WINDOW = timedelta(minutes=5)
BLOCK_GAP = timedelta(minutes=15)


def _sorted_copies(events: Iterable[FeedbackEvent]) -> List[FeedbackEvent]:
    return sorted((replace(event) for event in events), key=lambda event: event.timestamp)


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Return whole seconds between two instants, rounding halves up."""
    return int(math.floor((end - start).total_seconds() + 0.5))


def merge_same_subject_feedbacks(events: Iterable[FeedbackEvent]) -> List[FeedbackEvent]:
    """Collapse consecutive same-subject feedback within the merge window.

    Events are sorted by timestamp first. An event is absorbed into the last
    merged entry when both share ``subject_label`` and the event is at most
    ``MERGE_WINDOW`` after that entry's (possibly advanced) timestamp. The
    absorbing entry moves to the event's timestamp and accumulates its duration.

    The input is never mutated; the result holds copies in chronological order.
    """
    merged: List[FeedbackEvent] = []

    for event in _sorted_copies(events):
        if merged:
            last = merged[-1]
            if (
                last.subject_label == event.subject_label
                and event.timestamp - last.timestamp <= MERGE_WINDOW
            ):
                last.timestamp = event.timestamp
                last.duration += event.duration
                continue

        merged.append(event)

    return merged


def _assign_durations(block: TimeBlock) -> None:
    total = 0
    for index, feedback in enumerate(block.feedbacks):
        if index == 0:
            feedback.duration = BASE_FEEDBACK_SECONDS
        else:
            feedback.duration = elapsed_seconds(block.feedbacks[index - 1].timestamp, feedback.timestamp)
        total += feedback.duration
    block.total_duration = total


def group_feedbacks_into_blocks(events: Iterable[FeedbackEvent]) -> List[TimeBlock]:
    """Group feedback events into work-session blocks with computed durations.

    Business logic:
    - Merge same-subject feedback (:func:`merge_same_subject_feedbacks`).
    - Walk merged entries in time order; a gap above ``BLOCK_GAP`` from the
      current block's ``end_time`` closes it and opens a new block.
    - First feedback in a block is credited ``BASE_FEEDBACK_SECONDS``; every
      later feedback is credited the rounded seconds since its predecessor.
    - ``total_duration`` is the sum of the block's feedback durations.

    Returns an empty list for empty input.
    """
    merged = sorted(merge_same_subject_feedbacks(events), key=lambda event: event.timestamp)
    blocks: List[TimeBlock] = []

    for feedback in merged:
        if blocks and feedback.timestamp - blocks[-1].end_time <= BLOCK_GAP:
            current = blocks[-1]
            current.feedbacks.append(feedback)
            current.end_time = feedback.timestamp
            continue

        blocks.append(
            TimeBlock(
                start_time=feedback.timestamp,
                end_time=feedback.timestamp,
                feedbacks=[feedback],
            )
        )

    for block in blocks:
        _assign_durations(block)

    logger.debug(
        "Grouped feedback into blocks",
        extra={"merged_feedbacks": len(merged), "blocks": len(blocks)},
    )

    return blocks
