"""Tests for same-subject merging and session blocking."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from timebreakdown.blocks import (
    BLOCK_GAP,
    elapsed_seconds,
    group_feedbacks_into_blocks,
    merge_same_subject_feedbacks,
)
from timebreakdown.models import FeedbackEvent


def _utc(hour: int, minute: int = 0, second: int = 0, microsecond: int = 0) -> datetime:
    return datetime(2026, 1, 5, hour, minute, second, microsecond, tzinfo=timezone.utc)


def _event(timestamp: datetime, label: str = "Artist - Song", duration: int = 300) -> FeedbackEvent:
    return FeedbackEvent(
        timestamp=timestamp,
        subject_id=f"sub-{label}",
        subject_label=label,
        actor_id="admin-1",
        duration=duration,
    )


def test_merge_empty_input_returns_empty_list():
    """Verify merging no feedback yields no merged entries."""
    assert merge_same_subject_feedbacks([]) == []


def test_merge_single_event_returned_unchanged_as_copy():
    """Verify a single event is returned with its duration untouched and the input is not aliased."""
    original = _event(_utc(10), duration=123)

    merged = merge_same_subject_feedbacks([original])

    assert merged == [original]
    assert merged[0] is not original


def test_merge_same_label_within_window_advances_timestamp_and_accumulates_duration():
    """Verify same-subject feedback three minutes apart collapses into one entry at the later time."""
    events = [_event(_utc(10, 0)), _event(_utc(10, 3))]

    merged = merge_same_subject_feedbacks(events)

    assert len(merged) == 1
    assert merged[0].timestamp == _utc(10, 3)
    assert merged[0].duration == 600


def test_merge_does_not_mutate_input_events():
    """Verify the source events keep their timestamps and durations after merging."""
    events = [_event(_utc(10, 0)), _event(_utc(10, 3))]

    merge_same_subject_feedbacks(events)

    assert events[0].timestamp == _utc(10, 0)
    assert events[0].duration == 300


def test_merge_window_is_inclusive_and_identical_timestamps_merge():
    """Verify exactly five minutes and exact ties both count as within the merge window."""
    events = [_event(_utc(10, 0)), _event(_utc(10, 5)), _event(_utc(10, 5))]

    merged = merge_same_subject_feedbacks(events)

    assert len(merged) == 1
    assert merged[0].duration == 900


def test_merge_window_measured_from_advanced_timestamp():
    """Verify a chain of events each under five minutes apart keeps merging."""
    events = [_event(_utc(10, 0)), _event(_utc(10, 4)), _event(_utc(10, 8))]

    merged = merge_same_subject_feedbacks(events)

    assert len(merged) == 1
    assert merged[0].timestamp == _utc(10, 8)


def test_merge_keeps_different_labels_and_distant_events_apart():
    """Verify different subjects and same-subject gaps over five minutes stay separate."""
    events = [
        _event(_utc(10, 0), label="A - One"),
        _event(_utc(10, 1), label="B - Two"),
        _event(_utc(10, 2), label="A - One"),
        _event(_utc(10, 8), label="A - One"),
    ]

    merged = merge_same_subject_feedbacks(events)

    assert [event.subject_label for event in merged] == ["A - One", "B - Two", "A - One", "A - One"]


def test_merge_sorts_unordered_input():
    """Verify merging orders events chronologically before comparing neighbours."""
    events = [_event(_utc(10, 3)), _event(_utc(9, 0), label="Other - X"), _event(_utc(10, 0))]

    merged = merge_same_subject_feedbacks(events)

    assert [event.timestamp for event in merged] == [_utc(9, 0), _utc(10, 3)]


def test_merge_is_idempotent_and_conserves_duration():
    """Verify re-merging merged output changes nothing and total duration is preserved."""
    events = [
        _event(_utc(10, 0), duration=100),
        _event(_utc(10, 2), duration=200),
        _event(_utc(10, 3), label="B - Two", duration=50),
        _event(_utc(10, 20), duration=75),
    ]

    once = merge_same_subject_feedbacks(events)
    twice = merge_same_subject_feedbacks(once)

    assert twice == once
    assert sum(event.duration for event in once) == sum(event.duration for event in events)


def test_group_empty_input_returns_no_blocks():
    """Verify blocking no feedback yields no blocks."""
    assert group_feedbacks_into_blocks([]) == []


def test_group_merged_same_subject_pair_forms_single_base_duration_block():
    """Verify two same-subject events three minutes apart form one block of 300 seconds."""
    blocks = group_feedbacks_into_blocks([_event(_utc(10, 0)), _event(_utc(10, 3))])

    assert len(blocks) == 1
    assert len(blocks[0].feedbacks) == 1
    assert blocks[0].feedbacks[0].timestamp == _utc(10, 3)
    assert blocks[0].feedbacks[0].duration == 300
    assert blocks[0].total_duration == 300


def test_group_splits_blocks_on_gaps_over_fifteen_minutes():
    """Verify a 10 minute gap stays in a block and a 20 minute gap opens a new one."""
    events = [
        _event(_utc(10, 0), label="A - One"),
        _event(_utc(10, 10), label="B - Two"),
        _event(_utc(10, 30), label="C - Three"),
    ]

    blocks = group_feedbacks_into_blocks(events)

    assert len(blocks) == 2
    assert [feedback.duration for feedback in blocks[0].feedbacks] == [300, 600]
    assert blocks[0].total_duration == 900
    assert blocks[0].start_time == _utc(10, 0)
    assert blocks[0].end_time == _utc(10, 10)
    assert [feedback.duration for feedback in blocks[1].feedbacks] == [300]
    assert blocks[1].total_duration == 300


def test_group_gap_of_exactly_fifteen_minutes_stays_in_block():
    """Verify the block-gap threshold is inclusive."""
    events = [_event(_utc(10, 0), label="A - One"), _event(_utc(10, 15), label="B - Two")]

    blocks = group_feedbacks_into_blocks(events)

    assert len(blocks) == 1
    assert blocks[0].total_duration == 300 + 900


def test_group_invariants_hold_for_mixed_stream():
    """Verify coverage, cohesion, separation and base duration on an unordered mixed stream."""
    events = [
        _event(_utc(14, 0), label="A - One"),
        _event(_utc(9, 0), label="A - One"),
        _event(_utc(9, 2), label="A - One"),
        _event(_utc(9, 12), label="B - Two"),
        _event(_utc(9, 40), label="B - Two"),
        _event(_utc(9, 50), label="C - Three"),
        _event(_utc(14, 14), label="C - Three"),
    ]

    merged = merge_same_subject_feedbacks(events)
    blocks = group_feedbacks_into_blocks(events)

    assert sum(len(block.feedbacks) for block in blocks) == len(merged)
    for block in blocks:
        assert block.feedbacks
        assert block.feedbacks[0].duration == 300
        assert block.total_duration == sum(feedback.duration for feedback in block.feedbacks)
        for previous, current in zip(block.feedbacks, block.feedbacks[1:]):
            assert current.timestamp - previous.timestamp <= BLOCK_GAP
            assert current.duration >= 0
    for first, second in zip(blocks, blocks[1:]):
        assert second.start_time - first.end_time > BLOCK_GAP


def test_group_does_not_mutate_input_durations():
    """Verify recomputed durations live on copies, not on the caller's events."""
    events = [_event(_utc(10, 0), label="A - One", duration=1), _event(_utc(10, 10), label="B - Two", duration=1)]

    group_feedbacks_into_blocks(events)

    assert [event.duration for event in events] == [1, 1]


def test_elapsed_seconds_rounds_half_up():
    """Verify sub-second gaps round half up to whole seconds."""
    start = _utc(10, 0, 0)

    assert elapsed_seconds(start, start + timedelta(seconds=90, microseconds=500000)) == 91
    assert elapsed_seconds(start, start + timedelta(seconds=90, microseconds=499999)) == 90
    assert elapsed_seconds(start, start) == 0
