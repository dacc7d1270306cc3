"""Calendar period keys and rollups for reconstructed working time.

Day buckets use the UTC calendar date of each feedback timestamp. Week buckets
follow ISO-8601 (Monday start, week 1 contains the year's first Thursday) and
are labelled ``"Week<N> dd.mm.yyyy - dd.mm.yyyy"`` with the Monday to Sunday
range of that ISO week. Month and year buckets use the day's calendar month
and year.
"""

from __future__ import annotations

import re
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from .blocks import group_feedbacks_into_blocks
from .models import FeedbackEvent, PeriodRollup

_WEEK_KEY_PATTERN = re.compile(r"^Week\d+ (\d{2})\.(\d{2})\.(\d{4}) - \d{2}\.\d{2}\.\d{4}$")

DayLike = Union[date, str]


def as_date(day: DayLike) -> date:
    if isinstance(day, datetime):
        return day.astimezone(timezone.utc).date()
    if isinstance(day, date):
        return day
    return date.fromisoformat(day)


def _format_day(day: date) -> str:
    return f"{day.day:02d}.{day.month:02d}.{day.year}"


def day_key(timestamp: datetime) -> str:
    """Return the ``YYYY-MM-DD`` key of the UTC day containing ``timestamp``."""
    return timestamp.astimezone(timezone.utc).date().isoformat()


def week_key(day: DayLike) -> str:
    """Return the ISO week label for ``day``, e.g. ``"Week1 30.12.2024 - 05.01.2025"``.

    Raises:
        ValueError: If the Sunday of ``day``'s ISO week lies past ``date.max``.
    """
    current = as_date(day)
    if (date.max - current).days < 6 - current.weekday():
        raise ValueError(f"ISO week of {current.isoformat()} extends past {date.max.isoformat()}")
    week_number = current.isocalendar()[1]
    monday = current - timedelta(days=current.weekday())
    sunday = monday + timedelta(days=6)
    return f"Week{week_number} {_format_day(monday)} - {_format_day(sunday)}"


def month_key(day: DayLike) -> str:
    current = as_date(day)
    return f"{current.year:04d}-{current.month:02d}"


def year_key(day: DayLike) -> str:
    return f"{as_date(day).year:04d}"


def group_events_by_day(events: Iterable[FeedbackEvent]) -> Dict[str, List[FeedbackEvent]]:
    """Bucket events by UTC day key, preserving input order inside each bucket."""
    grouped: Dict[str, List[FeedbackEvent]] = defaultdict(list)
    for event in events:
        grouped[day_key(event.timestamp)].append(event)
    return dict(grouped)


def aggregate_daily(events: Iterable[FeedbackEvent]) -> Dict[str, int]:
    """Reconstruct working seconds per UTC day.

    Each day's events are blocked independently, so a session never spans
    midnight. Days without events are absent from the result.
    """
    daily: Dict[str, int] = {}
    for key, day_events in group_events_by_day(events).items():
        blocks = group_feedbacks_into_blocks(day_events)
        daily[key] = sum(block.total_duration for block in blocks)
    return daily


def rollup_from_daily(daily: Mapping[str, int]) -> PeriodRollup:
    """Accumulate daily seconds into exactly one week, month and year bucket each."""
    weekly: Dict[str, int] = defaultdict(int)
    monthly: Dict[str, int] = defaultdict(int)
    yearly: Dict[str, int] = defaultdict(int)

    for key, seconds in daily.items():
        current = date.fromisoformat(key)
        weekly[week_key(current)] += seconds
        monthly[month_key(current)] += seconds
        yearly[year_key(current)] += seconds

    return PeriodRollup(weekly=dict(weekly), monthly=dict(monthly), yearly=dict(yearly))


def total_time(daily: Mapping[str, int]) -> int:
    return sum(daily.values())


def period_start(key: str) -> date:
    """Parse any period key (day, ISO week label, month, year) to its first day.

    Raises:
        ValueError: If ``key`` matches none of the period formats.
    """
    match = _WEEK_KEY_PATTERN.match(key)
    if match:
        day, month, year = (int(part) for part in match.groups())
        return date(year, month, day)

    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", key):
        return date.fromisoformat(key)
    if re.fullmatch(r"\d{4}-\d{2}", key):
        year, month = key.split("-")
        return date(int(year), int(month), 1)
    if re.fullmatch(r"\d{4}", key):
        return date(int(key), 1, 1)

    raise ValueError(f"Unrecognized period key: {key!r}")


def sort_periods_desc(bucket: Mapping[str, int]) -> List[Tuple[str, int]]:
    """Return ``(period, seconds)`` pairs ordered newest period first."""
    return sorted(bucket.items(), key=lambda item: period_start(item[0]), reverse=True)
