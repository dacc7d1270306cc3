"""Command-line argument parsing for the feedback time breakdown."""

from __future__ import annotations

import argparse
from datetime import date

from .report import PERIOD_RANGES


def _iso_date(value: str) -> date:
    """Parse and validate a ``YYYY-MM-DD`` CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The parsed date.

    Raises:
        argparse.ArgumentTypeError: If value is not an ISO calendar date.
    """
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a date in YYYY-MM-DD format") from exc


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the time breakdown.

    Returns:
        Parsed CLI arguments with the view, period range, optional drill-down
        user and date, optional submission id, excluded artists, Supabase URL
        override and verbosity.
    """
    parser = argparse.ArgumentParser(
        prog="feedback-time-breakdown",
        description=(
            "Reconstruct staff working time from admin feedback timestamps "
            "and report it per artist or per user."
        ),
    )

    parser.add_argument(
        "--view",
        choices=("artists", "users"),
        default="artists",
        help="Report to print (default: artists).",
    )
    parser.add_argument(
        "--range",
        dest="period_range",
        choices=PERIOD_RANGES,
        default="month",
        help="Period granularity for the users view (default: month).",
    )
    parser.add_argument(
        "--user",
        default=None,
        help="User id for a single-day drill-down (requires --date).",
    )
    parser.add_argument(
        "--date",
        type=_iso_date,
        default=None,
        help="UTC day (YYYY-MM-DD) for a single-day drill-down (requires --user).",
    )
    parser.add_argument(
        "--submission",
        default=None,
        help="Submission id whose message history to print, oldest first.",
    )
    parser.add_argument(
        "--exclude-artist",
        dest="excluded_artists",
        action="append",
        default=None,
        metavar="NAME",
        help=(
            "Artist name to leave out of the artist view; repeat for several "
            "(default: 'INTERN // Social Media')."
        ),
    )
    parser.add_argument(
        "--supabase-url",
        default=None,
        help="Supabase project URL (default: SUPABASE_URL environment variable).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress information to stderr.",
    )

    args = parser.parse_args()

    if (args.user is None) != (args.date is None):
        parser.error("--user and --date must be given together")
    if args.submission is not None and args.user is not None:
        parser.error("--submission cannot be combined with --user/--date")

    return args
