"""Entry point wiring configuration, data retrieval and the time breakdown report."""

from __future__ import annotations

import logging
import sys

from .breakdown import blocks_for_day, compute_time_breakdown
from .cli import parse_args
from .config import load_config
from .errors import ApiError, AuthenticationError, ConfigurationError, DataValidationError
from .normalize import normalize_submission_feedback
from .report import generate_artist_report, generate_day_report, generate_message_report, generate_user_report
from .supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_AUTHENTICATION_ERROR = 3
EXIT_API_ERROR = 4
EXIT_DATA_VALIDATION_ERROR = 5


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def orchestrate_time_breakdown() -> int:
    """Run the end-to-end time breakdown and return a process exit code.

    Exit codes: ``0`` success, ``1`` unexpected error, ``2`` configuration
    error, ``3`` authentication error, ``4`` API error, ``5`` data
    validation error.
    """
    try:
        args = parse_args()
        _configure_logging(args.verbose)

        config = load_config(supabase_url=args.supabase_url, excluded_artists=args.excluded_artists)
        client = SupabaseClient(config=config)

        if args.submission is not None:
            print(f"Fetching messages from {config.supabase_url}...")
            messages = client.list_messages(args.submission)
            profile_names = client.list_profiles()
            print(generate_message_report(args.submission, messages, profile_names))
            return EXIT_OK

        print(f"Fetching feedback data from {config.supabase_url}...")
        submissions = client.list_submissions()
        profile_names = client.list_profiles()

        if args.user is not None:
            feedback = normalize_submission_feedback(submissions)
            blocks = blocks_for_day(feedback.events, args.user, args.date)
            actor_name = profile_names.get(args.user, args.user)
            print(generate_day_report(actor_name, args.date.isoformat(), blocks))
            return EXIT_OK

        deleted_videos = client.list_deleted_video_logs()
        breakdown = compute_time_breakdown(
            submissions=submissions,
            profile_names=profile_names,
            deleted_videos=deleted_videos,
            excluded_artists=config.excluded_artists,
        )

        if args.view == "users":
            print(generate_user_report(breakdown, args.period_range))
        else:
            print(generate_artist_report(breakdown))

        return EXIT_OK
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except AuthenticationError as exc:
        logger.error("Authentication error: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION_ERROR
    except ApiError as exc:
        logger.error("Could not load data: %s", exc)
        print(f"ERROR: Could not load data: {exc}", file=sys.stderr)
        return EXIT_API_ERROR
    except DataValidationError as exc:
        logger.error("Data validation error: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_DATA_VALIDATION_ERROR
    except Exception:
        logger.exception("Unexpected error while generating the time breakdown")
        print("ERROR: Unexpected error while generating the time breakdown.", file=sys.stderr)
        return EXIT_UNEXPECTED_ERROR


def main() -> None:
    sys.exit(orchestrate_time_breakdown())


if __name__ == "__main__":
    main()
