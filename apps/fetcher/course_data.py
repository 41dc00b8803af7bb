"""
Course Data Fetch - Course Templates and Course Dates

Usage:
    python -m apps.fetcher.course_data
    python -m apps.fetcher.course_data --limit 25

The limit defaults to FETCH_LIMIT (10). Values that are not positive integers
are rejected before any network activity.
"""

import argparse
import asyncio
from typing import Optional, Sequence

from apps.fetcher.jobs import course_data_jobs
from apps.fetcher.runner import run_fetch
from utils.config import get_settings
from utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def parse_limit(value: str) -> int:
    """argparse type for --limit: a positive integer."""
    try:
        limit = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid limit {value!r}: expected a positive integer")
    if limit < 1:
        raise argparse.ArgumentTypeError(f"invalid limit {value!r}: must be at least 1")
    return limit


def build_parser(default_limit: int) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="planit-fetch-courses",
        description="Fetch AccessPlanIt course templates and course dates to JSON files.",
    )
    parser.add_argument(
        "--limit",
        type=parse_limit,
        default=default_limit,
        help=f"maximum records per endpoint (default: {default_limit})",
    )
    return parser


async def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the course data fetch."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    args = build_parser(settings.FETCH_LIMIT).parse_args(argv)

    def build_jobs():
        logger.info("Using limit: %d", args.limit)
        return course_data_jobs(settings, args.limit)

    await run_fetch(settings, "course data", build_jobs)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
