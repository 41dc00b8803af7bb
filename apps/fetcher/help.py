"""
Help Endpoints Fetch - API Documentation Metadata

Usage:
    python -m apps.fetcher.help

Also the command spawned by the recurring scheduler (apps.scheduler).
"""

import asyncio

from apps.fetcher.jobs import help_jobs
from apps.fetcher.runner import run_fetch
from utils.config import get_settings
from utils.logging import setup_logging


async def main() -> None:
    """Main entry point for the help endpoints fetch. Takes no arguments."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    await run_fetch(settings, "help endpoints", lambda: help_jobs(settings))


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
