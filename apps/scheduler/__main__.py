"""
Scheduler Module Entry Point

Allows execution via: python -m apps.scheduler
"""

import asyncio
import sys

from apps.scheduler.scheduler import HelpFetchScheduler
from utils.config import get_settings
from utils.logging import get_logger, setup_logging

logger = get_logger("apps.scheduler")


async def main() -> int:
    """Main entry point for scheduler."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    scheduler = HelpFetchScheduler(settings)

    try:
        return await scheduler.start()
    except Exception as e:
        logger.error("Scheduler failed", extra={"error": str(e)}, exc_info=True)
        return 1


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
