"""
Fetch Runner - One-shot Fan-out/Fan-in Execution

Fetches a single token, runs every job concurrently, and waits for all of them
to settle before logging a per-job summary. A failing job never cancels or
short-circuits its siblings.

Usage:
    runner = FetchRunner(settings)
    runner.check_credentials()
    outcomes = await runner.run(help_jobs(settings))
"""

import asyncio
import sys
from typing import Callable, Optional, Sequence

import httpx

from apps.fetcher.jobs import FetchJob, run_job
from utils.config import Settings
from utils.http import (
    ApiClient,
    AuthenticationError,
    Authenticator,
    ConfigurationError,
    build_async_client,
)
from utils.logging import get_logger, success
from utils.schemas import JobOutcome
from utils.storage import OutputWriter

logger = get_logger(__name__)


class FetchRunner:
    """
    Runs a set of fetch jobs against one token.

    Handles:
    - Credential precondition check
    - HTTP client lifecycle
    - All-settle concurrent execution
    - Result summary logging
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize runner.

        Args:
            settings: Application settings
            transport: Optional httpx transport override
        """
        self.settings = settings
        self.transport = transport
        self.writer = OutputWriter(settings.OUTPUT_DIR)

    def check_credentials(self) -> None:
        """
        Ensure required credentials are configured.

        Raises:
            ConfigurationError: If any credential variable is missing or blank
        """
        missing = self.settings.missing_credentials()
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {' and/or '.join(missing)}"
            )

    async def run(self, jobs: Sequence[FetchJob]) -> list[JobOutcome]:
        """
        Authenticate once, then run all jobs concurrently.

        Args:
            jobs: Jobs to execute

        Returns:
            One outcome per job, in job order

        Raises:
            AuthenticationError: If the token exchange fails
        """
        async with build_async_client(self.settings, transport=self.transport) as client:
            token = await Authenticator(self.settings, client).get_token()
            api = ApiClient(self.settings, client)

            results = await asyncio.gather(
                *(run_job(job, api, token, self.writer) for job in jobs),
                return_exceptions=True,
            )

        outcomes = [
            result if isinstance(result, JobOutcome) else JobOutcome.failure(job.kind, job.label, result)
            for job, result in zip(jobs, results)
        ]

        self.log_summary(outcomes)
        return outcomes

    @staticmethod
    def log_summary(outcomes: Sequence[JobOutcome]) -> None:
        """Log per-job status followed by the errors of failed jobs."""
        logger.info("=== FETCH RESULTS ===")
        for outcome in outcomes:
            logger.info("%s: %s", outcome.label, "✅ Success" if outcome.ok else "❌ Failed")

        for outcome in outcomes:
            if not outcome.ok:
                logger.error("%s Error: %s", outcome.label, outcome.error)

        succeeded = sum(1 for outcome in outcomes if outcome.ok)
        success(
            logger,
            "Script completed! (%d succeeded, %d failed)",
            succeeded,
            len(outcomes) - succeeded,
        )


async def run_fetch(
    settings: Settings,
    description: str,
    build_jobs: Callable[[], list[FetchJob]],
) -> list[JobOutcome]:
    """
    Shared entry-point body for the fetch scripts.

    Exits the process with code 1 on missing credentials or a failed token
    exchange; returns normally (exit 0) even when individual jobs fail.

    Args:
        settings: Application settings
        description: What is being fetched, for the start-up log line
        build_jobs: Called after the credential check to build the job list

    Returns:
        Job outcomes
    """
    logger.info("Starting AccessPlanIt %s fetch script...", description)

    runner = FetchRunner(settings)

    try:
        runner.check_credentials()
    except ConfigurationError as e:
        logger.error("%s", e)
        logger.error("Create a .env file with these values")
        sys.exit(1)

    try:
        return await runner.run(build_jobs())
    except Exception as e:
        logger.error("Script failed: %s", e, exc_info=not isinstance(e, AuthenticationError))
        sys.exit(1)
