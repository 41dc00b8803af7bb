"""
Help Fetch Scheduler - Recurring Subprocess Execution

Re-runs the help endpoints fetch as an isolated child process immediately and
then every SCHEDULE_INTERVAL_MINUTES using APScheduler.

Features:
- Interval scheduling with an immediate first run
- Each run is its own process (own token fetch), inheriting stdout/stderr
- Overlapping runs are allowed by default; SCHEDULE_SKIP_IF_RUNNING=true skips
  a tick while a previous run is still alive
- RUN_ONCE mode for a single run that exits with the child's code
- Graceful shutdown on SIGINT/SIGTERM

Usage:
    # Scheduled mode (default)
    python -m apps.scheduler

    # Run once and exit
    RUN_ONCE=true python -m apps.scheduler
"""

import asyncio
import signal
import sys
from datetime import datetime, timezone
from typing import Optional, Sequence

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from utils.config import Settings
from utils.logging import get_logger, success

logger = get_logger(__name__)

JOB_ID = "help_fetch_job"
SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def default_command() -> list[str]:
    return [sys.executable, "-m", "apps.fetcher.help"]


class HelpFetchScheduler:
    """
    Scheduler for periodic help fetch subprocesses.

    Handles:
    - APScheduler setup and management
    - Child process spawning and exit-code logging
    - RUN_ONCE immediate execution
    - Signal handling for graceful shutdown
    """

    def __init__(self, settings: Settings, command: Optional[Sequence[str]] = None) -> None:
        """
        Initialize scheduler.

        Args:
            settings: Application settings
            command: Command to spawn per run, defaults to the help fetch module
        """
        self.settings = settings
        self.command = list(command) if command else default_command()
        self.scheduler: AsyncIOScheduler | None = None
        self.shutdown_event = asyncio.Event()
        self.running: set[asyncio.subprocess.Process] = set()
        self._watchers: set[asyncio.Task] = set()

        logger.info(
            "HelpFetchScheduler initialized",
            extra={
                "run_once": settings.RUN_ONCE,
                "interval_minutes": settings.SCHEDULE_INTERVAL_MINUTES,
                "skip_if_running": settings.SCHEDULE_SKIP_IF_RUNNING,
            },
        )

    async def spawn_run(self) -> Optional[asyncio.Task]:
        """
        Spawn one help fetch child process.

        Does not wait for the child; a watcher task logs its exit code. Spawn
        errors are logged and never propagate to the scheduler.

        Returns:
            Watcher task resolving to the child's exit code, or None if no
            child was started
        """
        if self.settings.SCHEDULE_SKIP_IF_RUNNING and self.running:
            logger.warning("Previous help fetch still running (%d), skipping this run", len(self.running))
            return None

        logger.info("Running help fetch...")

        try:
            process = await asyncio.create_subprocess_exec(*self.command)
        except OSError as e:
            logger.error("Error running help fetch: %s", e)
            return None

        self.running.add(process)
        watcher = asyncio.create_task(self._watch(process))
        self._watchers.add(watcher)
        watcher.add_done_callback(self._watchers.discard)
        return watcher

    async def _watch(self, process: asyncio.subprocess.Process) -> int:
        try:
            code = await process.wait()
        finally:
            self.running.discard(process)

        if code == 0:
            success(logger, "Help fetch completed successfully (pid=%s)", process.pid)
        else:
            logger.warning("Help fetch exited with code %s (pid=%s)", code, process.pid)
        return code

    async def wait_for_runs(self) -> None:
        """Wait for every spawned child to exit."""
        if self._watchers:
            await asyncio.gather(*self._watchers, return_exceptions=True)

    def setup_signal_handlers(self) -> None:
        """Setup handlers for graceful shutdown on SIGINT/SIGTERM.

        Registered on the running loop so a signal wakes it immediately.
        """
        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            loop.add_signal_handler(sig, self._on_signal, sig)

    def remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)

    def _on_signal(self, signum: int) -> None:
        logger.info(f"Received signal {signum}, initiating graceful shutdown")
        self.shutdown_event.set()

    async def start(self) -> int:
        """
        Start scheduler or execute once.

        In scheduled mode, runs continuously until shutdown signal.
        In RUN_ONCE mode, spawns one run and waits for it; a shutdown signal
        terminates the child.

        Returns:
            Exit code: the child's code in RUN_ONCE mode (1 if it could not
            be spawned or was interrupted), otherwise 0 after shutdown
        """
        self.setup_signal_handlers()
        try:
            if self.settings.RUN_ONCE:
                return await self._run_once()
            return await self._run_scheduled()
        finally:
            self.remove_signal_handlers()

    async def _run_once(self) -> int:
        logger.info("Running in RUN_ONCE mode")
        watcher = await self.spawn_run()
        if watcher is None:
            return 1

        shutdown = asyncio.create_task(self.shutdown_event.wait())
        done, _ = await asyncio.wait({watcher, shutdown}, return_when=asyncio.FIRST_COMPLETED)
        if watcher in done:
            shutdown.cancel()
            return watcher.result()

        logger.info("Terminating running help fetch")
        for process in list(self.running):
            process.terminate()
        await self.wait_for_runs()
        return 1

    async def _run_scheduled(self) -> int:
        logger.info("Running in scheduled mode")

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.spawn_run,
            trigger=IntervalTrigger(minutes=self.settings.SCHEDULE_INTERVAL_MINUTES),
            id=JOB_ID,
            name="Periodic Help Fetch",
            next_run_time=datetime.now(timezone.utc),
            replace_existing=True,
        )
        self.scheduler.start()

        logger.info(
            "Scheduler started - will run help fetch every %s minutes",
            self.settings.SCHEDULE_INTERVAL_MINUTES,
        )
        logger.info("Press Ctrl+C to stop")

        # Wait for shutdown signal
        await self.shutdown_event.wait()

        logger.info("Shutting down scheduler")
        self.scheduler.shutdown(wait=False)
        logger.info("Scheduler shutdown complete")
        return 0
