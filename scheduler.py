"""
Scheduler - unattended runs of every task

Job Schedule:
1. Fear & Greed Index: every FEAR_GREED_INTERVAL_HOURS (default 4h)
2. Altcoin Season Score: every ALTCOIN_SEASON_INTERVAL_HOURS (default 6h)
3. Altcoin Season snapshot: every ALTCOIN_SEASON_INTERVAL_HOURS
4. News Monitor: every NEWS_MONITOR_INTERVAL_MINUTES (default 30m)

Every job uses the fixed cron browser session config.

Usage:
    python scheduler.py              # Run scheduler daemon
    python scheduler.py --once       # Run every task once and exit
"""
import asyncio
import signal
import sys
from datetime import datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from browser import BrowserSessionConfig
from config import settings, ensure_directories
from constants import TaskName
from utils import init_logging


class CryptoIndexScheduler:
    """Scheduler for the index, snapshot and news tasks."""

    def __init__(self, session_config: BrowserSessionConfig = None):
        self.scheduler = AsyncIOScheduler()
        self.session_config = session_config or BrowserSessionConfig.cron()
        self._last_exit_codes: dict[str, int] = {}

    def setup(self):
        """Setup scheduled jobs."""
        ensure_directories()

        # Job 1: Fear & Greed Index
        self.scheduler.add_job(
            self.run_fear_greed,
            IntervalTrigger(hours=settings.FEAR_GREED_INTERVAL_HOURS),
            id=TaskName.FEAR_GREED.value,
            name="Fear & Greed Index",
            replace_existing=True,
            max_instances=1,
            next_run_time=datetime.now() + timedelta(minutes=1)
        )

        # Job 2: Altcoin Season Score
        self.scheduler.add_job(
            self.run_altcoin_season_score,
            IntervalTrigger(hours=settings.ALTCOIN_SEASON_INTERVAL_HOURS),
            id=TaskName.ALTCOIN_SEASON_SCORE.value,
            name="Altcoin Season Score",
            replace_existing=True,
            max_instances=1,
            next_run_time=datetime.now() + timedelta(minutes=10)
        )

        # Job 3: Altcoin Season top-100 snapshot
        self.scheduler.add_job(
            self.run_altcoin_season,
            IntervalTrigger(hours=settings.ALTCOIN_SEASON_INTERVAL_HOURS),
            id=TaskName.ALTCOIN_SEASON.value,
            name="Altcoin Season Snapshot",
            replace_existing=True,
            max_instances=1,
            next_run_time=datetime.now() + timedelta(minutes=20)
        )

        # Job 4: News Monitor
        self.scheduler.add_job(
            self.run_news_monitor,
            IntervalTrigger(minutes=settings.NEWS_MONITOR_INTERVAL_MINUTES),
            id=TaskName.NEWS_MONITOR.value,
            name="News Monitor",
            replace_existing=True,
            max_instances=1
        )

        logger.info(f"Scheduler setup complete with {len(self.scheduler.get_jobs())} jobs")
        self._log_schedule()

    def _log_schedule(self):
        """Log current job schedule."""
        jobs = self.scheduler.get_jobs()
        logger.info(f"Scheduled jobs ({len(jobs)}):")
        for job in jobs:
            logger.info(f"  - {job.name}: {job.trigger}")

    async def _run_task(self, task: TaskName, runner) -> bool:
        logger.info(f"Starting {task.value}...")
        try:
            code = await runner(self.session_config)
        except Exception as e:
            logger.exception(f"{task.value} job failed: {e}")
            code = 1

        self._last_exit_codes[task.value] = code
        if code == 0:
            logger.info(f"{task.value} complete")
        else:
            logger.warning(f"{task.value} exited with code {code}")
        return code == 0

    async def run_fear_greed(self) -> bool:
        from tasks.fear_greed import run
        return await self._run_task(TaskName.FEAR_GREED, run)

    async def run_altcoin_season_score(self) -> bool:
        from tasks.altcoin_season_score import run
        return await self._run_task(TaskName.ALTCOIN_SEASON_SCORE, run)

    async def run_altcoin_season(self) -> bool:
        from tasks.altcoin_season import run
        return await self._run_task(TaskName.ALTCOIN_SEASON, run)

    async def run_news_monitor(self) -> bool:
        from tasks.news_monitor import run
        return await self._run_task(TaskName.NEWS_MONITOR, run)

    async def run_once(self) -> bool:
        """Run every task once, in order. True when all succeeded."""
        ensure_directories()
        logger.info("Running all tasks once...")

        results = [
            await self.run_fear_greed(),
            await self.run_altcoin_season_score(),
            await self.run_altcoin_season(),
            await self.run_news_monitor(),
        ]

        if all(results):
            logger.info("All tasks completed successfully")
        else:
            failed = [name for name, code in self._last_exit_codes.items() if code != 0]
            logger.error(f"Failed tasks: {', '.join(failed)}")
        return all(results)

    def start(self):
        """Start the scheduler. Needs a running event loop."""
        self.setup()
        self.scheduler.start()
        logger.info("Scheduler started - Press Ctrl+C to stop")

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


async def run_scheduler():
    """Run the scheduler until SIGINT or SIGTERM."""
    scheduler = CryptoIndexScheduler()
    scheduler.start()

    stop_event = asyncio.Event()

    # Handle graceful shutdown
    def shutdown():
        logger.info("Received shutdown signal")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown)

    try:
        await stop_event.wait()
    finally:
        scheduler.stop()


def main():
    """Main entry point with CLI arguments."""
    import argparse

    parser = argparse.ArgumentParser(description="Crypto Market Index Scheduler")
    parser.add_argument("--once", action="store_true", help="Run every task once and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    # Configure logging
    if args.verbose:
        settings.LOG_LEVEL = "DEBUG"
    init_logging(app_name="scheduler")

    if args.once:
        result = asyncio.run(CryptoIndexScheduler().run_once())
        sys.exit(0 if result else 1)
    else:
        # Run as daemon
        asyncio.run(run_scheduler())


if __name__ == "__main__":
    main()
