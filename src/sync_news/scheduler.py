"""Recurring news sync job with a single-flight guard."""

import asyncio
import contextlib
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

from sync_news.errors import NewsSyncInProgressError
from sync_news.schedule import next_fire_time, resolve_cron_expression

logger = logging.getLogger(__name__)


@dataclass
class SyncRunState:
    """Process-wide sync state, owned by one NewsSyncScheduler."""
    in_progress: bool = False
    cron_expression: Optional[str] = None
    timezone: Optional[str] = None
    last_started_at: Optional[datetime] = None
    last_finished_at: Optional[datetime] = None
    last_new_articles: Optional[int] = None
    last_error: Optional[str] = None


class NewsSyncScheduler:
    """
    Runs ``sync_func`` on a cron schedule and on demand.

    Only one run happens at a time. A scheduled run that overlaps another is
    skipped and returns 0; a manual run raises NewsSyncInProgressError.

    Build one instance at process start and pass it to whatever needs to
    trigger a run or read the status. ``register`` and ``stop`` must be called
    from a running event loop.
    """

    def __init__(
        self,
        sync_func: Callable[[], Awaitable[int]],
        interval: Optional[str] = None,
        timezone: Optional[str] = None,
    ):
        self._sync_func = sync_func
        self.interval = interval
        self.state = SyncRunState(timezone=timezone)
        self._registered = False
        self._schedule_task: Optional[asyncio.Task] = None
        self._runs: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self.state.in_progress

    @property
    def cron_expression(self) -> Optional[str]:
        return self.state.cron_expression

    def status(self) -> dict:
        """Snapshot of the run state."""
        return asdict(self.state)

    async def sync_news_job(self) -> int:
        """Scheduled run. Never raises; returns 0 on overlap or failure."""
        return await self._run("scheduled", raise_on_error=False)

    async def trigger_news_sync(self) -> int:
        """Manual run. Raises NewsSyncInProgressError on overlap and re-raises failures."""
        return await self._run("manual", raise_on_error=True)

    async def _run(self, origin: str, raise_on_error: bool) -> int:
        if self.state.in_progress:
            logger.warning("%s sync requested while another sync is in progress.", origin.capitalize())
            if raise_on_error:
                raise NewsSyncInProgressError()
            return 0

        self.state.in_progress = True
        self.state.last_started_at = datetime.now(timezone.utc)
        started = time.monotonic()
        logger.info("Starting %s news synchronization...", origin)

        try:
            new_articles = await self._sync_func()
            self.state.last_new_articles = new_articles
            self.state.last_error = None
            logger.info(
                "Completed %s news synchronization in %dms. New articles added: %d",
                origin,
                (time.monotonic() - started) * 1000,
                new_articles,
            )
            return new_articles
        except Exception as e:
            self.state.last_error = str(e) or e.__class__.__name__
            logger.error("%s news synchronization failed: %s", origin.capitalize(), e)
            if raise_on_error:
                raise
            return 0
        finally:
            self.state.in_progress = False
            self.state.last_finished_at = datetime.now(timezone.utc)

    def register(self) -> None:
        """Start the recurring schedule and kick off one immediate run.

        A second call logs a warning and does nothing.
        """
        if self._registered:
            logger.warning("Attempted to register news sync job multiple times. Skipping.")
            return
        self._registered = True

        cron_expression = resolve_cron_expression(self.interval)
        self.state.cron_expression = cron_expression

        if cron_expression is None:
            logger.info("News sync scheduling is disabled. Manual triggers only.")
        else:
            try:
                next_fire_time(cron_expression, self._now())
            except (ValueError, KeyError) as e:
                self.state.cron_expression = None
                logger.error("Failed to schedule news sync job: %s", e)
            else:
                self._schedule_task = asyncio.create_task(self._schedule_loop(cron_expression))
                tz = self.state.timezone
                logger.info(
                    "Scheduled news sync job with cron expression \"%s\"%s.",
                    cron_expression,
                    f" (timezone: {tz})" if tz else "",
                )

        logger.info("Triggering initial news sync run.")
        self._spawn_run()

    async def stop(self) -> None:
        """Cancel the schedule and wait for in-flight runs to finish."""
        if self._schedule_task is not None:
            self._schedule_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._schedule_task
            self._schedule_task = None

        if self._runs:
            await asyncio.gather(*self._runs, return_exceptions=True)

    def _now(self) -> datetime:
        if self.state.timezone:
            return datetime.now(ZoneInfo(self.state.timezone))
        return datetime.now().astimezone()

    def _spawn_run(self) -> None:
        # Hold a reference until the run finishes
        task = asyncio.create_task(self.sync_news_job())
        self._runs.add(task)
        task.add_done_callback(self._runs.discard)

    async def _schedule_loop(self, cron_expression: str) -> None:
        fire_at = next_fire_time(cron_expression, self._now())
        while True:
            await asyncio.sleep(max((fire_at - self._now()).total_seconds(), 0))
            self._spawn_run()
            # Advance from the last tick so a clock step back cannot repeat it
            fire_at = next_fire_time(cron_expression, max(fire_at, self._now()))
