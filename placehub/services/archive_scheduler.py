"""
Archive Scheduler - retires aged anonymous questions.

Every `interval` seconds one bulk update moves every question that is not
already archived and is older than `max_age` to status 'archived'.

The update is idempotent, so a failed sweep needs no catch-up: the next
tick re-evaluates the same condition.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from placehub.core.config import get_settings
from placehub.db.mongodb import get_collection, COLLECTIONS
from placehub.schemas.schemas import QuestionStatus

logger = logging.getLogger(__name__)


class ArchiveScheduler:
    """
    Owns one asyncio task that sweeps the questions collection on a timer.

    Usage:
        scheduler = ArchiveScheduler()
        scheduler.start()      # on app startup
        await scheduler.stop() # on app shutdown
    """

    def __init__(self, max_age_seconds: Optional[int] = None, interval_seconds: Optional[int] = None):
        settings = get_settings()
        self.max_age = timedelta(seconds=max_age_seconds if max_age_seconds is not None else settings.archive_age_seconds)
        self.interval = interval_seconds if interval_seconds is not None else settings.archive_interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self, now: Optional[datetime] = None) -> int:
        """
        Run one sweep.

        Returns:
            Number of questions archived (0 when the sweep failed)
        """
        cutoff = (now or datetime.utcnow()) - self.max_age
        collection = get_collection(COLLECTIONS["questions"])
        try:
            result = await collection.update_many(
                {"status": {"$ne": QuestionStatus.archived.value}, "created_at": {"$lt": cutoff}},
                {"$set": {"status": QuestionStatus.archived.value}}
            )
        except Exception as e:
            logger.error(f"Archive sweep failed: {e}")
            return 0

        logger.info(f"Archive sweep: {result.modified_count} question(s) archived")
        return result.modified_count

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            await self.sweep_once()

    def start(self):
        """Start the background loop. No-op if already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="archive-scheduler")
        logger.info(
            f"Archive scheduler started (every {self.interval}s, "
            f"max age {int(self.max_age.total_seconds())}s)"
        )

    async def stop(self):
        """Cancel the background loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Archive scheduler stopped")


# Singleton instance
_archive_scheduler: ArchiveScheduler = None


def get_archive_scheduler() -> ArchiveScheduler:
    """Get or create the archive scheduler (singleton pattern)"""
    global _archive_scheduler
    if _archive_scheduler is None:
        _archive_scheduler = ArchiveScheduler()
    return _archive_scheduler
