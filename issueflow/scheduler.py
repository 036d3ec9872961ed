"""Background scheduler for periodic sync"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from issueflow.config import settings
from issueflow.models.base import SessionLocal
from issueflow.services.sync_service import SyncService

logger = logging.getLogger(__name__)

JOB_ID = "sync_all_repositories"


class SyncScheduler:
    """Scheduler for periodic issue synchronization"""

    def __init__(self, interval_minutes: int | None = None, session_factory=SessionLocal):
        self.scheduler = BackgroundScheduler()
        self.interval_minutes = (
            settings.sync_interval_minutes if interval_minutes is None else interval_minutes
        )
        self.session_factory = session_factory

    def start(self):
        """Start the scheduler and register the sync job when enabled"""
        if self.interval_minutes <= 0:
            logger.info("Periodic sync disabled (SYNC_INTERVAL_MINUTES=0)")
            return

        self.scheduler.start()
        self.scheduler.add_job(
            func=self._sync_job,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            replace_existing=True,
        )
        logger.info(f"Sync scheduler started: every {self.interval_minutes} minutes")

    def stop(self):
        """Stop the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Sync scheduler stopped")

    def _sync_job(self):
        """Job function to sync all configured repositories"""
        db = self.session_factory()
        sync_service = SyncService(db)
        try:
            logger.info("Running scheduled sync")
            result = sync_service.sync_all()
            logger.info(f"Scheduled sync completed: {result.to_dict()}")
        except Exception as e:
            logger.error(f"Scheduled sync failed: {e}")
        finally:
            sync_service.close()
            db.close()


# Global scheduler instance
scheduler = SyncScheduler()
