import unittest
from unittest.mock import Mock, patch

from issueflow.scheduler import JOB_ID, SyncScheduler
from issueflow.services.sync_service import SyncConfigurationError, SyncResult


class SyncSchedulerTests(unittest.TestCase):
    def test_disabled_interval_does_not_start(self):
        sched = SyncScheduler(interval_minutes=0, session_factory=Mock())
        sched.start()

        self.assertFalse(sched.scheduler.running)
        self.assertIsNone(sched.scheduler.get_job(JOB_ID))
        sched.stop()

    def test_enabled_interval_registers_job(self):
        sched = SyncScheduler(interval_minutes=5, session_factory=Mock())
        sched.start()
        try:
            job = sched.scheduler.get_job(JOB_ID)
            self.assertIsNotNone(job)
            self.assertEqual(job.trigger.interval.total_seconds(), 300)
        finally:
            sched.stop()
        self.assertFalse(sched.scheduler.running)

    @patch("issueflow.scheduler.SyncService")
    def test_job_runs_sync_and_closes_session(self, service_cls):
        session = Mock()
        service_cls.return_value.sync_all.return_value = SyncResult(created=1)
        sched = SyncScheduler(interval_minutes=5, session_factory=lambda: session)

        sched._sync_job()

        service_cls.assert_called_once_with(session)
        service_cls.return_value.close.assert_called_once()
        session.close.assert_called_once()

    @patch("issueflow.scheduler.SyncService")
    def test_job_failure_is_logged_not_raised(self, service_cls):
        session = Mock()
        service_cls.return_value.sync_all.side_effect = SyncConfigurationError("GH_REPOS missing")
        sched = SyncScheduler(interval_minutes=5, session_factory=lambda: session)

        with self.assertLogs("issueflow.scheduler", level="ERROR") as logs:
            sched._sync_job()

        self.assertIn("GH_REPOS missing", logs.output[0])
        session.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
