import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from issueflow.main import app
from issueflow.models.base import get_db
from issueflow.services.sync_service import SyncConfigurationError, SyncResult


def _no_db():
    yield None


class SyncEndpointTests(unittest.TestCase):
    def setUp(self):
        app.dependency_overrides[get_db] = _no_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    @patch("issueflow.api.sync.SyncService")
    def test_sync_issues_returns_counts_and_errors(self, service_cls):
        service_cls.return_value.sync_all.return_value = SyncResult(
            created=2, updated=5, errors=["Error fetching issues from octo-org/broken: boom"]
        )

        resp = self.client.post("/api/sync-issues")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "success": True,
                "message": "Sync completed",
                "created": 2,
                "updated": 5,
                "errors": ["Error fetching issues from octo-org/broken: boom"],
            },
        )
        service_cls.return_value.close.assert_called_once()

    @patch("issueflow.api.sync.SyncService")
    def test_configuration_error_is_500(self, service_cls):
        service_cls.return_value.sync_all.side_effect = SyncConfigurationError(
            "GH_TOKEN environment variable is not set"
        )

        resp = self.client.post("/api/sync-issues")

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"success": False, "error": "GH_TOKEN environment variable is not set"}
        )
        service_cls.return_value.close.assert_called_once()

    @patch("issueflow.api.sync.SyncService")
    def test_sync_by_user(self, service_cls):
        service_cls.return_value.sync_user_assigned.return_value = SyncResult(created=1)

        resp = self.client.post("/api/sync-issues-by-user", params={"username": "octocat"})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["username"], "octocat")
        self.assertEqual((body["created"], body["updated"], body["errors"]), (1, 0, []))
        service_cls.return_value.sync_user_assigned.assert_called_once_with("octocat")

    @patch("issueflow.api.sync.SyncService")
    def test_sync_by_user_requires_username(self, service_cls):
        resp = self.client.post("/api/sync-issues-by-user")

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "error": "username is required"})
        service_cls.assert_not_called()

    @patch("issueflow.api.sync.SyncService")
    def test_unexpected_error_by_user_is_500(self, service_cls):
        service_cls.return_value.sync_user_assigned.side_effect = RuntimeError("database is locked")

        resp = self.client.post("/api/sync-issues-by-user", params={"username": "octocat"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "database is locked"})


if __name__ == "__main__":
    unittest.main()
