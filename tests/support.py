"""Shared helpers for tests: in-memory database, API client and GitHub payloads."""
import unittest
from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from issueflow.config import Settings
from issueflow.models import GitHubStatus, Issue, WorkflowStatus
from issueflow.models.base import get_db, init_db
from issueflow.services.github_models import RemoteIssue


def make_session_factory():
    """Fresh in-memory SQLite database shared across threads (TestClient)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_settings(**overrides) -> Settings:
    values = {"gh_token": "test-token", "gh_repos": "octo-org/api", "services": None}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def remote_issue(number=1, repository="octo-org/api", state="open", **overrides) -> RemoteIssue:
    values = {
        "number": number,
        "repository": repository,
        "title": f"Issue {number}",
        "body": f"Body of issue {number}",
        "state": GitHubStatus(state),
        "html_url": f"https://github.com/{repository}/issues/{number}",
        "labels": ["bug"],
        "created_at": datetime(2025, 1, 1, 9, 0),
        "updated_at": datetime(2025, 1, 2, 9, 0),
    }
    values.update(overrides)
    return RemoteIssue(**values)


def github_payload(number, state="open", *, pull_request=False, repository="octo-org/api"):
    """One item as returned by the GitHub issues/search endpoints."""
    item = {
        "number": number,
        "title": f"Issue {number}",
        "body": None,
        "state": state,
        "html_url": f"https://github.com/{repository}/issues/{number}",
        "repository_url": f"https://api.github.com/repos/{repository}",
        "labels": [{"name": "bug", "color": "d73a4a"}],
        "created_at": "2025-01-01T09:00:00Z",
        "updated_at": "2025-01-02T09:00:00Z",
    }
    if pull_request:
        item["pull_request"] = {"url": f"https://api.github.com/repos/{repository}/pulls/{number}"}
    return item


class ApiTestCase(unittest.TestCase):
    """Runs the FastAPI app against a fresh in-memory database."""

    def setUp(self):
        from issueflow.main import app

        self.app = app
        self.Session = make_session_factory()

        def _get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _get_db
        self.client = TestClient(app)

    def tearDown(self):
        self.app.dependency_overrides.clear()

    def add_issue(
        self,
        number,
        *,
        repository="octo-org/api",
        status_github=GitHubStatus.OPEN,
        workflow_status=WorkflowStatus.PENDING,
        updated_at=None,
    ):
        db = self.Session()
        try:
            updated_at = updated_at or datetime(2025, 1, 1) + timedelta(minutes=number)
            issue = Issue(
                github_number=number,
                repository=repository,
                title=f"Issue {number}",
                description="Details",
                status_github=status_github,
                workflow_status=workflow_status,
                url=f"https://github.com/{repository}/issues/{number}",
                labels=["bug"],
                created_at_github=updated_at,
                updated_at_github=updated_at,
            )
            db.add(issue)
            db.commit()
            return issue.id
        finally:
            db.close()

    def load(self, issue_id):
        db = self.Session()
        try:
            return db.query(Issue).filter(Issue.id == issue_id).first()
        finally:
            db.close()
