"""Services"""

from issueflow.services.github_client import GitHubClient, GitHubClientError
from issueflow.services.issue_store import IssueStore
from issueflow.services.sync_service import SyncConfigurationError, SyncResult, SyncService

__all__ = [
    "GitHubClient",
    "GitHubClientError",
    "IssueStore",
    "SyncService",
    "SyncResult",
    "SyncConfigurationError",
]
