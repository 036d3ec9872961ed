"""Issue synchronization service"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from issueflow.config import Settings, settings
from issueflow.services.github_client import GitHubClient, InvalidIssueHandler
from issueflow.services.github_models import RemoteIssue
from issueflow.services.issue_store import IssueStore
from issueflow.services.reconcile import SyncAction

logger = logging.getLogger(__name__)


class SyncConfigurationError(RuntimeError):
    """Required sync configuration (token, repositories) is missing"""


@dataclass
class SyncResult:
    created: int = 0
    updated: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SyncService:
    """Service for mirroring GitHub issues into the local store"""

    def __init__(
        self,
        db: Session,
        config: Optional[Settings] = None,
        client: Optional[GitHubClient] = None,
    ):
        self.db = db
        self.config = config or settings
        self.store = IssueStore(db)
        self._client = client
        self._owns_client = client is None

    def _require_token(self) -> str:
        if not self.config.gh_token:
            raise SyncConfigurationError("GH_TOKEN environment variable is not set")
        return self.config.gh_token

    def _get_client(self) -> GitHubClient:
        if self._client is None:
            self._client = GitHubClient(
                self._require_token(),
                base_url=self.config.github_api_url,
                timeout=self.config.github_timeout_seconds,
            )
        return self._client

    def close(self) -> None:
        """Close the GitHub client if this service created it"""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    @staticmethod
    def _split_repository(full_name: str) -> Optional[Tuple[str, str]]:
        owner, _, repo = full_name.partition("/")
        if not owner or not repo or "/" in repo:
            return None
        return owner, repo

    @staticmethod
    def _invalid_issue_recorder(source: str, result: SyncResult) -> InvalidIssueHandler:
        def record(item: Any, error: Exception) -> None:
            number = item.get("number", "?") if isinstance(item, dict) else "?"
            result.errors.append(f"Error syncing issue #{number} from {source}: {error}")

        return record

    def _sync_issues(self, issues: Iterable[RemoteIssue], result: SyncResult) -> None:
        """Upsert each issue independently; failures are recorded, not raised."""
        for issue in issues:
            try:
                action = self.store.upsert(issue)
            except Exception as e:
                # Keep the session usable for the rest of the run.
                self.db.rollback()
                msg = f"Error syncing issue #{issue.number} from {issue.repository}: {e}"
                logger.error(msg)
                result.errors.append(msg)
                continue

            if action == SyncAction.CREATED:
                result.created += 1
            else:
                result.updated += 1

    def _log_summary(self, result: SyncResult) -> None:
        logger.info(f"Sync complete: {result.created} created, {result.updated} updated")
        if result.errors:
            logger.warning(f"{len(result.errors)} errors occurred during sync")

    def sync_all(self) -> SyncResult:
        """Sync every configured repository.

        Raises:
            SyncConfigurationError: If the token or the repository list is missing.
        """
        self._require_token()
        repositories = self.config.repository_list
        if not repositories:
            raise SyncConfigurationError("GH_REPOS environment variable is not set")

        client = self._get_client()
        result = SyncResult()

        for full_name in repositories:
            parts = self._split_repository(full_name)
            if parts is None:
                msg = f"Invalid repo format: {full_name}"
                logger.warning(msg)
                result.errors.append(msg)
                continue

            owner, repo = parts
            logger.info(f"Syncing {full_name}...")
            try:
                issues = client.fetch_repo_issues(
                    owner, repo, on_invalid=self._invalid_issue_recorder(full_name, result)
                )
            except Exception as e:
                msg = f"Error fetching issues from {full_name}: {e}"
                logger.error(msg)
                result.errors.append(msg)
                continue

            self._sync_issues(issues, result)
            logger.info(f"Synced {full_name} ({len(issues)} issues)")

        self._log_summary(result)
        return result

    def sync_user_assigned(self, username: str) -> SyncResult:
        """Sync open issues assigned to ``username``, whatever their repository.

        Raises:
            SyncConfigurationError: If the token is missing.
            ValueError: If ``username`` is empty.
        """
        self._require_token()
        username = (username or "").strip()
        if not username:
            raise ValueError("username is required")

        client = self._get_client()
        result = SyncResult()

        logger.info(f"Searching issues assigned to {username}...")
        try:
            issues = client.fetch_user_assigned_issues(
                username, on_invalid=self._invalid_issue_recorder(f"search for {username}", result)
            )
        except Exception as e:
            msg = f"Error fetching issues for user {username}: {e}"
            logger.error(msg)
            result.errors.append(msg)
            return result

        self._sync_issues(issues, result)
        self._log_summary(result)
        return result
