"""Persistence of mirrored issues"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from issueflow.models.issue import GitHubStatus, Issue, WorkflowStatus
from issueflow.services.github_models import RemoteIssue
from issueflow.services.reconcile import Reconciliation, SyncAction, reconcile

logger = logging.getLogger(__name__)


class IssueNotFoundError(LookupError):
    pass


class InvalidTransitionError(ValueError):
    pass


# Workflow statuses sort in lifecycle order, not alphabetically.
_WORKFLOW_ORDER = case(
    (Issue.workflow_status == WorkflowStatus.PENDING, 0),
    (Issue.workflow_status == WorkflowStatus.IN_PROCESS, 1),
    else_=2,
)


class IssueStore:
    """Reads and writes `issues` rows; one instance per session"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, issue_id: str) -> Optional[Issue]:
        return self.db.query(Issue).filter(Issue.id == issue_id).first()

    def find_by_natural_key(
        self, github_number: int, repository: str, *, for_update: bool = False
    ) -> Optional[Issue]:
        query = self.db.query(Issue).filter(
            Issue.github_number == github_number,
            Issue.repository == repository,
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def _apply(outcome: Reconciliation, existing: Optional[Issue]) -> Issue:
        if existing is None:
            return Issue(**outcome.fields)
        for key, value in outcome.fields.items():
            setattr(existing, key, value)
        return existing

    def upsert(self, remote: RemoteIssue) -> SyncAction:
        """Create or update the row for ``remote`` keyed on (number, repository).

        If another writer inserts the same issue between our read and our
        insert, the unique key rejects the duplicate and the remote snapshot
        is merged into the winning row instead.
        """
        existing = self.find_by_natural_key(remote.number, remote.repository, for_update=True)
        outcome = reconcile(remote, existing)
        try:
            self.db.add(self._apply(outcome, existing))
            self.db.commit()
            return outcome.action
        except IntegrityError:
            self.db.rollback()
            if existing is not None:
                raise
            logger.info(
                f"Issue #{remote.number} in {remote.repository} was created concurrently; updating"
            )

        existing = self.find_by_natural_key(remote.number, remote.repository, for_update=True)
        if existing is None:
            raise RuntimeError(
                f"Issue #{remote.number} in {remote.repository} conflicted but could not be re-read"
            )
        outcome = reconcile(remote, existing)
        self._apply(outcome, existing)
        self.db.commit()
        return outcome.action

    def list_issues(
        self,
        repository: Optional[str] = None,
        workflow_status: Optional[WorkflowStatus] = None,
        status_github: Optional[GitHubStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Issue], int]:
        """Return one page of issues and the total number of matches."""
        query = self.db.query(Issue)
        if repository:
            query = query.filter(Issue.repository == repository)
        if workflow_status is not None:
            query = query.filter(Issue.workflow_status == workflow_status)
        if status_github is not None:
            query = query.filter(Issue.status_github == status_github)

        total = query.count()
        issues = (
            query.order_by(_WORKFLOW_ORDER, Issue.updated_at_github.desc(), Issue.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return issues, total

    def start(self, issue_id: str, selected_context: str, prompt: Optional[str] = None) -> Issue:
        """Move a pending, open issue into `in_process` with the chosen context."""
        issue = self.get(issue_id)
        if issue is None:
            raise IssueNotFoundError(f"Issue {issue_id} not found")
        if issue.status_github != GitHubStatus.OPEN:
            raise InvalidTransitionError("Cannot start a closed issue")
        if issue.workflow_status != WorkflowStatus.PENDING:
            raise InvalidTransitionError("Issue is already in process or ended")

        # Conditional on the state checked above.
        updated = (
            self.db.query(Issue)
            .filter(
                Issue.id == issue_id,
                Issue.status_github == GitHubStatus.OPEN,
                Issue.workflow_status == WorkflowStatus.PENDING,
            )
            .update(
                {
                    Issue.selected_context: selected_context,
                    Issue.prompt: prompt or None,
                    Issue.workflow_status: WorkflowStatus.IN_PROCESS,
                },
                synchronize_session=False,
            )
        )
        if updated == 0:
            self.db.rollback()
            raise InvalidTransitionError("Issue is already in process or ended")

        self.db.commit()
        self.db.refresh(issue)
        logger.info(f"Started issue #{issue.github_number} in {issue.repository} ({selected_context})")
        return issue
