"""Merge a freshly fetched GitHub issue into its local row.

GitHub's closed state always wins (workflow ends); a reopen discards the
previous workflow progress; while the issue stays open, local progress is
kept. Mirrored fields are refreshed on every observation. The function is
pure: persisting the outcome is the store's job.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from issueflow.models.issue import GitHubStatus, Issue, WorkflowStatus
from issueflow.services.github_models import RemoteIssue


class SyncAction(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"


@dataclass(frozen=True)
class Reconciliation:
    action: SyncAction
    fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def workflow_status(self) -> WorkflowStatus:
        return self.fields["workflow_status"]


def initial_workflow_status(state: GitHubStatus) -> WorkflowStatus:
    return WorkflowStatus.END if state == GitHubStatus.CLOSED else WorkflowStatus.PENDING


def merge_workflow_status(
    current: WorkflowStatus, previous_state: GitHubStatus, new_state: GitHubStatus
) -> WorkflowStatus:
    """Workflow status of an existing row after observing ``new_state``."""
    if new_state == GitHubStatus.CLOSED:
        return WorkflowStatus.END
    if previous_state == GitHubStatus.CLOSED and new_state == GitHubStatus.OPEN:
        return WorkflowStatus.PENDING
    return current


def _mirrored_fields(remote: RemoteIssue) -> Dict[str, Any]:
    return {
        "title": remote.title,
        "description": remote.body,
        "labels": list(remote.labels),
        "url": remote.html_url,
        "status_github": remote.state,
        "updated_at_github": remote.updated_at,
    }


def reconcile(remote: RemoteIssue, existing: Optional[Issue]) -> Reconciliation:
    """Decide how the local row for ``remote`` should look after this sync."""
    fields = _mirrored_fields(remote)

    if existing is None:
        fields.update(
            github_number=remote.number,
            repository=remote.repository,
            created_at_github=remote.created_at,
            workflow_status=initial_workflow_status(remote.state),
        )
        return Reconciliation(SyncAction.CREATED, fields)

    fields["workflow_status"] = merge_workflow_status(
        WorkflowStatus(existing.workflow_status),
        GitHubStatus(existing.status_github),
        remote.state,
    )
    return Reconciliation(SyncAction.UPDATED, fields)
