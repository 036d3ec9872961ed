"""Database models"""

from issueflow.models.base import Base
from issueflow.models.issue import GitHubStatus, Issue, WorkflowStatus

__all__ = [
    "Base",
    "Issue",
    "GitHubStatus",
    "WorkflowStatus",
]
