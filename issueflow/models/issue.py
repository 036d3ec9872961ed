"""Issue model"""
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Enum, Integer, String, Text, UniqueConstraint

from issueflow.models.base import Base


def utcnow() -> datetime:
    """UTC 'now' as tz-naive datetime (consistent with GitHub parsing)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class GitHubStatus(str, enum.Enum):
    """Issue state on GitHub"""
    OPEN = "open"
    CLOSED = "closed"


class WorkflowStatus(str, enum.Enum):
    """Local workflow state, independent of GitHub"""
    PENDING = "pending"
    IN_PROCESS = "in_process"
    END = "end"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Issue(Base):
    """A GitHub issue mirrored locally, plus its workflow state"""

    __tablename__ = "issues"
    __table_args__ = (
        UniqueConstraint("github_number", "repository", name="issues_github_number_repository_key"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Natural key on GitHub
    github_number = Column(Integer, nullable=False)
    repository = Column(String, nullable=False, index=True)  # "owner/repo"

    # Mirrored from GitHub on every sync
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status_github = Column(
        Enum(GitHubStatus, name="github_status", values_callable=_enum_values),
        nullable=False,
        default=GitHubStatus.OPEN,
    )
    url = Column(String, nullable=False)
    labels = Column(JSON, nullable=True, default=list)
    created_at_github = Column(DateTime, nullable=False)
    updated_at_github = Column(DateTime, nullable=False, index=True)

    # Local state
    workflow_status = Column(
        Enum(WorkflowStatus, name="workflow_status", values_callable=_enum_values),
        nullable=False,
        default=WorkflowStatus.PENDING,
        index=True,
    )
    selected_context = Column(String, nullable=True)
    prompt = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return (
            f"<Issue(repository='{self.repository}', number={self.github_number}, "
            f"workflow_status={self.workflow_status})>"
        )
