"""Issue list and workflow endpoints"""
import logging
import math
from datetime import datetime
from typing import Any, List, Optional, Type, TypeVar

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from issueflow.models import GitHubStatus, WorkflowStatus
from issueflow.models.base import get_db
from issueflow.services.issue_store import (
    InvalidTransitionError,
    IssueNotFoundError,
    IssueStore,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/issues", tags=["issues"])

E = TypeVar("E", GitHubStatus, WorkflowStatus)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class IssueResponse(_CamelModel):
    id: str
    github_number: int
    repository: str
    title: str
    description: Optional[str] = None
    status_github: GitHubStatus
    workflow_status: WorkflowStatus
    url: str
    labels: Optional[List[str]] = None
    created_at_github: datetime
    updated_at_github: datetime
    selected_context: Optional[str] = None
    prompt: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class Pagination(_CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class IssueListResponse(_CamelModel):
    issues: List[IssueResponse]
    pagination: Pagination


class StartIssueRequest(_CamelModel):
    # Any JSON value; start_issue rejects non-strings.
    selected_context: Any = None
    prompt: Optional[str] = None


def parse_enum_filter(enum_cls: Type[E], value: Optional[str]) -> Optional[E]:
    """Unknown filter values are ignored rather than rejected."""
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        logger.debug(f"Ignoring unknown {enum_cls.__name__} filter value '{value}'")
        return None


@router.get("", response_model=IssueListResponse)
def list_issues(
    repository: Optional[str] = None,
    workflow_status: Optional[str] = Query(None, alias="workflowStatus"),
    status_github: Optional[str] = Query(None, alias="statusGithub"),
    page: int = 1,
    limit: int = 20,
    db: Session = Depends(get_db),
):
    """List synced issues with optional filters and pagination"""
    page = max(page, 1)
    limit = max(limit, 1)
    try:
        issues, total = IssueStore(db).list_issues(
            repository=repository,
            workflow_status=parse_enum_filter(WorkflowStatus, workflow_status),
            status_github=parse_enum_filter(GitHubStatus, status_github),
            page=page,
            limit=limit,
        )
    except Exception:
        logger.exception("Error fetching issues")
        raise HTTPException(status_code=500, detail="Failed to fetch issues")

    return {
        "issues": issues,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit),
        },
    }


@router.get("/{issue_id}", response_model=IssueResponse)
def get_issue(issue_id: str, db: Session = Depends(get_db)):
    """Get a specific issue"""
    issue = IssueStore(db).get(issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    return issue


@router.post("/{issue_id}/start", response_model=IssueResponse)
def start_issue(
    issue_id: str,
    payload: Optional[StartIssueRequest] = Body(None),
    db: Session = Depends(get_db),
):
    """Move a pending issue into `in_process` with the selected context"""
    context = payload.selected_context if payload is not None else None
    if not isinstance(context, str) or not context:
        raise HTTPException(status_code=400, detail="selectedContext is required")

    try:
        return IssueStore(db).start(issue_id, context, payload.prompt)
    except IssueNotFoundError:
        raise HTTPException(status_code=404, detail="Issue not found")
    except InvalidTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"Error starting issue {issue_id}")
        raise HTTPException(status_code=500, detail="Failed to start issue")
