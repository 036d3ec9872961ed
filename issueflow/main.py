"""Main FastAPI application"""

import logging
import math
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from starlette.requests import Request

from issueflow.api import contexts, issues, sync
from issueflow.api.issues import parse_enum_filter
from issueflow.config import settings
from issueflow.models import GitHubStatus, WorkflowStatus
from issueflow.models.base import get_db, init_db
from issueflow.scheduler import scheduler
from issueflow.services.issue_store import IssueStore

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting IssueFlow")
    init_db()
    scheduler.start()
    yield
    # Shutdown
    logger.info("Stopping IssueFlow")
    scheduler.stop()


app = FastAPI(
    title="IssueFlow",
    description="Mirror GitHub issues and track their workflow status",
    version="1.0.0",
    lifespan=lifespan,
)

# Include API routers
app.include_router(issues.router)
app.include_router(sync.router)
app.include_router(contexts.router)

# Templates
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

WORKFLOW_LABELS = {
    WorkflowStatus.PENDING: "Pending",
    WorkflowStatus.IN_PROCESS: "In Process",
    WorkflowStatus.END: "End",
}


@app.get("/", response_class=HTMLResponse)
def root(
    request: Request,
    repository: Optional[str] = None,
    workflow_status: Optional[str] = Query(None, alias="workflowStatus"),
    status_github: Optional[str] = Query(None, alias="statusGithub"),
    page: int = 1,
    limit: int = 20,
    db: Session = Depends(get_db),
):
    """Serve the issue dashboard"""
    page = max(page, 1)
    limit = max(limit, 1)
    workflow_filter = parse_enum_filter(WorkflowStatus, workflow_status)
    github_filter = parse_enum_filter(GitHubStatus, status_github)
    rows, total = IssueStore(db).list_issues(
        repository=repository,
        workflow_status=workflow_filter,
        status_github=github_filter,
        page=page,
        limit=limit,
    )
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "issues": rows,
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit),
            "filters": {
                "repository": repository or "",
                "workflowStatus": workflow_filter.value if workflow_filter else "",
                "statusGithub": github_filter.value if github_filter else "",
            },
            "contexts": settings.service_options,
            "workflow_labels": WORKFLOW_LABELS,
            "WorkflowStatus": WorkflowStatus,
            "GitHubStatus": GitHubStatus,
        },
    )


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "IssueFlow"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "issueflow.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
