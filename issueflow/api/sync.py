"""Sync trigger endpoints"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from issueflow.models.base import get_db
from issueflow.services.sync_service import SyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["sync"])


def _failure(error: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


@router.post("/sync-issues")
def sync_issues(db: Session = Depends(get_db)):
    """Sync issues of every configured repository"""
    sync_service = SyncService(db)
    try:
        result = sync_service.sync_all()
    except Exception as e:
        logger.exception("Error syncing issues")
        return _failure(str(e) or "Failed to sync issues")
    finally:
        sync_service.close()

    return {"success": True, "message": "Sync completed", **result.to_dict()}


@router.post("/sync-issues-by-user")
def sync_issues_by_user(username: Optional[str] = None, db: Session = Depends(get_db)):
    """Sync open issues assigned to one GitHub user"""
    if not username or not username.strip():
        return _failure("username is required", status_code=400)

    sync_service = SyncService(db)
    try:
        result = sync_service.sync_user_assigned(username)
    except Exception as e:
        logger.exception(f"Error syncing issues for user {username}")
        return _failure(str(e) or "Failed to sync issues")
    finally:
        sync_service.close()

    return {"success": True, "message": "Sync completed", "username": username.strip(), **result.to_dict()}
