"""Selectable contexts for the start form"""
from fastapi import APIRouter

from issueflow.config import settings

router = APIRouter(prefix="/api/contexts", tags=["contexts"])


@router.get("")
def list_contexts():
    """List the configured contexts (services)"""
    return {"contexts": settings.service_options}
