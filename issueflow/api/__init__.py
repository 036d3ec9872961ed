"""API routes"""

from issueflow.api import contexts, issues, sync

__all__ = ["issues", "sync", "contexts"]
