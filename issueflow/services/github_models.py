"""Pydantic models for the GitHub API client."""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from issueflow.models.issue import GitHubStatus

_REPOSITORY_URL_RE = re.compile(r"repos/(?P<full_name>.+)$")


def parse_github_datetime(value: str) -> datetime:
    """Parse GitHub ISO8601 timestamps into UTC tz-naive datetimes."""
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def repository_from_url(repository_url: str) -> str:
    """Extract "owner/repo" from an API repository URL.

    e.g. ``https://api.github.com/repos/octo-org/api`` -> ``octo-org/api``.
    Unrecognised values are returned unchanged.
    """
    match = _REPOSITORY_URL_RE.search(repository_url or "")
    return match.group("full_name") if match else repository_url


class RemoteIssue(BaseModel):
    """Snapshot of one GitHub issue as seen during a sync."""

    number: int
    repository: str
    title: str
    body: Optional[str] = None
    state: GitHubStatus
    html_url: str
    labels: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_api(cls, data: Dict[str, Any], repository: Optional[str] = None) -> "RemoteIssue":
        """Build from an item of the issues or search endpoint.

        When ``repository`` is omitted it is derived from ``repository_url``
        (search results span repositories).
        """
        labels = []
        for label in data.get("labels") or []:
            name = label.get("name") if isinstance(label, dict) else label
            if name:
                labels.append(str(name))

        return cls(
            number=data["number"],
            repository=repository or repository_from_url(data.get("repository_url", "")),
            title=data["title"],
            body=data.get("body"),
            state=GitHubStatus.OPEN if data.get("state") == "open" else GitHubStatus.CLOSED,
            html_url=data["html_url"],
            labels=labels,
            created_at=parse_github_datetime(data["created_at"]),
            updated_at=parse_github_datetime(data["updated_at"]),
        )
