"""HTTP client for the GitHub REST API v3."""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from issueflow.services.github_models import RemoteIssue

logger = logging.getLogger(__name__)

PER_PAGE = 100

InvalidIssueHandler = Callable[[Dict[str, Any], Exception], None]


class GitHubClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Read-only access to repository issues and issue search"""

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "Authorization": f"Bearer {token}",
        }
        self._http = httpx.Client(
            base_url=base_url, headers=headers, timeout=timeout, follow_redirects=True
        )

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if not self._http.is_closed:
            self._http.close()

    @staticmethod
    def _is_pull_request(item: Dict[str, Any]) -> bool:
        # The issues endpoint interleaves pull requests; they carry a `pull_request` key.
        return "pull_request" in item

    def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        try:
            resp = self._http.get(path, params=params)
        except httpx.HTTPError as e:
            raise GitHubClientError(f"GitHub API request failed: {e}") from e
        if not resp.is_success:
            raise GitHubClientError(
                f"GitHub API error {resp.status_code}: {resp.reason_phrase}",
                status_code=resp.status_code,
            )
        return resp.json()

    @staticmethod
    def _expect_list(data: Any, path: str) -> List[Any]:
        if not isinstance(data, list):
            raise GitHubClientError(f"Unexpected response from {path}: expected a list")
        return data

    def _parse_issues(
        self,
        items: Iterable[Any],
        repository: Optional[str],
        on_invalid: Optional[InvalidIssueHandler],
    ) -> List[RemoteIssue]:
        """Parse issue items, skipping pull requests and items that fail to parse."""
        issues: List[RemoteIssue] = []
        for item in items:
            if isinstance(item, dict) and self._is_pull_request(item):
                continue
            try:
                issues.append(RemoteIssue.from_api(item, repository=repository))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed issue item from {repository or 'search'}: {e}")
                if on_invalid is not None:
                    on_invalid(item, e)
        return issues

    def fetch_repo_issues(
        self, owner: str, repo: str, on_invalid: Optional[InvalidIssueHandler] = None
    ) -> List[RemoteIssue]:
        """Fetch every issue (open and closed) of a repository.

        Pages through ``/repos/{owner}/{repo}/issues`` 100 items at a time
        until a short page signals the end of the list. Redirects for renamed or
        transferred repositories are followed. Items that cannot be parsed are
        skipped and handed to ``on_invalid``.

        Raises:
            GitHubClientError: On any non-2xx response or transport failure.
        """
        repository = f"{owner}/{repo}"
        issues: List[RemoteIssue] = []
        page = 1
        while True:
            path = f"/repos/{owner}/{repo}/issues"
            data = self._expect_list(
                self._get_json(path, {"state": "all", "per_page": PER_PAGE, "page": page}),
                path,
            )
            issues.extend(self._parse_issues(data, repository, on_invalid))
            if len(data) < PER_PAGE:
                break
            page += 1

        logger.info(f"Fetched {len(issues)} issues from {repository}")
        return issues

    def fetch_user_assigned_issues(
        self, username: str, on_invalid: Optional[InvalidIssueHandler] = None
    ) -> List[RemoteIssue]:
        """Fetch open issues assigned to ``username`` across all repositories.

        Issues a single search query (first 100 results, most recently
        updated first); no further pages are requested.

        Raises:
            GitHubClientError: On any non-2xx response or transport failure.
        """
        data = self._get_json(
            "/search/issues",
            {
                "q": f"assignee:{username} is:issue is:open",
                "sort": "updated",
                "order": "desc",
                "per_page": PER_PAGE,
            },
        )
        issues = self._parse_issues(data.get("items") or [], None, on_invalid)
        logger.info(f"Found {len(issues)} issues assigned to {username}")
        return issues
