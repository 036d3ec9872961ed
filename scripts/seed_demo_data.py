"""Seed a demo SQLite DB with sample IssueFlow data.

This is intended for docs/screenshots and local demos.
It does NOT contact GitHub.

Usage:
  python scripts/seed_demo_data.py --db ./data/demo_issueflow.db --overwrite
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


SAMPLE_ISSUES = [
    {
        "github_number": 1,
        "repository": "octo-org/checkout-monorepo",
        "title": "[Feature] Add payment validation",
        "description": "Implement validation for payment amounts before processing",
        "status_github": "open",
        "workflow_status": "pending",
        "labels": ["feature", "payment"],
        "created_at_github": datetime(2024, 12, 1),
        "updated_at_github": datetime(2024, 12, 1),
    },
    {
        "github_number": 2,
        "repository": "octo-org/checkout-monorepo",
        "title": "[Bug] Fix session timeout",
        "description": "Session expires too quickly on mobile devices",
        "status_github": "open",
        "workflow_status": "in_process",
        "labels": ["bug", "mobile"],
        "created_at_github": datetime(2024, 11, 28),
        "updated_at_github": datetime(2024, 12, 2),
        "selected_context": "checkout_api",
        "prompt": "Reproduce on iOS Safari first",
    },
    {
        "github_number": 3,
        "repository": "octo-org/checkout-api",
        "title": "[Refactor] Improve error handling",
        "description": "Refactor error handling to use centralized error codes",
        "status_github": "closed",
        "workflow_status": "end",
        "labels": ["refactor"],
        "created_at_github": datetime(2024, 11, 20),
        "updated_at_github": datetime(2024, 11, 30),
    },
]


def _sqlite_url_for_path(db_path: Path) -> str:
    # SQLAlchemy sqlite absolute path uses 4 slashes: sqlite:////abs/path
    p = db_path.expanduser().resolve()
    return f"sqlite:////{p}"


@dataclass(frozen=True)
class SeedResult:
    db_path: Path
    issues: int


def seed_demo_db(db_path: Path, overwrite: bool = False) -> SeedResult:
    db_path = db_path.expanduser().resolve()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    if overwrite and db_path.exists():
        db_path.unlink()

    # IMPORTANT: DATABASE_URL must be set before importing issueflow.* modules
    os.environ["DATABASE_URL"] = _sqlite_url_for_path(db_path)
    os.environ.setdefault("LOG_LEVEL", "WARNING")

    from issueflow.models.base import init_db, SessionLocal  # noqa: WPS433
    from issueflow.models import GitHubStatus, Issue, WorkflowStatus  # noqa: WPS433

    init_db()

    db = SessionLocal()
    try:
        for sample in SAMPLE_ISSUES:
            data = dict(sample)
            data["status_github"] = GitHubStatus(data["status_github"])
            data["workflow_status"] = WorkflowStatus(data["workflow_status"])
            data["url"] = (
                f"https://github.com/{data['repository']}/issues/{data['github_number']}"
            )

            existing = (
                db.query(Issue)
                .filter(
                    Issue.github_number == data["github_number"],
                    Issue.repository == data["repository"],
                )
                .first()
            )
            if existing is None:
                db.add(Issue(**data))
            else:
                for key, value in data.items():
                    setattr(existing, key, value)
        db.commit()
    finally:
        db.close()

    return SeedResult(db_path=db_path, issues=len(SAMPLE_ISSUES))


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a demo IssueFlow SQLite database")
    parser.add_argument("--db", default="./data/demo_issueflow.db", help="Path to the SQLite file")
    parser.add_argument("--overwrite", action="store_true", help="Delete the DB file first")
    args = parser.parse_args()

    result = seed_demo_db(Path(args.db), overwrite=args.overwrite)
    print(f"Seeded {result.issues} issues into {result.db_path}")


if __name__ == "__main__":
    main()
