"""Run one GitHub issue sync from the command line.

Usage:
  python scripts/sync_issues.py             # all repositories in GH_REPOS
  python scripts/sync_issues.py --user octocat
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sync GitHub issues into the local database")
    parser.add_argument("--user", help="Only sync open issues assigned to this GitHub user")
    args = parser.parse_args(argv)

    from issueflow.config import settings  # noqa: WPS433
    from issueflow.models.base import SessionLocal, init_db  # noqa: WPS433
    from issueflow.services.sync_service import SyncService  # noqa: WPS433

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    init_db()
    db = SessionLocal()
    sync_service = SyncService(db)
    try:
        if args.user:
            result = sync_service.sync_user_assigned(args.user)
        else:
            result = sync_service.sync_all()
    except Exception as e:
        print(f"Sync failed: {e}", file=sys.stderr)
        return 1
    finally:
        sync_service.close()
        db.close()

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
