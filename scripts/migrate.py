# scripts/migrate.py
"""
Apply pending schema migrations, or report the schema version.

Usage:
    python3 scripts/migrate.py            # upgrade to latest
    python3 scripts/migrate.py --target 1 # upgrade up to version 1
    python3 scripts/migrate.py --status
"""
import sys
import os
import argparse
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from core.config import get_settings
from core.logging import configure_logging
from database.database import Database
from database.migrations import current_version, head_version, pending, upgrade


def main(argv=None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--target", type=int, default=None, help="highest version to apply")
    parser.add_argument("--status", action="store_true", help="only print current and pending versions")
    args = parser.parse_args(argv)

    configure_logging()
    db = Database(get_settings().database_url)
    try:
        if args.status:
            todo = pending(db.engine)
            print(f"Schema version {current_version(db.engine)} (latest {head_version()})")
            for migration in todo:
                print(f"  pending {migration.version}: {migration.description}")
            return 0
        applied = upgrade(db.engine, target=args.target)
        print(f"Applied {len(applied)} migration(s); schema at version {current_version(db.engine)}")
        return 0
    finally:
        db.dispose()


if __name__ == "__main__":
    sys.exit(main())
