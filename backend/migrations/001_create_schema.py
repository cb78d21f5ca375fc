"""Create every table and index that does not exist yet.

Safe to run multiple times (existing tables are left untouched).

Run:
  python backend/migrations/001_create_schema.py --yes
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Allow running this script from any working directory.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import inspect

from core.bootstrap import bootstrap_schema
from core.database import ENGINE
from core.logging import setup_logging
from models.base import Base


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--yes", action="store_true", help="Actually apply changes")
    args = parser.parse_args()

    existing = set(inspect(ENGINE).get_table_names())
    missing = [t for t in Base.metadata.tables if t not in existing]

    if not args.yes:
        print("Dry run. Re-run with --yes to apply.")
        for name in missing:
            print(f"  would create: {name}")
        print(f"{len(missing)} missing, {len(existing)} existing tables.")
        return

    setup_logging(environment="development")
    created = bootstrap_schema(ENGINE)
    print(f"OK: created {len(created)} tables, verified {len(Base.metadata.tables)}.")


if __name__ == "__main__":
    main()
