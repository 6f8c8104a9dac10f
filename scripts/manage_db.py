"""Database chores: apply the schema, load the demo student directory, list tables.

    python scripts/manage_db.py init
    python scripts/manage_db.py seed
    python scripts/manage_db.py tables
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import load_settings

from src.coaching_center.coaching_center.database.bootstrap import apply_schema, apply_seed, list_tables
from src.coaching_center.coaching_center.database.connection import DBConfig, DatabaseConnection

SQL_DIR = REPO_ROOT / "database"


def main() -> None:
    p = argparse.ArgumentParser(description="Manage the coaching center database")
    p.add_argument("command", choices=["init", "seed", "tables"])
    args = p.parse_args()

    load_dotenv(override=False)
    db = DatabaseConnection(DBConfig.from_dict(load_settings().DB_CONFIG))

    if args.command == "init":
        count = apply_schema(db, schema_path=SQL_DIR / "schema.sql")
        print(f"OK: schema.sql -> {db.config.describe()} ({count} statements)")
    elif args.command == "seed":
        count = apply_seed(db, seed_path=SQL_DIR / "seed.sql")
        print(f"OK: seed.sql -> {db.config.describe()} ({count} statements)")
    else:
        for name in list_tables(db):
            print(name)


if __name__ == "__main__":
    main()
