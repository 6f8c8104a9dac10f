"""Back up attendance data into ./backups.

`--format sql` shells out to mysqldump for a full restorable dump;
`--format json` writes the ledger and all submissions as one document.
"""

from __future__ import annotations

import argparse
import json
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import load_settings

from src.coaching_center.coaching_center.container import build_container
from src.coaching_center.coaching_center.export import build_snapshot


def dump_sql(db: dict, out_file: Path) -> None:
    cmd = [
        "mysqldump",
        f"--host={db['host']}",
        f"--port={db.get('port', 3306)}",
        f"--user={db['user']}",
        f"--password={db['password']}",
        "--single-transaction",
        db["database"],
    ]
    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
    except FileNotFoundError:
        out_file.unlink(missing_ok=True)
        raise SystemExit("mysqldump not found; install the MySQL client tools or use --format json")


def dump_json(db: dict, out_file: Path) -> None:
    snapshot = build_snapshot(build_container(db_config=db))
    out_file.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")


def main() -> None:
    p = argparse.ArgumentParser(description="Back up attendance data")
    p.add_argument("--format", choices=["sql", "json"], default="sql")
    args = p.parse_args()

    load_dotenv(override=False)
    db = load_settings().DB_CONFIG

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"{db['database']}_{datetime.now():%Y%m%d_%H%M%S}.{args.format}"

    if args.format == "sql":
        dump_sql(db, out_file)
    else:
        dump_json(db, out_file)
    print(f"OK: Backup written: {out_file}")


if __name__ == "__main__":
    main()
