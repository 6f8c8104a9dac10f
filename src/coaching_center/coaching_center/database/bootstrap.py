"""Create the database and load `schema.sql` / `seed.sql` into it.

The SQL files carry their own `CREATE DATABASE` / `USE` lines for running by
hand in a MySQL client; those lines are dropped here so the configured
database name always wins.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Union

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_DB_DIRECTIVES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' while ignoring separators inside quotes."""
    buf: List[str] = []
    quote = None
    escaped = False

    for ch in sql:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf = []
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _load_script(path: Union[str, Path]) -> str:
    sql = Path(path).read_text(encoding="utf-8")
    return _LINE_COMMENT.sub("", _DB_DIRECTIVES.sub("", sql))


def ensure_database(db: DatabaseConnection) -> None:
    conn = db.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{db.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def run_sql_file(db: DatabaseConnection, path: Union[str, Path]) -> int:
    """Execute every statement of a file in one transaction; returns the statement count."""
    count = 0
    with db.transaction(dictionary=False) as cur:
        for stmt in iter_sql_statements(_load_script(path)):
            cur.execute(stmt)
            count += 1
    logger.info("applied %s to %s (%d statements)", Path(path).name, db.config.describe(), count)
    return count


def apply_schema(db: DatabaseConnection, *, schema_path: Union[str, Path]) -> int:
    ensure_database(db)
    return run_sql_file(db, schema_path)


def apply_seed(db: DatabaseConnection, *, seed_path: Union[str, Path]) -> int:
    return run_sql_file(db, seed_path)


def list_tables(db: DatabaseConnection) -> List[str]:
    with db.transaction(dictionary=False) as cur:
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
