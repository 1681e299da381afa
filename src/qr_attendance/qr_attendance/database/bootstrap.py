"""Schema bootstrap for ``database/schema.sql`` (scripts/init_db.py and AUTO_INIT_DB)."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_DB_SELECTION_RE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split on ``;`` outside quotes, dropping ``--`` line comments."""

    buf: list[str] = []
    quote = ""
    i, n = 0, len(sql)
    while i < n:
        ch = sql[i]
        if quote:
            buf.append(ch)
            if ch == "\\" and i + 1 < n:
                buf.append(sql[i + 1])
                i += 1
            elif ch == quote:
                quote = ""
        elif ch in ("'", '"', "`"):
            quote = ch
            buf.append(ch)
        elif sql.startswith("--", i):
            newline = sql.find("\n", i)
            i = n if newline < 0 else newline
            continue
        elif ch == ";":
            stmt = "".join(buf).strip()
            if stmt:
                yield stmt
            buf = []
        else:
            buf.append(ch)
        i += 1

    tail = "".join(buf).strip()
    if tail:
        yield tail


@contextmanager
def _server(target: DBConfig, *, with_database: bool = True):
    conn = mysql.connector.connect(use_pure=True, **target.connect_kwargs(with_database=with_database))
    try:
        yield conn
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _server(target, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database if needed, then run every statement of the schema file.

    The file's own CREATE DATABASE / USE lines are ignored so the configured
    database name always wins.
    """

    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _DB_SELECTION_RE.sub("", Path(schema_path).read_text(encoding="utf-8"))
    with _server(target) as conn:
        cur = conn.cursor()
        count = 0
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    logger.info("schema applied to %s@%s/%s (%d statements)", target.user, target.host, target.database, count)


def list_tables(db_config: dict) -> list[str]:
    with _server(DBConfig.from_dict(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
