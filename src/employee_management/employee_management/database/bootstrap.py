"""Schema bootstrap: create the database and apply ``database/schema.sql``."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# Quoted literals are matched whole so a ';' inside them never splits a statement.
_SQL_TOKEN = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|;", re.S)
_PINNED_DB = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")


def _connect(target: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(use_pure=True, **target.connect_kwargs(with_database=with_database))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Yield the statements of a script. ``--`` comment lines are dropped."""
    script = "\n".join(ln for ln in sql.splitlines() if not ln.lstrip().startswith("--"))
    start = 0
    for match in _SQL_TOKEN.finditer(script):
        if match.group() != ";":
            continue
        stmt = script[start:match.start()].strip()
        start = match.end()
        if stmt:
            yield stmt
    tail = script[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Apply every statement of the schema file to the configured database.

    ``CREATE DATABASE`` / ``USE`` lines are ignored so the file can target any name.
    """
    ensure_database_exists(db_config)
    target = DBConfig.from_dict(db_config)
    sql = _PINNED_DB.sub("", Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    count = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %d schema statements to %s", count, target.database)
    return count


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
