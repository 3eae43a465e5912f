from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


class MySQLRepository:
    """Base for MySQL repositories.

    A repository either opens its own short-lived connection per call or,
    when constructed with a cursor, runs inside the caller's transaction
    (commit/rollback belongs to whoever opened that cursor).
    """

    def __init__(self, conn_factory: DatabaseConnection, *, cursor=None):
        self._conn_factory = conn_factory
        self._bound_cursor = cursor

    @contextmanager
    def _cursor(self) -> Iterator[Any]:
        if self._bound_cursor is not None:
            yield self._bound_cursor
            return
        with db_cursor(self._conn_factory) as (_, cur):
            yield cur
