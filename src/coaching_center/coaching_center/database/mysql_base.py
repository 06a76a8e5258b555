from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import mysql.connector
import structlog

from ..core.exceptions import StoreUnavailableError
from .connection import DatabaseConnection

logger = structlog.get_logger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits on success, rolls back on any error. Driver errors are logged and
    re-raised as StoreUnavailableError so nothing above the repositories sees
    mysql-connector types.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.exception("db_connect_failed")
        raise StoreUnavailableError("Database unavailable") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.exception("db_statement_failed")
        raise StoreUnavailableError("Database operation failed") from exc
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


def split_csv_ids(value: Optional[str]) -> Tuple[int, ...]:
    """Decode a comma separated id column into sorted ids."""
    if not value:
        return ()
    return tuple(sorted(int(v) for v in str(value).split(",") if v))


def group_ids(rows: Iterable[Dict[str, Any]], *, key: str, value: str) -> Dict[int, Set[int]]:
    """Group link-table rows into ``{key: {values}}``."""
    grouped: Dict[int, Set[int]] = {}
    for r in rows:
        grouped.setdefault(int(r[key]), set()).add(int(r[value]))
    return grouped
