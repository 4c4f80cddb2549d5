from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector

from ..core.exceptions import ConstraintViolation, StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Connection of the transaction currently open on this thread, if any.
_active = threading.local()


def _translate(exc: mysql.connector.Error) -> StorageError:
    if isinstance(exc, mysql.connector.IntegrityError):
        return ConstraintViolation(str(exc))
    logger.error("Database error: %s", exc)
    return StorageError("Database operation failed")


@contextmanager
def transaction(conn_factory: DatabaseConnection) -> Iterator[Any]:
    """Run every db_cursor() opened inside the block on one connection.

    Commits once at the end, rolls back everything on any exception. Nested
    calls join the outer transaction.
    """

    outer = getattr(_active, "conn", None)
    if outer is not None:
        yield outer
        return

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise _translate(exc) from exc

    _active.conn = conn
    try:
        yield conn
        conn.commit()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise _translate(exc) from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        _active.conn = None
        conn.close()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    with transaction(conn_factory) as conn:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
        except mysql.connector.Error as exc:
            raise _translate(exc) from exc
        finally:
            cur.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_hours(value: Any) -> float:
    """DOUBLE/DECIMAL columns may come back as Decimal depending on the connector."""
    return float(value or 0)
