from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import GatewayError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``.

    Inside ``conn_factory.atomic()`` the shared connection is reused and the
    commit is left to the unit of work.
    """
    shared = conn_factory.active_connection()
    if shared is not None:
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        except mysql.connector.Error as e:
            raise GatewayError(e.msg or str(e)) from e
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise GatewayError(e.msg or str(e)) from e
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


def as_decimal(value: Any) -> Decimal:
    """Normalize DECIMAL columns across connector implementations.

    mysql-connector returns Decimal for DECIMAL columns, but the pure-Python
    build can hand back str or float for computed expressions.
    """

    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
