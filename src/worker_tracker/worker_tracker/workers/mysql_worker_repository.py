from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Worker
from .repository import WorkerRepository


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_worker(row: dict) -> Worker:
        return Worker(
            worker_id=int(row["id"]),
            user_id=int(row["user_id"]),
            name=row["name"],
            is_active=bool(row.get("is_active", True)),
            created_at=row.get("created_at"),
        )

    def _list(self, user_id: int, *, is_active: bool) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, name, is_active, created_at
                FROM workers
                WHERE user_id=%s AND is_active=%s
                ORDER BY name ASC, id ASC
                """,
                (int(user_id), 1 if is_active else 0),
            )
            return [self._to_worker(r) for r in fetchall(cur)]

    def list_active(self, user_id: int) -> Sequence[Worker]:
        return self._list(user_id, is_active=True)

    def list_inactive(self, user_id: int) -> Sequence[Worker]:
        return self._list(user_id, is_active=False)

    def get_by_id(self, user_id: int, worker_id: int) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, name, is_active, created_at
                FROM workers
                WHERE id=%s AND user_id=%s
                """,
                (int(worker_id), int(user_id)),
            )
            row = fetchone(cur)
            return self._to_worker(row) if row else None

    def create(self, *, user_id: int, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO workers(user_id, name, is_active) VALUES(%s,%s,1)",
                (int(user_id), name),
            )
            return int(cur.lastrowid)

    def set_active(self, *, user_id: int, worker_id: int, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE workers SET is_active=%s WHERE id=%s AND user_id=%s",
                (1 if is_active else 0, int(worker_id), int(user_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, user_id: int, worker_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM workers WHERE id=%s AND user_id=%s", (int(worker_id), int(user_id)))
            return cur.rowcount > 0
