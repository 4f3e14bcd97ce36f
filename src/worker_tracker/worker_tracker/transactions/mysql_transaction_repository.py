from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.exceptions import GatewayError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall
from .model import NewTransaction, Transaction
from .repository import TransactionRepository


class MySQLTransactionRepository(TransactionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_transaction(row: dict) -> Transaction:
        return Transaction(
            transaction_id=int(row["id"]),
            worker_id=int(row["worker_id"]),
            amount=as_decimal(row["amount"]),
            hours=as_decimal(row["hours"]),
            work_date=row["date"],
            notes=row.get("notes") or "",
            created_at=row.get("created_at"),
        )

    def list_for_worker_in_range(
        self, *, user_id: int, worker_id: int, start: date, end: date, for_update: bool = False
    ) -> Sequence[Transaction]:
        sql = """
            SELECT t.id, t.worker_id, t.amount, t.hours, t.date, t.notes, t.created_at
            FROM transactions t
            JOIN workers w ON w.id = t.worker_id
            WHERE t.worker_id=%s AND w.user_id=%s AND t.date BETWEEN %s AND %s
            ORDER BY t.date ASC, t.id ASC
        """
        if for_update:
            # next-key locks on idx_transactions_worker_date also block inserts into the range
            sql += " FOR UPDATE"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(worker_id), int(user_id), start, end))
            return [self._to_transaction(r) for r in fetchall(cur)]

    def list_for_worker(self, *, user_id: int, worker_id: int) -> Sequence[Transaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT t.id, t.worker_id, t.amount, t.hours, t.date, t.notes, t.created_at
                FROM transactions t
                JOIN workers w ON w.id = t.worker_id
                WHERE t.worker_id=%s AND w.user_id=%s
                ORDER BY t.date DESC, t.id DESC
                """,
                (int(worker_id), int(user_id)),
            )
            return [self._to_transaction(r) for r in fetchall(cur)]

    def create(self, *, user_id: int, worker_id: int, data: NewTransaction) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # INSERT ... SELECT so the row is only written under a worker the user owns.
            cur.execute(
                """
                INSERT INTO transactions(worker_id, amount, hours, date, notes)
                SELECT w.id, %s, %s, %s, %s
                FROM workers w
                WHERE w.id=%s AND w.user_id=%s
                """,
                (data.amount, data.hours, data.work_date, data.notes, int(worker_id), int(user_id)),
            )
            if cur.rowcount == 0:
                raise GatewayError("Worker not found")
            return int(cur.lastrowid)

    def delete(self, *, user_id: int, transaction_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE t FROM transactions t
                JOIN workers w ON w.id = t.worker_id
                WHERE t.id=%s AND w.user_id=%s
                """,
                (int(transaction_id), int(user_id)),
            )
            return cur.rowcount > 0

    def delete_for_worker_in_range(self, *, user_id: int, worker_id: int, start: date, end: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE t FROM transactions t
                JOIN workers w ON w.id = t.worker_id
                WHERE t.worker_id=%s AND w.user_id=%s AND t.date BETWEEN %s AND %s
                """,
                (int(worker_id), int(user_id), start, end),
            )
            return int(cur.rowcount)
