from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import MonthlySummary, NewMonthlySummary
from .repository import SummaryRepository


class MySQLSummaryRepository(SummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, summary: NewMonthlySummary) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO monthly_summaries(
                    user_id, worker_id, worker_name, month, total_amount, total_hours, transaction_count
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(summary.user_id),
                    int(summary.worker_id),
                    summary.worker_name,
                    summary.month,
                    summary.total_amount,
                    summary.total_hours,
                    int(summary.transaction_count),
                ),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int) -> Sequence[MonthlySummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, worker_id, worker_name, month,
                       total_amount, total_hours, transaction_count, created_at
                FROM monthly_summaries
                WHERE user_id=%s
                ORDER BY month DESC, worker_name ASC, id ASC
                """,
                (int(user_id),),
            )
            return [
                MonthlySummary(
                    summary_id=int(r["id"]),
                    user_id=int(r["user_id"]),
                    worker_id=int(r["worker_id"]) if r.get("worker_id") is not None else None,
                    worker_name=r["worker_name"],
                    month=r["month"],
                    total_amount=as_decimal(r["total_amount"]),
                    total_hours=as_decimal(r["total_hours"]),
                    transaction_count=int(r["transaction_count"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def count_for_month(self, *, user_id: int, month: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM monthly_summaries WHERE user_id=%s AND month=%s",
                (int(user_id), month),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0
