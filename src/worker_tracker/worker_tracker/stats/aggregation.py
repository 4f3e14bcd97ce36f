"""Monthly statistics for a single worker.

``aggregate_month`` is a pure function: no I/O, no clock. The average per day is
the month's total divided by the number of calendar days in the month, not by
the number of days that have transactions.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from ..common.datetime_utils import month_window
from ..transactions.model import Transaction

ZERO = Decimal("0")


@dataclass(frozen=True)
class WorkerStats:
    worker_id: int
    total_amount: Decimal = ZERO
    total_hours: Decimal = ZERO
    transaction_count: int = 0
    avg_per_day: Decimal = ZERO


def aggregate_month(worker_id: int, transactions: Iterable[Transaction], month: date) -> WorkerStats:
    window = month_window(month)

    total_amount = ZERO
    total_hours = ZERO
    count = 0
    for tx in transactions:
        if tx.worker_id != worker_id or not window.contains(tx.work_date):
            continue
        total_amount += Decimal(tx.amount)
        total_hours += Decimal(tx.hours)
        count += 1

    return WorkerStats(
        worker_id=worker_id,
        total_amount=total_amount,
        total_hours=total_hours,
        transaction_count=count,
        avg_per_day=total_amount / window.days if count else ZERO,
    )
