from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class MonthlySummary:
    """Archived aggregate of one worker for one calendar month.

    ``worker_name`` is copied at close time; ``worker_id`` becomes None once
    the worker is deleted.
    """

    summary_id: int
    user_id: int
    worker_id: Optional[int]
    worker_name: str
    month: date
    total_amount: Decimal
    total_hours: Decimal
    transaction_count: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewMonthlySummary:
    user_id: int
    worker_id: int
    worker_name: str
    month: date
    total_amount: Decimal
    total_hours: Decimal
    transaction_count: int
