from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..stats.aggregation import WorkerStats


@dataclass(frozen=True)
class Worker:
    """A tracked person being paid for hours worked."""

    worker_id: int
    user_id: int
    name: str
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkerWithStats:
    """Read-model for the dashboard: a worker plus its month aggregates.

    Recomputed on every load, never stored.
    """

    worker_id: int
    user_id: int
    name: str
    is_active: bool
    created_at: Optional[datetime]
    total_amount: Decimal
    total_hours: Decimal
    transaction_count: int
    avg_per_day: Decimal

    @classmethod
    def combine(cls, worker: Worker, stats: WorkerStats) -> "WorkerWithStats":
        return cls(
            worker_id=worker.worker_id,
            user_id=worker.user_id,
            name=worker.name,
            is_active=worker.is_active,
            created_at=worker.created_at,
            total_amount=stats.total_amount,
            total_hours=stats.total_hours,
            transaction_count=stats.transaction_count,
            avg_per_day=stats.avg_per_day,
        )
