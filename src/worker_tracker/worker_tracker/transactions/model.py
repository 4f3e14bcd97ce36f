from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Transaction:
    """One dated payment/hours record for a worker. Never updated in place."""

    transaction_id: int
    worker_id: int
    amount: Decimal
    hours: Decimal
    work_date: date
    notes: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewTransaction:
    """Validated form input, not yet stored."""

    amount: Decimal
    hours: Decimal
    work_date: date
    notes: str = ""
