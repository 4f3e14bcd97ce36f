from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..users.service import SessionUser
from .model import MonthlySummary
from .repository import SummaryRepository


@dataclass(frozen=True)
class ArchivedMonth:
    month: date
    rows: list[MonthlySummary]
    total_amount: Decimal
    total_hours: Decimal
    transaction_count: int


class ArchiveService:
    """Read side of the monthly summaries."""

    def __init__(self, summaries: SummaryRepository):
        self._summaries = summaries

    def list_summaries(self, user: SessionUser) -> list[MonthlySummary]:
        return list(self._summaries.list_for_user(user.user_id))

    def list_months(self, user: SessionUser) -> list[ArchivedMonth]:
        by_month: dict[date, list[MonthlySummary]] = {}
        for s in self.list_summaries(user):
            by_month.setdefault(s.month, []).append(s)

        out: list[ArchivedMonth] = []
        for month in sorted(by_month, reverse=True):
            rows = by_month[month]
            out.append(
                ArchivedMonth(
                    month=month,
                    rows=rows,
                    total_amount=sum((r.total_amount for r in rows), Decimal("0")),
                    total_hours=sum((r.total_hours for r in rows), Decimal("0")),
                    transaction_count=sum(r.transaction_count for r in rows),
                )
            )
        return out
