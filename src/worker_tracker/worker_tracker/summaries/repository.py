from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import MonthlySummary, NewMonthlySummary


class SummaryRepository(Protocol):
    def create(self, summary: NewMonthlySummary) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[MonthlySummary]:
        """Newest month first, then by worker name."""
        raise NotImplementedError

    def count_for_month(self, *, user_id: int, month: date) -> int:
        raise NotImplementedError
