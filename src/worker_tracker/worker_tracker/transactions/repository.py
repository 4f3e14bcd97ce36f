from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import NewTransaction, Transaction


class TransactionRepository(Protocol):
    """Gateway for the ``transactions`` table.

    Transactions have no owner column of their own; every call joins through
    ``workers.user_id`` so one user can never touch another user's rows.
    """

    def list_for_worker_in_range(
        self, *, user_id: int, worker_id: int, start: date, end: date, for_update: bool = False
    ) -> Sequence[Transaction]:
        """``for_update`` locks the rows and the date range until the unit of work ends."""
        raise NotImplementedError

    def list_for_worker(self, *, user_id: int, worker_id: int) -> Sequence[Transaction]:
        """Full history, newest date first."""
        raise NotImplementedError

    def create(self, *, user_id: int, worker_id: int, data: NewTransaction) -> int:
        raise NotImplementedError

    def delete(self, *, user_id: int, transaction_id: int) -> bool:
        raise NotImplementedError

    def delete_for_worker_in_range(self, *, user_id: int, worker_id: int, start: date, end: date) -> int:
        """Returns the number of rows removed."""
        raise NotImplementedError
