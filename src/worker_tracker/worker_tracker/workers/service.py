from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import month_window
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import DEFAULT_STATS_MAX_WORKERS, MAX_WORKER_NAME_LENGTH
from ..core.enums import SortKey
from ..core.exceptions import ValidationError
from ..stats.aggregation import aggregate_month
from ..transactions.model import Transaction
from ..transactions.repository import TransactionRepository
from ..users.service import SessionUser
from .model import Worker, WorkerWithStats
from .repository import WorkerRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardTotals:
    amount: Decimal
    hours: Decimal
    workers: int


@dataclass(frozen=True)
class DashboardData:
    month: date
    workers: list[WorkerWithStats]
    totals: DashboardTotals
    search: str
    sort: SortKey


@dataclass(frozen=True)
class WorkerHistory:
    worker: Worker
    transactions: list[Transaction]
    total_amount: Decimal
    total_hours: Decimal


def parse_sort_key(value: Optional[str]) -> SortKey:
    try:
        return SortKey((value or "").strip().lower())
    except ValueError:
        return SortKey.NAME


def filter_and_sort(workers: Sequence[WorkerWithStats], *, search: str = "", sort: SortKey = SortKey.NAME) -> list[WorkerWithStats]:
    needle = (search or "").strip().casefold()
    out = [w for w in workers if needle in w.name.casefold()]

    if sort == SortKey.AMOUNT:
        out.sort(key=lambda w: w.total_amount, reverse=True)
    elif sort == SortKey.HOURS:
        out.sort(key=lambda w: w.total_hours, reverse=True)
    else:
        out.sort(key=lambda w: w.name.casefold())
    return out


def compute_totals(workers: Sequence[WorkerWithStats]) -> DashboardTotals:
    return DashboardTotals(
        amount=sum((w.total_amount for w in workers), Decimal("0")),
        hours=sum((w.total_hours for w in workers), Decimal("0")),
        workers=len(workers),
    )


class WorkerService:
    """Use cases around workers: list with stats, add, delete, history."""

    def __init__(
        self,
        workers: WorkerRepository,
        transactions: TransactionRepository,
        *,
        max_workers: int = DEFAULT_STATS_MAX_WORKERS,
    ):
        self._workers = workers
        self._transactions = transactions
        self._max_workers = max(1, int(max_workers))

    def list_with_stats(self, user: SessionUser, month: date) -> list[WorkerWithStats]:
        """Active workers in name order, each with its stats for ``month``.

        Per-worker reads are independent, so they run in a thread pool; the
        result keeps the order of the worker list.
        """
        workers = list(self._workers.list_active(user.user_id))
        if not workers:
            return []

        window = month_window(month)

        def load(worker: Worker) -> WorkerWithStats:
            txs = self._transactions.list_for_worker_in_range(
                user_id=user.user_id,
                worker_id=worker.worker_id,
                start=window.start,
                end=window.end,
            )
            return WorkerWithStats.combine(worker, aggregate_month(worker.worker_id, txs, window.start))

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(workers))) as pool:
            return list(pool.map(load, workers))

    def build_dashboard(self, user: SessionUser, month: date, *, search: str = "", sort: SortKey = SortKey.NAME) -> DashboardData:
        workers = self.list_with_stats(user, month)
        return DashboardData(
            month=month,
            workers=filter_and_sort(workers, search=search, sort=sort),
            totals=compute_totals(workers),
            search=search or "",
            sort=sort,
        )

    def list_inactive(self, user: SessionUser) -> list[Worker]:
        return list(self._workers.list_inactive(user.user_id))

    def get_worker(self, user: SessionUser, worker_id: int) -> Worker:
        worker = self._workers.get_by_id(user.user_id, int(worker_id))
        if not worker:
            raise ValidationError("Worker not found")
        return worker

    def add_worker(self, user: SessionUser, name: str) -> int:
        name = require_non_empty(name, "Worker name")
        require_max_length(name, "Worker name", MAX_WORKER_NAME_LENGTH)
        worker_id = self._workers.create(user_id=user.user_id, name=name)
        logger.info("User %s added worker %s (%s)", user.user_id, worker_id, name)
        return worker_id

    def delete_worker(self, user: SessionUser, worker_id: int) -> Worker:
        worker = self.get_worker(user, worker_id)
        if not self._workers.delete(user_id=user.user_id, worker_id=worker.worker_id):
            raise ValidationError("Failed to delete worker")
        logger.info("User %s deleted worker %s with its transactions", user.user_id, worker.worker_id)
        return worker

    def set_active(self, user: SessionUser, worker_id: int, *, is_active: bool) -> Worker:
        worker = self.get_worker(user, worker_id)
        if worker.is_active != is_active:
            self._workers.set_active(user_id=user.user_id, worker_id=worker.worker_id, is_active=is_active)
        return worker

    def history(self, user: SessionUser, worker_id: int) -> WorkerHistory:
        worker = self.get_worker(user, worker_id)
        txs = list(self._transactions.list_for_worker(user_id=user.user_id, worker_id=worker.worker_id))
        txs.sort(key=lambda t: t.work_date, reverse=True)
        return WorkerHistory(
            worker=worker,
            transactions=txs,
            total_amount=sum((t.amount for t in txs), Decimal("0")),
            total_hours=sum((t.hours for t in txs), Decimal("0")),
        )
