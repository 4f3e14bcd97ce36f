"""Month close: archive the current month's stats, then clear its transactions.

Flow per invocation::

    IDLE -> CONFIRMING -> ARCHIVING_SUMMARIES -> DELETING_TRANSACTIONS -> DONE
                                  |                      |
                                  +-------> FAILED <-----+

Both write phases run inside one unit of work, so a failure in either phase
rolls back every summary insert and transaction delete of the invocation.
The summaries are computed inside that unit of work from a locking read of
each worker's rows for the month, so a transaction written after the
confirmation page was built is archived along with the rest instead of being
deleted unarchived.

Closing the same month twice is not blocked: the second run archives whatever
was added since and writes a second set of summary rows. ``prepare`` reports
how many rows already exist so the confirmation page can warn about it.
"""
from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import MonthWindow, is_current_month, month_start, month_window
from ..core.enums import MonthCloseState
from ..core.exceptions import MonthCloseError, ValidationError
from ..stats.aggregation import aggregate_month
from ..summaries.model import NewMonthlySummary
from ..summaries.repository import SummaryRepository
from ..transactions.repository import TransactionRepository
from ..users.service import SessionUser
from ..workers.model import WorkerWithStats
from ..workers.service import WorkerService

logger = logging.getLogger(__name__)


def _draft(user: SessionUser, month: date, worker_id: int, worker_name: str, stats) -> NewMonthlySummary:
    return NewMonthlySummary(
        user_id=user.user_id,
        worker_id=worker_id,
        worker_name=worker_name,
        month=month,
        total_amount=stats.total_amount,
        total_hours=stats.total_hours,
        transaction_count=stats.transaction_count,
    )


@dataclass(frozen=True)
class MonthClosePlan:
    month: date
    window: MonthWindow
    workers: list[WorkerWithStats]
    summaries: list[NewMonthlySummary]
    existing_summaries: int = 0
    state: MonthCloseState = MonthCloseState.CONFIRMING

    @property
    def already_closed(self) -> bool:
        return self.existing_summaries > 0


@dataclass(frozen=True)
class MonthCloseResult:
    month: date
    state: MonthCloseState
    summaries_written: int = 0
    transactions_deleted: int = 0
    transitions: list[MonthCloseState] = field(default_factory=list)


class MonthCloseService:
    def __init__(
        self,
        workers: WorkerService,
        summaries: SummaryRepository,
        transactions: TransactionRepository,
        *,
        unit_of_work: Callable[[], AbstractContextManager],
    ):
        self._workers = workers
        self._summaries = summaries
        self._transactions = transactions
        self._unit_of_work = unit_of_work

    @staticmethod
    def can_close(month: date, *, now: Optional[datetime] = None) -> bool:
        return is_current_month(month, now=now)

    def prepare(self, user: SessionUser, month: date, *, now: Optional[datetime] = None) -> MonthClosePlan:
        """Check the preconditions and compute what a close would write. No side effects."""
        month = month_start(month)
        if not self.can_close(month, now=now):
            raise ValidationError("You can only close the current month")

        workers = self._workers.list_with_stats(user, month)
        drafts = [_draft(user, month, w.worker_id, w.name, w) for w in workers if w.transaction_count > 0]

        existing = self._summaries.count_for_month(user_id=user.user_id, month=month)
        if existing:
            logger.warning(
                "Month %s for user %s already has %s archived summaries; closing again will add more",
                month.strftime("%Y-%m"),
                user.user_id,
                existing,
            )

        return MonthClosePlan(
            month=month,
            window=month_window(month),
            workers=workers,
            summaries=drafts,
            existing_summaries=existing,
        )

    def close(
        self,
        user: SessionUser,
        month: date,
        *,
        confirmed: bool,
        now: Optional[datetime] = None,
    ) -> MonthCloseResult:
        if not confirmed:
            raise ValidationError("Closing a month must be confirmed")

        transitions = [MonthCloseState.IDLE, MonthCloseState.CONFIRMING]
        plan = self.prepare(user, month, now=now)
        label = plan.month.strftime("%Y-%m")

        state = MonthCloseState.ARCHIVING_SUMMARIES
        written = 0
        deleted = 0
        try:
            with self._unit_of_work():
                transitions.append(state)
                for w in plan.workers:
                    txs = self._transactions.list_for_worker_in_range(
                        user_id=user.user_id,
                        worker_id=w.worker_id,
                        start=plan.window.start,
                        end=plan.window.end,
                        for_update=True,
                    )
                    stats = aggregate_month(w.worker_id, txs, plan.month)
                    if stats.transaction_count == 0:
                        continue
                    self._summaries.create(_draft(user, plan.month, w.worker_id, w.name, stats))
                    written += 1

                state = MonthCloseState.DELETING_TRANSACTIONS
                transitions.append(state)
                for w in plan.workers:
                    deleted += self._transactions.delete_for_worker_in_range(
                        user_id=user.user_id,
                        worker_id=w.worker_id,
                        start=plan.window.start,
                        end=plan.window.end,
                    )
        except Exception as e:
            logger.exception("Closing month %s for user %s failed during %s", label, user.user_id, state.value)
            transitions.append(MonthCloseState.FAILED)
            raise MonthCloseError("Error closing month", state=state, cause=e, transitions=transitions) from e

        transitions.append(MonthCloseState.DONE)
        logger.info(
            "Closed month %s for user %s: %s summaries written, %s transactions deleted",
            label,
            user.user_id,
            written,
            deleted,
        )
        return MonthCloseResult(
            month=plan.month,
            state=MonthCloseState.DONE,
            summaries_written=written,
            transactions_deleted=deleted,
            transitions=transitions,
        )
