from __future__ import annotations

from enum import Enum


class SortKey(str, Enum):
    """Dashboard ordering for worker cards."""

    NAME = "name"
    AMOUNT = "amount"
    HOURS = "hours"


class MonthCloseState(str, Enum):
    """Progress of a single month close invocation."""

    IDLE = "IDLE"
    CONFIRMING = "CONFIRMING"
    ARCHIVING_SUMMARIES = "ARCHIVING_SUMMARIES"
    DELETING_TRANSACTIONS = "DELETING_TRANSACTIONS"
    DONE = "DONE"
    FAILED = "FAILED"
