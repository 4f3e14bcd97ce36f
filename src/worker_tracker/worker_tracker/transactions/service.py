from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import parse_decimal, require_max_length
from ..core.constants import MAX_NOTES_LENGTH
from ..core.exceptions import ValidationError
from ..users.service import SessionUser
from .model import NewTransaction
from .repository import TransactionRepository

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, transactions: TransactionRepository):
        self._transactions = transactions

    @staticmethod
    def parse_form(
        *,
        amount: str,
        hours: str,
        work_date: str,
        notes: str = "",
        today: Optional[date] = None,
    ) -> NewTransaction:
        amount_d = parse_decimal(amount, "Amount", minimum=Decimal("0"), strict=True)
        hours_d = parse_decimal(hours or "0", "Hours", minimum=Decimal("0"))

        raw_date = (work_date or "").strip()
        if raw_date:
            try:
                day = parse_iso_date(raw_date)
            except ValueError:
                raise ValidationError("Date must be YYYY-MM-DD")
        else:
            day = today or now_local().date()

        notes = (notes or "").strip()
        require_max_length(notes, "Notes", MAX_NOTES_LENGTH)
        return NewTransaction(amount=amount_d, hours=hours_d, work_date=day, notes=notes)

    def add(self, user: SessionUser, worker_id: int, data: NewTransaction) -> int:
        tx_id = self._transactions.create(user_id=user.user_id, worker_id=int(worker_id), data=data)
        logger.info("User %s added transaction %s for worker %s", user.user_id, tx_id, worker_id)
        return tx_id

    def delete(self, user: SessionUser, transaction_id: int) -> None:
        if not self._transactions.delete(user_id=user.user_id, transaction_id=int(transaction_id)):
            raise ValidationError("Transaction not found")
