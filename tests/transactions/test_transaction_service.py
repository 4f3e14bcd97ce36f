from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.worker_tracker.worker_tracker.core.exceptions import GatewayError, ValidationError
from src.worker_tracker.worker_tracker.transactions.service import TransactionService
from src.worker_tracker.worker_tracker.users.service import SessionUser


def test_parse_form_defaults_date_and_hours():
    data = TransactionService.parse_form(amount="25.5", hours="", work_date="", today=date(2024, 5, 9))

    assert data.amount == Decimal("25.50")
    assert data.hours == Decimal("0.00")
    assert data.work_date == date(2024, 5, 9)
    assert data.notes == ""


@pytest.mark.parametrize(
    "amount, hours, work_date, message",
    [
        ("", "1", "2024-05-01", "Amount is required"),
        ("0", "1", "2024-05-01", "Amount must be greater than"),
        ("-4", "1", "2024-05-01", "Amount must be greater than"),
        ("ten", "1", "2024-05-01", "Amount must be a number"),
        ("10", "-1", "2024-05-01", "Hours must be at least"),
        ("10", "1", "05/01/2024", "Date must be YYYY-MM-DD"),
    ],
)
def test_parse_form_rejects_bad_input(amount, hours, work_date, message):
    with pytest.raises(ValidationError, match=message):
        TransactionService.parse_form(amount=amount, hours=hours, work_date=work_date)


def test_parse_form_limits_notes():
    with pytest.raises(ValidationError, match="Notes must be at most"):
        TransactionService.parse_form(amount="1", hours="1", work_date="2024-05-01", notes="x" * 501)


def test_add_and_delete(container, store, owner):
    worker = store.add_worker(owner.user_id, "Ali")
    data = TransactionService.parse_form(amount="40", hours="3", work_date="2024-05-04", notes=" night shift ")

    tx_id = container.transaction_service.add(owner, worker.worker_id, data)

    assert store.transactions[tx_id].notes == "night shift"
    container.transaction_service.delete(owner, tx_id)
    assert tx_id not in store.transactions


def test_cannot_touch_another_users_worker(container, store, owner):
    other = store.add_user(username="other")
    worker = store.add_worker(other.user_id, "Not yours")
    tx = store.add_transaction(worker.worker_id, "10", "1", date(2024, 5, 1))
    data = TransactionService.parse_form(amount="40", hours="3", work_date="2024-05-04")

    with pytest.raises(GatewayError, match="Worker not found"):
        container.transaction_service.add(owner, worker.worker_id, data)
    with pytest.raises(ValidationError, match="Transaction not found"):
        container.transaction_service.delete(owner, tx.transaction_id)
    assert tx.transaction_id in store.transactions


def test_session_user_round_trip():
    user = SessionUser(user_id=3, username="demo", full_name="Demo User")

    assert SessionUser.from_session(user.to_session()) == user
