from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.worker_tracker.worker_tracker.core.enums import MonthCloseState
from src.worker_tracker.worker_tracker.core.exceptions import GatewayError, MonthCloseError, ValidationError
from src.worker_tracker.worker_tracker.month_close.service import MonthCloseService

MAY = date(2024, 5, 1)
NOW = datetime(2024, 5, 31, 18, 0)


@pytest.fixture()
def may_book(store, owner):
    ali = store.add_worker(owner.user_id, "Ali")
    bea = store.add_worker(owner.user_id, "Bea")
    store.add_worker(owner.user_id, "Idle")
    store.add_transaction(ali.worker_id, "50", "4", date(2024, 5, 2))
    store.add_transaction(ali.worker_id, "30", "2", date(2024, 5, 28))
    store.add_transaction(bea.worker_id, "25", "3", date(2024, 5, 15))
    june = store.add_transaction(ali.worker_id, "70", "5", date(2024, 6, 1))
    return {"ali": ali, "bea": bea, "june": june}


def test_close_archives_and_clears_the_month(container, store, owner, may_book):
    result = container.month_close_service.close(owner, MAY, confirmed=True, now=NOW)

    assert result.state is MonthCloseState.DONE
    assert result.transitions == [
        MonthCloseState.IDLE,
        MonthCloseState.CONFIRMING,
        MonthCloseState.ARCHIVING_SUMMARIES,
        MonthCloseState.DELETING_TRANSACTIONS,
        MonthCloseState.DONE,
    ]
    assert result.summaries_written == 2
    assert result.transactions_deleted == 3

    rows = sorted(store.summaries.values(), key=lambda s: s.worker_name)
    assert [(s.worker_name, s.total_amount, s.transaction_count) for s in rows] == [
        ("Ali", Decimal("80"), 2),
        ("Bea", Decimal("25"), 1),
    ]
    assert all(s.month == MAY for s in rows)
    # a worker with no May transactions gets no summary row
    assert list(store.transactions) == [may_book["june"].transaction_id]


def test_only_current_month_can_be_closed(container, store, owner, may_book):
    before = dict(store.transactions)

    with pytest.raises(ValidationError, match="only close the current month"):
        container.month_close_service.close(owner, date(2024, 4, 1), confirmed=True, now=NOW)

    assert store.transactions == before
    assert store.summaries == {}


def test_close_requires_confirmation(container, store, owner, may_book):
    with pytest.raises(ValidationError, match="must be confirmed"):
        container.month_close_service.close(owner, MAY, confirmed=False, now=NOW)

    assert store.summaries == {}
    assert "create_summary" not in store.calls


def test_failed_delete_rolls_back_the_summaries(container, store, owner, may_book):
    before = dict(store.transactions)
    store.fail_on["delete_transactions_in_range"] = GatewayError("Lock wait timeout exceeded")

    with pytest.raises(MonthCloseError) as excinfo:
        container.month_close_service.close(owner, MAY, confirmed=True, now=NOW)

    assert excinfo.value.state is MonthCloseState.DELETING_TRANSACTIONS
    assert excinfo.value.transitions[-2:] == [MonthCloseState.DELETING_TRANSACTIONS, MonthCloseState.FAILED]
    assert isinstance(excinfo.value.cause, GatewayError)
    assert store.summaries == {}
    assert store.transactions == before


def test_failed_archive_reports_archiving_phase(container, store, owner, may_book):
    store.fail_on["create_summary"] = GatewayError("Table is read only")

    with pytest.raises(MonthCloseError) as excinfo:
        container.month_close_service.close(owner, MAY, confirmed=True, now=NOW)

    assert excinfo.value.state is MonthCloseState.ARCHIVING_SUMMARIES
    assert "delete_transactions_in_range" not in store.calls


def test_prepare_has_no_side_effects(container, store, owner, may_book):
    plan = container.month_close_service.prepare(owner, MAY, now=NOW)

    assert plan.state is MonthCloseState.CONFIRMING
    assert [s.worker_name for s in plan.summaries] == ["Ali", "Bea"]
    assert len(plan.workers) == 3
    assert not plan.already_closed
    assert store.summaries == {}
    assert len(store.transactions) == 4


def test_second_close_is_flagged_not_blocked(container, store, owner, may_book, caplog):
    container.month_close_service.close(owner, MAY, confirmed=True, now=NOW)
    store.add_transaction(may_book["bea"].worker_id, "15", "1", date(2024, 5, 31))

    plan = container.month_close_service.prepare(owner, MAY, now=NOW)
    assert plan.already_closed
    assert plan.existing_summaries == 2
    assert "already has 2 archived summaries" in caplog.text

    result = container.month_close_service.close(owner, MAY, confirmed=True, now=NOW)
    assert result.summaries_written == 1
    assert len(store.summaries) == 3


def test_can_close():
    assert MonthCloseService.can_close(MAY, now=NOW)
    assert not MonthCloseService.can_close(date(2024, 6, 1), now=NOW)


def test_close_leaves_inactive_workers_alone(container, store, owner, may_book):
    gone = store.add_worker(owner.user_id, "Gone", is_active=False)
    parked = store.add_transaction(gone.worker_id, "90", "6", date(2024, 5, 10))

    result = container.month_close_service.close(owner, MAY, confirmed=True, now=NOW)

    assert result.summaries_written == 2
    assert "Gone" not in {s.worker_name for s in store.summaries.values()}
    assert parked.transaction_id in store.transactions
    assert may_book["june"].transaction_id in store.transactions


def test_transaction_added_after_confirmation_is_archived(container, store, owner, may_book):
    @contextmanager
    def late_write_then_atomic():
        # another request lands between the confirm page and the close
        store.add_transaction(may_book["bea"].worker_id, "40", "2", date(2024, 5, 30))
        with store.atomic():
            yield

    service = MonthCloseService(
        container.worker_service,
        container.summaries_repo,
        container.transactions_repo,
        unit_of_work=late_write_then_atomic,
    )

    result = service.close(owner, MAY, confirmed=True, now=NOW)

    bea_row = next(s for s in store.summaries.values() if s.worker_name == "Bea")
    assert bea_row.total_amount == Decimal("65")
    assert bea_row.transaction_count == 2
    assert result.transactions_deleted == 4
    assert "lock_transactions_in_range" in store.calls
