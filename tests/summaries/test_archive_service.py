from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from src.worker_tracker.worker_tracker.summaries.model import NewMonthlySummary


def test_months_grouped_newest_first(container, store, owner):
    repo = container.summaries_repo
    for month, name, amount, count in [
        (date(2024, 4, 1), "Ali", "100", 4),
        (date(2024, 5, 1), "Bea", "20", 1),
        (date(2024, 5, 1), "Ali", "80", 2),
    ]:
        repo.create(
            NewMonthlySummary(
                user_id=owner.user_id,
                worker_id=None,
                worker_name=name,
                month=month,
                total_amount=Decimal(amount),
                total_hours=Decimal("1.5"),
                transaction_count=count,
            )
        )

    months = container.archive_service.list_months(owner)

    assert [m.month for m in months] == [date(2024, 5, 1), date(2024, 4, 1)]
    assert [r.worker_name for r in months[0].rows] == ["Ali", "Bea"]
    assert months[0].total_amount == Decimal("100")
    assert months[0].total_hours == Decimal("3.0")
    assert months[0].transaction_count == 3


def test_archive_survives_worker_deletion(container, store, owner):
    ali = store.add_worker(owner.user_id, "Ali")
    store.add_transaction(ali.worker_id, "10", "1", date(2024, 5, 3))
    container.month_close_service.close(owner, date(2024, 5, 1), confirmed=True, now=datetime(2024, 5, 31, 20, 0))

    container.worker_service.delete_worker(owner, ali.worker_id)

    (row,) = container.archive_service.list_summaries(owner)
    assert row.worker_id is None
    assert row.worker_name == "Ali"


def test_archive_is_per_user(container, store, owner):
    other = store.add_user(username="other")
    container.summaries_repo.create(
        NewMonthlySummary(
            user_id=other.user_id,
            worker_id=None,
            worker_name="Stranger",
            month=date(2024, 5, 1),
            total_amount=Decimal("1"),
            total_hours=Decimal("1"),
            transaction_count=1,
        )
    )

    assert container.archive_service.list_months(owner) == []
