from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.worker_tracker.worker_tracker.container import assemble
from src.worker_tracker.worker_tracker.core.exceptions import GatewayError
from src.worker_tracker.worker_tracker.summaries.model import MonthlySummary, NewMonthlySummary
from src.worker_tracker.worker_tracker.transactions.model import NewTransaction, Transaction
from src.worker_tracker.worker_tracker.users.model import User
from src.worker_tracker.worker_tracker.users.service import SessionUser
from src.worker_tracker.worker_tracker.workers.model import Worker


class InMemoryStore:
    """Shared tables for the in-memory repositories.

    ``atomic()`` snapshots every table and restores it if the block raises.
    ``fail_on[name] = exc`` makes the named repository call raise ``exc``.
    """

    def __init__(self):
        self.users: dict[int, User] = {}
        self.workers: dict[int, Worker] = {}
        self.transactions: dict[int, Transaction] = {}
        self.summaries: dict[int, MonthlySummary] = {}
        self.fail_on: dict[str, Exception] = {}
        self.calls: list[str] = []
        self._next_id = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            self._next_id += 1
            return self._next_id

    def hit(self, name: str) -> None:
        with self._lock:
            self.calls.append(name)
        exc = self.fail_on.get(name)
        if exc is not None:
            raise exc

    def owns_worker(self, user_id: int, worker_id: int) -> bool:
        w = self.workers.get(int(worker_id))
        return bool(w and w.user_id == int(user_id))

    @contextmanager
    def atomic(self):
        snapshot = copy.deepcopy((self.workers, self.transactions, self.summaries))
        try:
            yield
        except Exception:
            self.workers, self.transactions, self.summaries = snapshot
            raise

    # seeding helpers
    def add_user(self, username: str = "owner", password: str = "secret123", full_name: str = "Owner") -> User:
        user = User(
            user_id=self.next_id(),
            username=username,
            full_name=full_name,
            password_hash=generate_password_hash(password),
        )
        self.users[user.user_id] = user
        return user

    def add_worker(self, user_id: int, name: str, *, is_active: bool = True) -> Worker:
        worker = Worker(worker_id=self.next_id(), user_id=user_id, name=name, is_active=is_active)
        self.workers[worker.worker_id] = worker
        return worker

    def add_transaction(self, worker_id: int, amount, hours, work_date: date, notes: str = "") -> Transaction:
        tx = Transaction(
            transaction_id=self.next_id(),
            worker_id=worker_id,
            amount=Decimal(str(amount)),
            hours=Decimal(str(hours)),
            work_date=work_date,
            notes=notes,
        )
        self.transactions[tx.transaction_id] = tx
        return tx


class InMemoryUsers:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._store.users.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        for u in self._store.users.values():
            if u.username == username:
                return u
        return None


class InMemoryWorkers:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def _list(self, user_id: int, *, is_active: bool):
        self._store.hit("list_workers")
        items = [w for w in self._store.workers.values() if w.user_id == user_id and w.is_active == is_active]
        items.sort(key=lambda w: (w.name, w.worker_id))
        return items

    def list_active(self, user_id: int):
        return self._list(user_id, is_active=True)

    def list_inactive(self, user_id: int):
        return self._list(user_id, is_active=False)

    def get_by_id(self, user_id: int, worker_id: int) -> Optional[Worker]:
        if not self._store.owns_worker(user_id, worker_id):
            return None
        return self._store.workers[int(worker_id)]

    def create(self, *, user_id: int, name: str) -> int:
        self._store.hit("create_worker")
        return self._store.add_worker(user_id, name).worker_id

    def set_active(self, *, user_id: int, worker_id: int, is_active: bool) -> bool:
        if not self._store.owns_worker(user_id, worker_id):
            return False
        w = self._store.workers[int(worker_id)]
        self._store.workers[w.worker_id] = replace(w, is_active=is_active)
        return True

    def delete(self, *, user_id: int, worker_id: int) -> bool:
        self._store.hit("delete_worker")
        if not self._store.owns_worker(user_id, worker_id):
            return False
        del self._store.workers[int(worker_id)]
        # FK: transactions cascade, summaries keep the row with worker_id nulled
        self._store.transactions = {k: t for k, t in self._store.transactions.items() if t.worker_id != int(worker_id)}
        for k, s in list(self._store.summaries.items()):
            if s.worker_id == int(worker_id):
                self._store.summaries[k] = replace(s, worker_id=None)
        return True


class InMemoryTransactions:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def _for_worker(self, user_id: int, worker_id: int):
        if not self._store.owns_worker(user_id, worker_id):
            return []
        return [t for t in self._store.transactions.values() if t.worker_id == int(worker_id)]

    def list_for_worker_in_range(self, *, user_id: int, worker_id: int, start: date, end: date, for_update: bool = False):
        self._store.hit("lock_transactions_in_range" if for_update else "list_transactions_in_range")
        items = [t for t in self._for_worker(user_id, worker_id) if start <= t.work_date <= end]
        items.sort(key=lambda t: (t.work_date, t.transaction_id))
        return items

    def list_for_worker(self, *, user_id: int, worker_id: int):
        items = self._for_worker(user_id, worker_id)
        items.sort(key=lambda t: (t.work_date, t.transaction_id), reverse=True)
        return items

    def create(self, *, user_id: int, worker_id: int, data: NewTransaction) -> int:
        self._store.hit("create_transaction")
        if not self._store.owns_worker(user_id, worker_id):
            raise GatewayError("Worker not found")
        return self._store.add_transaction(worker_id, data.amount, data.hours, data.work_date, data.notes).transaction_id

    def delete(self, *, user_id: int, transaction_id: int) -> bool:
        tx = self._store.transactions.get(int(transaction_id))
        if not tx or not self._store.owns_worker(user_id, tx.worker_id):
            return False
        del self._store.transactions[tx.transaction_id]
        return True

    def delete_for_worker_in_range(self, *, user_id: int, worker_id: int, start: date, end: date) -> int:
        self._store.hit("delete_transactions_in_range")
        doomed = [t.transaction_id for t in self._for_worker(user_id, worker_id) if start <= t.work_date <= end]
        for tx_id in doomed:
            del self._store.transactions[tx_id]
        return len(doomed)


class InMemorySummaries:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def create(self, summary: NewMonthlySummary) -> int:
        self._store.hit("create_summary")
        row = MonthlySummary(
            summary_id=self._store.next_id(),
            user_id=summary.user_id,
            worker_id=summary.worker_id,
            worker_name=summary.worker_name,
            month=summary.month,
            total_amount=summary.total_amount,
            total_hours=summary.total_hours,
            transaction_count=summary.transaction_count,
            created_at=datetime(2024, 5, 31, 18, 0),
        )
        self._store.summaries[row.summary_id] = row
        return row.summary_id

    def list_for_user(self, user_id: int):
        items = [s for s in self._store.summaries.values() if s.user_id == user_id]
        items.sort(key=lambda s: (s.worker_name, s.summary_id))
        items.sort(key=lambda s: s.month, reverse=True)
        return items

    def count_for_month(self, *, user_id: int, month: date) -> int:
        return sum(1 for s in self._store.summaries.values() if s.user_id == user_id and s.month == month)


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def owner(store) -> SessionUser:
    u = store.add_user()
    return SessionUser(user_id=u.user_id, username=u.username, full_name=u.full_name)


@pytest.fixture()
def container(store):
    return assemble(
        conn=None,
        users_repo=InMemoryUsers(store),
        workers_repo=InMemoryWorkers(store),
        transactions_repo=InMemoryTransactions(store),
        summaries_repo=InMemorySummaries(store),
        unit_of_work=store.atomic,
        stats_max_workers=2,
    )
