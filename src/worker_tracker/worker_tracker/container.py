from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_STATS_MAX_WORKERS
from .database.connection import DatabaseConnection
from .month_close.service import MonthCloseService
from .summaries.mysql_summary_repository import MySQLSummaryRepository
from .summaries.repository import SummaryRepository
from .summaries.service import ArchiveService
from .transactions.mysql_transaction_repository import MySQLTransactionRepository
from .transactions.repository import TransactionRepository
from .transactions.service import TransactionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .workers.mysql_worker_repository import MySQLWorkerRepository
from .workers.repository import WorkerRepository
from .workers.service import WorkerService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    workers_repo: WorkerRepository
    transactions_repo: TransactionRepository
    summaries_repo: SummaryRepository

    auth_service: AuthService
    worker_service: WorkerService
    transaction_service: TransactionService
    archive_service: ArchiveService
    month_close_service: MonthCloseService


def build_container(*, db_config: dict, stats_max_workers: int = DEFAULT_STATS_MAX_WORKERS) -> Container:
    conn = DatabaseConnection.from_settings(db_config)

    users_repo = MySQLUserRepository(conn)
    workers_repo = MySQLWorkerRepository(conn)
    transactions_repo = MySQLTransactionRepository(conn)
    summaries_repo = MySQLSummaryRepository(conn)

    return assemble(
        conn=conn,
        users_repo=users_repo,
        workers_repo=workers_repo,
        transactions_repo=transactions_repo,
        summaries_repo=summaries_repo,
        unit_of_work=conn.atomic,
        stats_max_workers=stats_max_workers,
    )


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    workers_repo: WorkerRepository,
    transactions_repo: TransactionRepository,
    summaries_repo: SummaryRepository,
    unit_of_work,
    stats_max_workers: int = DEFAULT_STATS_MAX_WORKERS,
) -> Container:
    """Wire services on top of any set of repositories (MySQL or in-memory)."""
    worker_service = WorkerService(workers_repo, transactions_repo, max_workers=stats_max_workers)

    return Container(
        conn=conn,
        users_repo=users_repo,
        workers_repo=workers_repo,
        transactions_repo=transactions_repo,
        summaries_repo=summaries_repo,
        auth_service=AuthService(users_repo),
        worker_service=worker_service,
        transaction_service=TransactionService(transactions_repo),
        archive_service=ArchiveService(summaries_repo),
        month_close_service=MonthCloseService(
            worker_service,
            summaries_repo,
            transactions_repo,
            unit_of_work=unit_of_work,
        ),
    )
