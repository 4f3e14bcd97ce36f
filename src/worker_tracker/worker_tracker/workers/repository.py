from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Worker


class WorkerRepository(Protocol):
    """Gateway for the ``workers`` table. Every call is scoped by ``user_id``."""

    def list_active(self, user_id: int) -> Sequence[Worker]:
        """Active workers of the user, ordered by name."""
        raise NotImplementedError

    def list_inactive(self, user_id: int) -> Sequence[Worker]:
        raise NotImplementedError

    def get_by_id(self, user_id: int, worker_id: int) -> Optional[Worker]:
        raise NotImplementedError

    def create(self, *, user_id: int, name: str) -> int:
        raise NotImplementedError

    def set_active(self, *, user_id: int, worker_id: int, is_active: bool) -> bool:
        raise NotImplementedError

    def delete(self, *, user_id: int, worker_id: int) -> bool:
        """Hard delete; transactions go with it (FK cascade)."""
        raise NotImplementedError
