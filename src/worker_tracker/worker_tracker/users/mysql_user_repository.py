from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_user(row: dict) -> User:
        return User(
            user_id=int(row["id"]),
            username=row["username"],
            full_name=row["full_name"],
            password_hash=row["password_hash"],
            is_active=bool(row.get("is_active", True)),
            created_at=row.get("created_at"),
        )

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, username, full_name, password_hash, is_active, created_at
                FROM users
                WHERE id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            return self._to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, username, full_name, password_hash, is_active, created_at
                FROM users
                WHERE username=%s
                """,
                (username,),
            )
            row = fetchone(cur)
            return self._to_user(row) if row else None
