from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

import mysql.connector

from ..core.exceptions import GatewayError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """DB connection factory, one per app.

    Note: We create short-lived connections per operation, except inside
    ``atomic()`` where every call on the same thread shares one connection.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    @classmethod
    def from_settings(cls, db_config: dict) -> "DatabaseConnection":
        return cls(
            DBConfig(
                host=str(db_config["host"]),
                port=int(db_config.get("port", 3306)),
                user=str(db_config["user"]),
                password=str(db_config["password"]),
                database=str(db_config["database"]),
            )
        )

    def connect(self):
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )
        except mysql.connector.Error as e:
            raise GatewayError(e.msg or str(e)) from e

    def active_connection(self):
        return getattr(self._local, "conn", None)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run every gateway call in the block as one database transaction."""
        if self.active_connection() is not None:
            yield
            return

        conn = self.connect()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except mysql.connector.Error as e:
            conn.rollback()
            raise GatewayError(e.msg or str(e)) from e
        except Exception:
            conn.rollback()
            logger.warning("Rolled back unit of work")
            raise
        finally:
            self._local.conn = None
            conn.close()
