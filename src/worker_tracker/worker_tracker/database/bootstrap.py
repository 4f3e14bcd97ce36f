"""Schema setup and the login seed, used by ``scripts/`` and by app startup."""
from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Statements in schema.sql end with ';' at end of line.
_STATEMENT_END = re.compile(r";\s*$", re.MULTILINE)
_DB_SCOPED = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def schema_statements(sql: str) -> Iterator[str]:
    """Yield the statements of a schema file.

    ``--`` comment lines are dropped, as are ``CREATE DATABASE`` and ``USE``:
    the target database comes from settings, not from the file.
    """
    body = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    for chunk in _STATEMENT_END.split(body):
        stmt = chunk.strip()
        if stmt and not _DB_SCOPED.match(stmt):
            yield stmt


def ensure_database_exists(db_config: dict) -> None:
    name = str(db_config.get("database", "worker_tracker"))
    server = mysql.connector.connect(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
    )
    with closing(server) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    statements = list(schema_statements(Path(schema_path).read_text(encoding="utf-8")))
    with closing(DatabaseConnection.from_settings(db_config).connect()) as conn:
        with closing(conn.cursor()) as cur:
            for stmt in statements:
                cur.execute(stmt)
        conn.commit()
    logger.info("Applied %s statements from %s", len(statements), schema_path)


def ensure_user(db_config: dict, *, username: str, password: str, full_name: str) -> None:
    """Create the login, or reset its password if it already exists."""
    password_hash = generate_password_hash(password)
    with closing(DatabaseConnection.from_settings(db_config).connect()) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(
                """
                INSERT INTO users (username, full_name, password_hash)
                VALUES (%s, %s, %s)
                ON DUPLICATE KEY UPDATE full_name = VALUES(full_name),
                                        password_hash = VALUES(password_hash),
                                        is_active = 1
                """,
                (username, full_name, password_hash),
            )
        conn.commit()
    logger.info("User %s ready", username)


def list_tables(db_config: dict) -> list[str]:
    with closing(DatabaseConnection.from_settings(db_config).connect()) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute("SHOW TABLES")
            return [row[0] for row in cur.fetchall()]
