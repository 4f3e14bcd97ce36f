from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_template_helpers
from .container import Container, build_container
from .core.constants import DEFAULT_CURRENCY_SYMBOL, DEFAULT_STATS_MAX_WORKERS
from .database.bootstrap import apply_schema, ensure_user, list_tables
from .month_close.controller import register as register_month_close
from .summaries.controller import register as register_summaries
from .transactions.controller import register as register_transactions
from .users.controller import register as register_users
from .workers.controller import register as register_workers

logger = logging.getLogger("worker_tracker")

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Tests pass a ``container`` wired on in-memory repositories; otherwise one
    is built from the settings module's ``DB_CONFIG``.
    """
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_user(db_config, username="demo", password="demo123", full_name="Demo User")
            logger.info("demo login ready")

        container = build_container(
            db_config=db_config,
            stats_max_workers=int(getattr(settings, "STATS_MAX_WORKERS", DEFAULT_STATS_MAX_WORKERS)),
        )

    register_template_helpers(app, currency_symbol=getattr(settings, "CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL))

    register_users(app, container)
    register_workers(app, container)
    register_transactions(app, container)
    register_month_close(app, container)
    register_summaries(app, container)

    return app
