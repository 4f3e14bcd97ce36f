"""Create the database and tables, and optionally a login.

    python scripts/init_db.py              # schema only
    python scripts/init_db.py --seed       # schema + demo/demo123
"""
from __future__ import annotations

import argparse
import importlib
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.worker_tracker.worker_tracker.database.bootstrap import apply_schema, ensure_user, list_tables


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply database/schema.sql to the configured MySQL database.")
    parser.add_argument("--seed", action="store_true", help="Also create or reset a login.")
    parser.add_argument("--username", default=os.getenv("SEED_USERNAME", "demo"))
    parser.add_argument("--password", default=os.getenv("SEED_PASSWORD", "demo123"))
    parser.add_argument("--full-name", default=os.getenv("SEED_FULL_NAME", "Demo User"))
    return parser.parse_args()


def main() -> None:
    load_dotenv(override=False)
    args = parse_args()
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    print(f"OK: schema applied -> {target} (tables={len(list_tables(db_config))})")

    if args.seed:
        ensure_user(db_config, username=args.username, password=args.password, full_name=args.full_name)
        print(f"OK: login '{args.username}' ready")


if __name__ == "__main__":
    main()
