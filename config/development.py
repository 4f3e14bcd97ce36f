import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worker_tracker"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₼")
# Thread pool size for the per-worker reads behind the dashboard
STATS_MAX_WORKERS = int(os.getenv("STATS_MAX_WORKERS", "8"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the demo login on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
