"""Settings shared by every environment; environment modules override them."""

import os

SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key"

DB_CONFIG = {
    "host": os.environ.get("DB_HOST", "localhost"),
    "port": int(os.environ.get("DB_PORT", "3306")),
    "user": os.environ.get("DB_USER", "root"),
    "password": os.environ.get("DB_PASSWORD", ""),
    "database": os.environ.get("DB_NAME", "payroll_db"),
}

# Prefix of every payroll document key; change it to start a fresh data set.
APP_NAMESPACE = os.environ.get("APP_NAMESPACE", "payroll-app-v1")

# Comma separated team ids in display/export order.
TEAM_ORDER = os.environ.get("TEAM_ORDER", "0,1,2,3,4,5,W,J,B,C,기타")

EXPORT_ENABLED = bool(int(os.environ.get("EXPORT_ENABLED", "1")))
AUTH_ENUMERATION_PROTECTION = bool(int(os.environ.get("AUTH_ENUMERATION_PROTECTION", "1")))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

DEBUG = bool(int(os.environ.get("DEBUG", "0")))

AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.environ.get("AUTO_SEED_DB", "0")))
