import os
from typing import Optional

import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def parse_bool(value) -> Optional[bool]:
    """Accept real booleans and "true"/"false" strings; anything else is unset."""
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    return None


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    DATABASE_SSL = data.get("DATABASE_SSL")
    DATABASE_SSL_REJECT_UNAUTHORIZED = data.get("DATABASE_SSL_REJECT_UNAUTHORIZED")
    DATABASE_SSL_CA = data.get("DATABASE_SSL_CA")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Password reset
    PASSWORD_RESET_TOKEN_TTL_MS = int(data.get("PASSWORD_RESET_TOKEN_TTL_MS", 60 * 60 * 1000))
    PASSWORD_MIN_LENGTH = int(data.get("PASSWORD_MIN_LENGTH", 8))
    PASSWORD_RESET_URL_BASE = data.get("PASSWORD_RESET_URL_BASE", "https://miapp.com/reset-password")
    PASSWORD_HASH_ROUNDS = int(data.get("PASSWORD_HASH_ROUNDS", 10))

    # Email (provider "log" or "smtp"; unset picks smtp when SMTP_HOST is set)
    EMAIL_PROVIDER = data.get("EMAIL_PROVIDER")
    EMAIL_FROM = data.get("EMAIL_FROM", "no-reply@miapp.com")
    SMTP_HOST = data.get("SMTP_HOST")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_SECURE = data.get("SMTP_SECURE")
    SMTP_USER = data.get("SMTP_USER")
    SMTP_PASS = data.get("SMTP_PASS")
