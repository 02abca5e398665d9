"""
Environment-driven settings.

Everything is read lazily from `os.environ` so tests can monkeypatch values
without reloading modules.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = (
    "http://localhost:4200",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
)


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def app_env() -> str:
    return _env_str("APP_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO" if is_production() else "DEBUG").upper()


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def database_url() -> str:
    return _env_str("DATABASE_URL")


def db_pool_min() -> int:
    return _env_int("DB_POOL_MIN", 1)


def db_pool_max() -> int:
    return _env_int("DB_POOL_MAX", 5)


def db_command_timeout_s() -> int:
    return _env_int("DB_COMMAND_TIMEOUT_S", 30)


def upload_dir() -> str:
    return _env_str("UPLOAD_DIR", "uploads")


def max_upload_bytes() -> int:
    # Same cap the mobile client was built against (0.5 MB per image).
    return _env_int("MAX_UPLOAD_BYTES", 500_000)


def rate_limit_max() -> int:
    # Requests per client and window; 0 turns limiting off.
    return _env_int("RATE_LIMIT_MAX", 10_000)


def rate_limit_window_s() -> int:
    return _env_int("RATE_LIMIT_WINDOW_S", 9_000)


def gzip_min_bytes() -> int:
    return _env_int("GZIP_MIN_BYTES", 1_000)


def smtp_host() -> str:
    return _env_str("SMTP_HOST")


def smtp_port() -> int:
    return _env_int("SMTP_PORT", 465)


def smtp_user() -> str:
    return _env_str("SMTP_USER")


def smtp_password() -> str:
    return os.environ.get("SMTP_PASSWORD", "")


def smtp_from() -> str:
    return _env_str("SMTP_FROM", smtp_user() or "noreply@localhost")


def smtp_use_tls() -> bool:
    return _env_bool("SMTP_USE_TLS", True)
