"""Tests for environment-driven settings and logging setup."""

import logging

import pytest

from core import config
from core import logging as app_logging


class TestConfig:
    def test_defaults(self, monkeypatch):
        for name in ("APP_ENV", "LOG_LEVEL", "DB_POOL_MAX", "UPLOAD_DIR", "SMTP_PORT", "SMTP_USE_TLS"):
            monkeypatch.delenv(name, raising=False)

        assert config.is_production() is False
        assert config.log_level() == "DEBUG"
        assert config.db_pool_max() == 5
        assert config.upload_dir() == "uploads"
        assert config.smtp_port() == 465
        assert config.smtp_use_tls() is True

    def test_production_logs_at_info(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "Production")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert config.is_production()
        assert config.log_level() == "INFO"

    def test_cors_origins_are_split(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")

        assert config.cors_origins() == ["https://a.example", "https://b.example"]

    def test_rate_limit_and_gzip_defaults(self, monkeypatch):
        for name in ("RATE_LIMIT_MAX", "RATE_LIMIT_WINDOW_S", "GZIP_MIN_BYTES"):
            monkeypatch.delenv(name, raising=False)

        assert config.rate_limit_max() == 10_000
        assert config.rate_limit_window_s() == 9_000
        assert config.gzip_min_bytes() == 1_000

    @pytest.mark.parametrize("raw, expected", [("0", False), ("yes", True), ("off", False)])
    def test_bool_values(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SMTP_USE_TLS", raw)

        assert config.smtp_use_tls() is expected


class TestConfigureLogging:
    def test_handler_is_added_once(self, monkeypatch):
        monkeypatch.setattr(app_logging, "_configured", False)
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            app_logging.configure_logging()
            app_logging.configure_logging()

            added = [h for h in root.handlers if h not in before]
            assert len(added) == 1
            assert "%(levelname)-8s" in added[0].formatter._fmt
            assert logging.getLogger("asyncpg").level == logging.WARNING
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(level)
