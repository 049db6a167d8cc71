"""
Unit tests for settings and logging configuration.
"""

from __future__ import annotations

import logging

import pytest

from querybench.config import Settings
from querybench.logging_setup import configure_logging


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("QUERYBENCH_POSTGRES_PORT", raising=False)
        cfg = Settings(_env_file=None)

        assert cfg.POSTGRES_PORT == 5432
        assert cfg.BENCH_WARMUP_ITERATIONS == 0
        assert cfg.BENCH_INCLUDE_PAYLOAD is True
        assert cfg.LOG_FILE is None

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUERYBENCH_POSTGRES_HOST", "db.internal")
        monkeypatch.setenv("QUERYBENCH_POSTGRES_PORT", "6543")
        monkeypatch.setenv("QUERYBENCH_BENCH_INCLUDE_PAYLOAD", "false")

        cfg = Settings(_env_file=None)

        assert cfg.POSTGRES_HOST == "db.internal"
        assert cfg.POSTGRES_PORT == 6543
        assert cfg.BENCH_INCLUDE_PAYLOAD is False

    def test_dsn_omits_password(self) -> None:
        cfg = Settings(_env_file=None, POSTGRES_PASSWORD="secret", POSTGRES_USER="bench")
        assert "secret" not in cfg.postgres_dsn
        assert cfg.postgres_dsn.startswith("postgresql://bench@")


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_quiets_asyncpg(self) -> None:
        configure_logging(Settings(_env_file=None, LOG_LEVEL="DEBUG"))
        assert logging.getLogger("asyncpg").level == logging.WARNING
