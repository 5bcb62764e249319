"""Tests for the structlog setup."""

from __future__ import annotations

import pytest
import structlog

from r2c.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_structlog():
    yield
    structlog.reset_defaults()


class TestSetupLogging:
    def test_production_uses_json(self) -> None:
        setup_logging(environment="production", log_level="DEBUG")
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_uses_console(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        setup_logging()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_get_logger_returns_proxy() -> None:
    assert get_logger("r2c.test") is not None
