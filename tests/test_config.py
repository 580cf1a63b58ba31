"""Tests for Settings, ID generation, and the error taxonomy."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from src.config import Settings
from src.errors import DeliveryError, ExtractionError, NotFoundError, TrackerError, ValidationError
from src.ids import UuidIdGenerator


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("STATE_BACKEND", raising=False)
        monkeypatch.delenv("REMINDER_CRON_HOUR", raising=False)
        monkeypatch.delenv("ASSIGNEE_EMAILS", raising=False)
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.state_backend == "memory"
        assert cfg.reminder_cron_hour == 9
        assert cfg.reminder_cron_enabled is False
        assert cfg.assignee_emails == {}

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATE_BACKEND", "supabase")
        monkeypatch.setenv("REMINDER_CRON_HOUR", "7")
        monkeypatch.setenv("ASSIGNEE_EMAILS", '{"Alice": "alice@example.com"}')
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.state_backend == "supabase"
        assert cfg.reminder_cron_hour == 7
        assert cfg.assignee_emails == {"Alice": "alice@example.com"}


class TestIdGenerator:
    def test_prefix(self) -> None:
        assert UuidIdGenerator().new_id("action").startswith("action_")

    def test_rapid_calls_are_unique(self) -> None:
        gen = UuidIdGenerator()
        ids = {gen.new_id("action") for _ in range(10_000)}
        assert len(ids) == 10_000


class TestErrors:
    @pytest.mark.parametrize(
        ("error_cls", "status"),
        [
            (ValidationError, 400),
            (NotFoundError, 404),
            (ExtractionError, 500),
            (DeliveryError, 500),
        ],
    )
    def test_status_codes(self, error_cls: type[TrackerError], status: int) -> None:
        assert error_cls("x").status_code == status

    def test_to_dict(self) -> None:
        err = NotFoundError("Action with id a1 not found", metadata={"id": "a1"})
        assert err.to_dict() == {
            "error": {
                "code": "not_found",
                "message": "Action with id a1 not found",
                "metadata": {"id": "a1"},
            }
        }


class TestServerRunner:
    def test_uses_configured_host_and_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from src.api import server

        monkeypatch.setattr(server.settings, "api_host", "127.0.0.1")
        monkeypatch.setattr(server.settings, "api_port", 9123)
        monkeypatch.setattr(server.settings, "log_level", "DEBUG")
        with patch("src.api.server.uvicorn.run") as mock_run:
            server.run()

        mock_run.assert_called_once_with(
            "src.api.main:app", host="127.0.0.1", port=9123, log_level="debug"
        )
