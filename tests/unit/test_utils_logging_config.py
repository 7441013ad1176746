"""Tests for forge_scout/utils/logging_config.py."""

import json

import pytest
import structlog

from forge_scout.utils.logging_config import configure_logging


class TestConfigureLogging:
    def test_json_on_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("INFO")

        structlog.get_logger("test").info("tier_failed", provider="gitlab", tier="cli")

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err)
        assert event["event"] == "tier_failed"
        assert event["level"] == "info"
        assert event["provider"] == "gitlab"
        assert "timestamp" in event

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("warning")

        structlog.get_logger("test").debug("hidden")
        structlog.get_logger("test").warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_unknown_level_defaults_to_warning(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("chatty")

        structlog.get_logger("test").info("hidden")

        assert capsys.readouterr().err == ""
