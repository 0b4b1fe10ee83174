"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from obridge.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    ob = logging.getLogger("obridge")
    ob_level = ob.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    ob.setLevel(ob_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("obridge").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("obridge").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("obridge.bridge").error("bridge.aborted", op="run")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "bridge.aborted"
        assert parsed["op"] == "run"
        assert parsed["level"] == "error"
        assert parsed["logger"] == "obridge.bridge"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("obridge.services.bridge").debug("Linked 2 mention(s) in Notes.md")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Linked 2 mention(s) in Notes.md"
        assert parsed["level"] == "debug"

    def test_notices_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        structlog.get_logger("obridge.notice").info("notice", message="Scan complete!")
        assert capfd.readouterr().err == ""

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("markdown_it").debug("noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
