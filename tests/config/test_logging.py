"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator

import pytest
import structlog

from mdstamp.config.logging import configure_logging, document_context


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    mdstamp_logger = logging.getLogger("mdstamp")
    mdstamp_level = mdstamp_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    mdstamp_logger.setLevel(mdstamp_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("mdstamp").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("mdstamp").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("mdstamp.test")
        log.warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "mdstamp.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("mdstamp.infrastructure.git").debug("git log -1 -- page.md")

        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "git log -1 -- page.md"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "mdstamp.infrastructure.git"

    def test_debug_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("mdstamp.services.evaluate").debug("field skipped")
        assert capfd.readouterr().err == ""

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("pluggy").debug("hook noise")
        assert capfd.readouterr().err == ""

    def test_document_context_tags_records(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with document_context("docs/a.md"):
            logging.getLogger("mdstamp.services.stamp").warning("Failed to stamp")
        logging.getLogger("mdstamp.services.stamp").warning("after")

        first, second = (json.loads(line) for line in capfd.readouterr().err.splitlines())
        assert first["document"] == "docs/a.md"
        assert "document" not in second

    def test_custom_stream(self) -> None:
        stream = io.StringIO()
        configure_logging(log_json=True, stream=stream)
        logging.getLogger("mdstamp.test").warning("to buffer")
        assert json.loads(stream.getvalue())["event"] == "to buffer"

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
