"""Tests for loguru logging setup."""

import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from schemaledger.config.models import LoggingConfig
from schemaledger.utils.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    """Restore loguru's default sink after each test."""
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestConfigureLogging:
    """Test configure_logging."""

    def test_console_logs_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(level="INFO"))

        logger.info("Applied migration {}", "001")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Applied migration 001" in captured.err

    def test_level_filters_messages(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(level="WARNING"))

        logger.info("hidden")
        logger.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_json_format_serializes(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(format="json"))

        logger.info("structured")

        lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
        record = json.loads(lines[-1])
        assert record["record"]["message"] == "structured"

    def test_file_sink(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "schemaledger.log"
        configure_logging(LoggingConfig(file=log_file))

        logger.warning("to file")
        logger.remove()

        assert "to file" in log_file.read_text()

    def test_stdlib_logging_is_intercepted(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(level="INFO"))

        logging.getLogger("aiosqlite").warning("driver message")

        assert "driver message" in capsys.readouterr().err

    def test_json_file_sink(self, tmp_path: Path) -> None:
        log_file = tmp_path / "schemaledger.jsonl"
        configure_logging(LoggingConfig(format="json", file=log_file))

        logger.info("Applied migration {}", "002")
        logger.remove()

        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["record"]["message"] == "Applied migration 002"
        assert record["record"]["level"]["name"] == "INFO"
