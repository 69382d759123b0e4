"""Tests for logging configuration and formatters."""

import json
import logging

import pytest

from statepaths.observability.logging import (
    ROOT_LOGGER,
    HumanReadableFormatter,
    StructuredFormatter,
    configure_logging,
    get_context,
    log_context,
)


def make_record(message: str = "Generated 3 paths", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="statepaths.core.path",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def restore_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestStructuredFormatter:
    """Test JSON output."""

    def test_basic_fields(self):
        data = json.loads(StructuredFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "statepaths.core.path"
        assert data["message"] == "Generated 3 paths"
        assert "location" not in data

    def test_location_and_extra_fields(self):
        formatter = StructuredFormatter(include_location=True, extra_fields={"suite": "checkout"})

        data = json.loads(formatter.format(make_record()))

        assert data["location"]["line"] == 10
        assert data["suite"] == "checkout"

    def test_context_fields(self):
        with log_context(path="A -> B"):
            data = json.loads(StructuredFormatter().format(make_record()))

        assert data["context"] == {"path": "A -> B"}


class TestHumanReadableFormatter:
    """Test development output."""

    def test_plain_output(self):
        output = HumanReadableFormatter(use_colors=False).format(make_record())

        assert "INFO" in output
        assert "[statepaths.core.path] Generated 3 paths" in output

    def test_context_suffix(self):
        with log_context(segment="NEXT -> end"):
            output = HumanReadableFormatter(use_colors=False).format(make_record())

        assert 'context={"segment": "NEXT -> end"}' in output


class TestLogContext:
    """Test context binding."""

    def test_nested_context(self):
        with log_context(path="A"):
            with log_context(segment="B"):
                assert get_context() == {"path": "A", "segment": "B"}
            assert get_context() == {"path": "A"}
        assert get_context() == {}


class TestConfigureLogging:
    """Test configure_logging."""

    def test_configures_package_logger(self, restore_logger):
        logger = configure_logging(level="debug", json_format=True)

        assert logger is restore_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
        assert logger.propagate is False

    def test_reconfiguring_replaces_handler(self, restore_logger):
        configure_logging()
        configure_logging()

        assert len(restore_logger.handlers) == 1
        assert isinstance(restore_logger.handlers[0].formatter, HumanReadableFormatter)
