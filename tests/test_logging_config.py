"""Tests for logging configuration and context propagation."""

import io
import json
import logging

import pytest

from cnabledger.logging_config import (
    LogContext,
    LogContextFilter,
    configure_logging,
)


def test_bind_sets_and_restores():
    assert LogContext.get_all() == {}

    with LogContext.bind(correlation_id="c1", file_id="f1"):
        assert LogContext.get_all() == {"correlation_id": "c1", "file_id": "f1"}
        with LogContext.bind(file_id="f2"):
            assert LogContext.get_all() == {"correlation_id": "c1", "file_id": "f2"}
        assert LogContext.get_all()["file_id"] == "f1"

    assert LogContext.get_all() == {}


def test_bind_rejects_unknown_fields():
    with pytest.raises(TypeError):
        LogContext.bind(user="x")


def test_filter_fills_placeholders():
    record = logging.LogRecord("cnabledger.test", logging.INFO, __file__, 1, "msg", (), None)

    LogContextFilter().filter(record)

    assert record.correlation_id == "-"
    assert record.file_id == "-"


def test_json_format(package_logger, capsys):
    configure_logging("INFO", "json")

    with LogContext.bind(correlation_id="c1", file_id="f1"):
        logging.getLogger("cnabledger.test").info("hello %s", "world")

    payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "cnabledger.test"
    assert payload["correlation_id"] == "c1"
    assert payload["file_id"] == "f1"


def test_text_format_and_level(package_logger, capsys):
    configure_logging("warning", "text")
    logger = logging.getLogger("cnabledger.test")

    logger.info("hidden")
    logger.warning("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "WARNING cnabledger.test [-] shown" in err


def test_reconfigure_replaces_handler(package_logger):
    configure_logging("INFO", "text")
    configure_logging("DEBUG", "json")

    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.DEBUG


def test_invalid_settings(package_logger):
    with pytest.raises(ValueError):
        configure_logging("LOUD", "text")
    with pytest.raises(ValueError):
        configure_logging("INFO", "xml")


def test_handler_stream_can_be_replaced(package_logger):
    configure_logging("INFO", "text")
    stream = io.StringIO()

    package_logger.handlers[0].setStream(stream)
    logging.getLogger("cnabledger.test").info("redirected")

    assert "INFO cnabledger.test [-] redirected" in stream.getvalue()
