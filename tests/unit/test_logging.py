"""Unit tests for logging configuration."""

import json
import logging

import pytest

from screenflow.observability.logging import ContextLogger, setup_logging

pytestmark = pytest.mark.usefixtures("reset_screenflow_logging")


def test_setup_logging_configures_screenflow_logger():
    setup_logging("debug")

    logger = logging.getLogger("screenflow")
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1


def test_setup_logging_writes_json_file(tmp_path):
    """Test the optional file handler emits JSON records"""
    # Arrange
    log_file = tmp_path / "screenflow.log"
    setup_logging("INFO", log_file=str(log_file))

    # Act
    logging.getLogger("screenflow.engine").info("dispatched", extra={"event_id": "e1"})
    for handler in logging.getLogger("screenflow").handlers:
        handler.flush()

    # Assert
    record = json.loads(log_file.read_text().strip().splitlines()[-1])
    assert record["message"] == "dispatched"
    assert record["event_id"] == "e1"
    assert record["levelname"] == "INFO"


def test_context_logger_attaches_context(caplog):
    adapter = ContextLogger("tests.context").with_context(session_id="abc")

    with caplog.at_level(logging.INFO, logger="tests.context"):
        adapter.info("hello")

    assert adapter.extra == {"session_id": "abc"}
    assert caplog.records[0].session_id == "abc"
