"""Tests for the job logging helpers."""

import logging
from uuid import UUID

import pytest

from jobrunner.boundary.db.models.job_model import JobStatus
from jobrunner.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)


class TestSafeLogValue:
    """Test suite for safe_log_value."""

    def test_enum_should_log_its_value(self) -> None:
        assert safe_log_value(JobStatus.RUNNING) == JobStatus.RUNNING.value

    def test_uuid_should_log_canonical_form(self) -> None:
        job_id = UUID("12345678-1234-5678-1234-567812345678")
        assert safe_log_value(job_id) == "12345678-1234-5678-1234-567812345678"

    def test_collections_should_log_size_only(self) -> None:
        assert safe_log_value({"a": 1, "b": 2}) == "dict(2 keys)"
        assert safe_log_value([1, 2, 3]) == "list(3 items)"

    def test_long_string_should_be_truncated(self) -> None:
        result = safe_log_value("x" * 20, max_length=5)
        assert result.startswith("xxxxx... (truncated, 20 total)")


class TestLogWithContext:
    """Test suite for the record-attribute logging helpers."""

    def test_context_should_be_attached_to_record(self, caplog: pytest.LogCaptureFixture) -> None:
        # Arrange
        logger = logging.getLogger("jobrunner.test")

        # Act
        with caplog.at_level(logging.INFO, logger="jobrunner.test"):
            log_with_context(logger, logging.INFO, "step done", step="extract", attempts=2)

        # Assert
        record = caplog.records[-1]
        assert record.step == "extract"
        assert record.attempts == "2"

    def test_exception_should_log_type_and_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        # Arrange
        logger = logging.getLogger("jobrunner.test")
        exc = RuntimeError("boom")

        # Act
        with caplog.at_level(logging.ERROR, logger="jobrunner.test"):
            log_exception_with_context(logger, "cycle failed", exc, job_id="j1")

        # Assert
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.error_type == "RuntimeError"
        assert record.error_msg == "boom"
        assert record.job_id == "j1"
        assert record.exc_info[1] is exc
