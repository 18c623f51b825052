# tests/unit/test_logger.py
"""
Unit tests for logging helpers
"""

import json
import logging
import pytest

from src.utils.logger import (
    JSONFormatter, PerformanceLogger, timed_operation, get_logger, setup_pipeline_logging
)


def make_record(**extra):
    record = logging.LogRecord(
        name="src.orchestrator.trip_loader",
        level=logging.ERROR,
        pathname=__file__,
        lineno=10,
        msg="Invalid fare_amount: not a decimal number",
        args=None,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Structured log output"""

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry['level'] == "ERROR"
        assert entry['logger'] == "src.orchestrator.trip_loader"
        assert entry['message'] == "Invalid fare_amount: not a decimal number"
        assert 'timestamp' in entry

    def test_extra_fields_are_included(self):
        entry = json.loads(JSONFormatter().format(make_record(error_index=3, error_code="PARSE_ERROR")))

        assert entry['error_index'] == 3
        assert entry['error_code'] == "PARSE_ERROR"
        assert 'msg' not in entry
        assert 'args' not in entry


class TestPerformanceLogger:
    """Operation timing"""

    def test_end_without_start(self, caplog):
        perf = PerformanceLogger("test")

        with caplog.at_level(logging.WARNING, logger="performance.test"):
            assert perf.end_operation("never_started") == 0.0

        assert "was not started" in caplog.text

    def test_timed_operation_records_duration(self):
        with timed_operation("unit", get_logger("test.timed")) as timer:
            pass

        assert timer.duration >= 0.0

    def test_timed_operation_does_not_swallow(self):
        with pytest.raises(RuntimeError):
            with timed_operation("unit", get_logger("test.timed")):
                raise RuntimeError("boom")


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it"""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class TestSetupPipelineLogging:
    """Root logger configuration"""

    def test_log_files_created(self, tmp_path, restore_root_logger):
        setup_pipeline_logging(log_level="INFO", log_dir=str(tmp_path))

        get_logger("test.setup").error("rejected line")

        assert (tmp_path / "taxi_grid_loader.log").exists()
        assert "rejected line" in (tmp_path / "errors.log").read_text(encoding="utf-8")
        assert restore_root_logger.level == logging.INFO

    def test_only_used_third_party_loggers_are_quieted(self, restore_root_logger):
        botocore_level = logging.getLogger('botocore').level

        setup_pipeline_logging(log_level="DEBUG")

        assert logging.getLogger('snowflake').level == logging.WARNING
        assert logging.getLogger('botocore').level == botocore_level
