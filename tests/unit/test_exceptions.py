# tests/unit/test_exceptions.py
"""
Unit tests for the error taxonomy and retry helper
"""

import pytest
from unittest.mock import Mock, patch

from src.utils.exceptions import (
    PipelineError, RecordError, ParseError, OutOfRangeError,
    SourceNotFoundError, StoreError, handle_store_exception, retry_on_exception
)


class TestPipelineError:
    """Structured error base class"""

    def test_defaults(self):
        error = PipelineError("something broke")

        assert error.error_code == "PipelineError"
        assert error.context == {}
        assert str(error) == "PipelineError: something broke"

    def test_str_with_context_and_cause(self):
        cause = ValueError("inner")
        error = SourceNotFoundError("missing", context={'source': 'a.csv'}, cause=cause)

        assert str(error) == "SourceNotFoundError: missing (Context: source=a.csv) (Caused by: inner)"
        assert error.to_dict()['cause'] == "inner"

    def test_record_errors_share_a_base(self):
        assert issubclass(ParseError, RecordError)
        assert issubclass(OutOfRangeError, RecordError)
        assert not issubclass(StoreError, RecordError)
        assert not issubclass(SourceNotFoundError, RecordError)


class TestHandleStoreException:
    """Mapping of raw exceptions onto StoreError"""

    def test_connection_error(self):
        error = handle_store_exception("write", ConnectionError("reset"))

        assert isinstance(error, StoreError)
        assert error.error_code == "NETWORK_ERROR"
        assert error.context['function'] == "write"

    def test_permission_error(self):
        error = handle_store_exception("write", PermissionError("denied"))
        assert error.error_code == "PERMISSION_DENIED"

    def test_other_error(self):
        error = handle_store_exception("write", RuntimeError("odd"), {'table': 'T'})

        assert isinstance(error, StoreError)
        assert error.error_code == "STORE_ERROR"
        assert error.context == {'function': 'write', 'table': 'T'}

    def test_pipeline_error_passes_through(self):
        original = StoreError("already wrapped")
        error = handle_store_exception("write", original, {'attempt': 3})

        assert error is original
        assert error.context == {'attempt': 3}


class TestRetryOnException:
    """Exponential backoff decorator"""

    @patch('src.utils.exceptions.time.sleep')
    def test_succeeds_after_failures(self, mock_sleep):
        func = Mock(side_effect=[ConnectionError("a"), ConnectionError("b"), "ok"])
        func.__name__ = "flaky"

        result = retry_on_exception(max_retries=3, delay_seconds=0.5)(func)()

        assert result == "ok"
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]

    @patch('src.utils.exceptions.time.sleep')
    def test_gives_up(self, mock_sleep):
        func = Mock(side_effect=ConnectionError("down"))
        func.__name__ = "always_down"

        with pytest.raises(StoreError) as exc_info:
            retry_on_exception(max_retries=2)(func)()

        assert func.call_count == 3
        assert exc_info.value.error_code == "NETWORK_ERROR"
        assert isinstance(exc_info.value.cause, ConnectionError)

    def test_unlisted_exception_is_not_retried(self):
        func = Mock(side_effect=KeyError("nope"))
        func.__name__ = "strict"

        with pytest.raises(KeyError):
            retry_on_exception(max_retries=3, exceptions=(ConnectionError,))(func)()

        assert func.call_count == 1
