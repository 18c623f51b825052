"""Utility modules"""

from .logger import get_logger, setup_pipeline_logging, PerformanceLogger, timed_operation
from .stats import LoaderStats, StatsSnapshot, StripedCounter
from .exceptions import (
    PipelineError, ConfigurationError, RecordError, ParseError, OutOfRangeError,
    SourceNotFoundError, SourceReadError, StoreError,
    handle_store_exception, retry_on_exception
)
