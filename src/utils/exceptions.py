# src/utils/exceptions.py
"""
Custom exceptions for the Taxi Trip Grid Loader
"""

import functools
import time
from typing import Optional, Dict, Any


class PipelineError(Exception):
    """
    Base exception for all loader errors

    Provides structured error handling with context information
    for better debugging and monitoring
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize pipeline error

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context,
            'cause': str(self.cause) if self.cause else None
        }

    def __str__(self) -> str:
        base_msg = f"{self.error_code}: {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" (Context: {context_str})"
        if self.cause:
            base_msg += f" (Caused by: {self.cause})"
        return base_msg


class ConfigurationError(PipelineError):
    """
    Raised when there are configuration issues

    Examples:
    - Missing store credentials
    - Batch size below one
    - Negative pause interval
    """
    pass


class RecordError(PipelineError):
    """
    Base class for per-line errors

    A record error never stops the stream: the offending line is
    dropped, logged and counted.
    """
    pass


class ParseError(RecordError):
    """Raised when a raw line cannot be turned into a trip record"""

    def __init__(self, field: str, reason: str, value: Any = None):
        context = {'field': field}
        if value is not None:
            context['value'] = value
        super().__init__(
            f"Invalid {field}: {reason}",
            error_code="PARSE_ERROR",
            context=context
        )
        self.field = field
        self.reason = reason
        self.value = value


class OutOfRangeError(RecordError):
    """Raised when a coordinate falls outside the grid rectangle"""

    def __init__(self, axis: str, value: float):
        super().__init__(
            f"{axis.capitalize()} {value} is out of range",
            error_code="OUT_OF_RANGE",
            context={'axis': axis, 'value': value}
        )
        self.axis = axis
        self.value = value


class SourceNotFoundError(PipelineError):
    """
    Raised when the input file does not exist

    Fatal: the run aborts before any line is read.
    """
    pass


class SourceReadError(PipelineError):
    """Raised when the input stream fails part way through a run"""
    pass


class StoreError(PipelineError):
    """
    Raised when a batch cannot be applied to the remote store

    Examples:
    - Store connection failures
    - SQL execution errors
    - Staging upload failures
    """
    pass


# Utility functions for exception handling

def handle_store_exception(
    func_name: str,
    exception: Exception,
    context: Optional[Dict[str, Any]] = None
) -> PipelineError:
    """
    Convert generic exceptions raised while talking to the store

    Args:
        func_name: Name of the function where error occurred
        exception: Original exception
        context: Additional context information

    Returns:
        Appropriate PipelineError subclass
    """
    if isinstance(exception, PipelineError):
        exception.context.update(context or {})
        return exception

    error_context = {
        'function': func_name,
        **(context or {})
    }

    if isinstance(exception, (ConnectionError, TimeoutError)):
        return StoreError(
            f"Network error in {func_name}: {str(exception)}",
            error_code="NETWORK_ERROR",
            context=error_context,
            cause=exception
        )

    elif isinstance(exception, PermissionError):
        return StoreError(
            f"Permission denied in {func_name}: {str(exception)}",
            error_code="PERMISSION_DENIED",
            context=error_context,
            cause=exception
        )

    else:
        return StoreError(
            f"Store operation failed in {func_name}: {str(exception)}",
            error_code="STORE_ERROR",
            context=error_context,
            cause=exception
        )


def retry_on_exception(
    max_retries: int = 3,
    delay_seconds: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: tuple = (Exception,)
):
    """
    Decorator for retrying functions on specific exceptions

    Args:
        max_retries: Maximum number of retry attempts
        delay_seconds: Initial delay between retries
        backoff_factor: Multiplier for delay on each retry
        exceptions: Tuple of exception types to retry on

    Returns:
        Decorated function with retry logic
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)

                except exceptions as e:
                    last_exception = e

                    if attempt == max_retries:
                        break

                    delay = delay_seconds * (backoff_factor ** attempt)
                    time.sleep(delay)

            raise handle_store_exception(
                func.__name__,
                last_exception,
                {'max_retries': max_retries, 'final_attempt': True}
            ) from last_exception

        return wrapper
    return decorator
