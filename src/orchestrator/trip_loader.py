# src/orchestrator/trip_loader.py
"""
Streaming loader driving trip lines from a file into the trip store
"""

import time
from contextlib import closing
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Union

from src.loaders.store_writer import TripStoreWriter
from src.models.taxi_trip import derive_trip_key
from src.processors.batch_accumulator import BatchAccumulator
from src.processors.grid_converter import GridConverter
from src.processors.record_parser import TripParser
from src.utils.exceptions import (
    PipelineError, RecordError, SourceNotFoundError, SourceReadError, handle_store_exception
)
from src.utils.logger import get_logger, PerformanceLogger, timed_operation
from src.utils.stats import LoaderStats


class LoaderState(Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    FLUSHING = "flushing"
    DRAINING_FINAL = "draining_final"
    DONE = "done"
    FAILED = "failed"


@dataclass
class LoadResult:
    """Results from one load run"""
    status: str
    source: str
    records_loaded: int
    batches_flushed: int
    error_count: int
    processing_time_seconds: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status,
            'source': self.source,
            'records_loaded': self.records_loaded,
            'batches_flushed': self.batches_flushed,
            'error_count': self.error_count,
            'processing_time_seconds': self.processing_time_seconds,
        }


class TripLoader:
    """
    Loads a trip file into the store in paced batches

    Every line goes through parse -> pickup/dropoff cell conversion ->
    key derivation -> batch. A line that fails parsing or conversion is
    logged, counted and dropped; the stream carries on. When the batch
    reaches ``batch_size`` it is written to the store before the next line
    is read, then the loader pauses for ``pause_seconds``. Whatever is left
    at the end of the file is flushed regardless of its size.
    """

    def __init__(
        self,
        source_path: Union[str, Path],
        store_writer: TripStoreWriter,
        batch_size: int = 1000,
        pause_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        stats: Optional[LoaderStats] = None,
        parser: Optional[TripParser] = None,
        converter: Optional[GridConverter] = None
    ):
        """
        Args:
            source_path: Path of the trip file
            store_writer: Destination of flushed batches, already connected
            batch_size: Number of trips per flush
            pause_seconds: Delay after every flush
            sleep: Delay function, swapped out in tests
            stats: Counters to update; a fresh set is created when omitted
            parser: Line parser
            converter: Coordinate to cell converter
        """
        self.source_path = Path(source_path)
        self.store_writer = store_writer
        self.accumulator = BatchAccumulator(batch_size)
        self.pause_seconds = pause_seconds
        self.sleep = sleep
        self.stats = stats if stats is not None else LoaderStats()
        self.parser = parser or TripParser()
        self.converter = converter or GridConverter()

        self.logger = get_logger(__name__)
        self.performance_logger = PerformanceLogger(__name__)
        self.state = LoaderState.IDLE
        self._read_error = None

    @property
    def queue_size(self) -> int:
        return len(self.accumulator)

    def load(self) -> LoadResult:
        """
        Stream the whole source file into the store

        Returns:
            LoadResult with the run counters

        Raises:
            SourceNotFoundError: If the source file does not exist
            SourceReadError: If reading fails part way (after the final flush)
            StoreError: If the store rejects a batch
        """
        if not self.source_path.is_file():
            self.state = LoaderState.FAILED
            raise SourceNotFoundError(
                f"File not found: {self.source_path}",
                error_code="FILE_NOT_FOUND",
                context={'source': str(self.source_path)}
            )

        self.logger.info(f"Loading file {self.source_path}")
        self._read_error = None

        try:
            with timed_operation("load_trip_file", self.logger) as timer:
                self.state = LoaderState.STREAMING
                with closing(self._read_lines()) as lines:
                    for line in lines:
                        self.process_line(line)

                # last batch
                self.state = LoaderState.DRAINING_FINAL
                self.flush()
        except Exception:
            self.state = LoaderState.FAILED
            raise

        snapshot = self.stats.snapshot()
        self.performance_logger.log_data_metrics(
            source=str(self.source_path),
            total_records=snapshot.record_count,
            batches=snapshot.batch_count,
            errors=snapshot.error_count,
            processing_time_seconds=timer.duration,
            records_per_second=snapshot.record_count / timer.duration if timer.duration > 0 else 0
        )

        read_error = self._read_error
        if read_error is not None:
            self.state = LoaderState.FAILED
            raise SourceReadError(
                f"Failed reading {self.source_path}: {str(read_error)}",
                context={'source': str(self.source_path), **snapshot.to_dict()},
                cause=read_error
            ) from read_error

        self.state = LoaderState.DONE
        self.logger.info(f"Finished loading {self.source_path}: {self.stats}")

        return LoadResult(
            status="completed_with_errors" if snapshot.error_count else "completed",
            source=str(self.source_path),
            records_loaded=snapshot.record_count,
            batches_flushed=snapshot.batch_count,
            error_count=snapshot.error_count,
            processing_time_seconds=timer.duration
        )

    def _read_lines(self) -> Iterator[str]:
        """
        Yield the lines of the source file

        Stops quietly at the first read or decode failure and keeps the
        error for ``load`` to raise after the final flush. Failures raised
        by the caller while handling a line never reach this handler.
        """
        try:
            with self.source_path.open('r', encoding='utf-8') as stream:
                for line in stream:
                    yield line
        except (OSError, UnicodeDecodeError) as e:
            self._read_error = e
            self.logger.error(f"Reading {self.source_path} failed: {str(e)}", exc_info=True)

    def process_line(self, line: str) -> bool:
        """
        Parse, enrich and batch one input line

        Returns:
            True if the line ended up in the batch, False if it was dropped
        """
        try:
            trip = self.parser.parse_line(line)
            trip.assign_cells(
                self.converter.get_cell(trip.pickup_latitude, trip.pickup_longitude),
                self.converter.get_cell(trip.dropoff_latitude, trip.dropoff_longitude)
            )
        except RecordError as e:
            error_index = self.stats.increment_error()
            self.logger.error(
                f"{e}\n Line:{line.rstrip()} - Error #{error_index}",
                extra={'error_code': e.error_code, 'error_index': error_index}
            )
            return False

        self.accumulator.put(derive_trip_key(trip), trip)

        if self.accumulator.should_flush():
            self.flush()

        return True

    def flush(self) -> int:
        """
        Write the pending batch to the store, then pause

        Returns:
            Number of trips flushed (0 when there was nothing to write)
        """
        if self.accumulator.is_empty:
            return 0

        previous_state = self.state
        self.state = LoaderState.FLUSHING

        try:
            self.store_writer.write(self.accumulator.batch)
        except PipelineError:
            raise
        except Exception as e:
            raise handle_store_exception(
                "write", e, {'batch_size': len(self.accumulator)}
            ) from e

        flushed = len(self.accumulator.drain())
        self.stats.record_batch(flushed)
        self.logger.debug(f"Batch processed. #{self.stats.batch_count} ({flushed} trips)")

        self._pause()

        self.state = previous_state
        return flushed

    def _pause(self) -> None:
        if self.pause_seconds <= 0:
            return

        self.logger.info(f"Pausing for {int(self.pause_seconds * 1000)} milliseconds")
        # time.sleep resumes after EINTR on its own; an injected sleep may not
        try:
            self.sleep(self.pause_seconds)
        except InterruptedError as e:
            self.logger.info(f"Caught {e!r} while pausing")
