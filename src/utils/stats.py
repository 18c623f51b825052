# src/utils/stats.py
"""
Run counters for the Taxi Trip Grid Loader
"""

import threading
from dataclasses import dataclass
from typing import Dict, List


class StripedCounter:
    """
    Counter whose increments are never lost and whose reads never block

    Every thread adds into its own cell, so a cell has exactly one writer.
    Readers sum the cells without taking a lock; a read taken while another
    thread is incrementing may miss that in-flight increment but never
    observes a value that goes backwards.
    """

    def __init__(self):
        self._cells: Dict[int, List[int]] = {}

    def _cell(self) -> List[int]:
        ident = threading.get_ident()
        cell = self._cells.get(ident)
        if cell is None:
            # setdefault is atomic on a dict
            cell = self._cells.setdefault(ident, [0])
        return cell

    def add(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("Counters only move forward")
        self._cell()[0] += amount

    def increment(self) -> None:
        self.add(1)

    @property
    def value(self) -> int:
        return sum(cell[0] for cell in list(self._cells.values()))

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of the run counters"""
    error_count: int
    batch_count: int
    record_count: int

    def to_dict(self) -> Dict[str, int]:
        return {
            'error_count': self.error_count,
            'batch_count': self.batch_count,
            'record_count': self.record_count,
        }


class LoaderStats:
    """
    Counters for one loader run

    Tracks:
    - Lines rejected by the parser or the grid converter
    - Batches flushed to the store
    - Records flushed to the store (cumulative)

    Safe to read from a monitoring thread while the loader increments.
    """

    def __init__(self):
        self._errors = StripedCounter()
        self._batches = StripedCounter()
        self._records = StripedCounter()

    def increment_error(self) -> int:
        """Count one rejected line and return the running error index"""
        self._errors.increment()
        return self._errors.value

    def record_batch(self, size: int) -> None:
        """Count one flushed batch of ``size`` records"""
        self._records.add(size)
        self._batches.increment()

    @property
    def error_count(self) -> int:
        return self._errors.value

    @property
    def batch_count(self) -> int:
        return self._batches.value

    @property
    def record_count(self) -> int:
        return self._records.value

    def snapshot(self) -> StatsSnapshot:
        return StatsSnapshot(
            error_count=self.error_count,
            batch_count=self.batch_count,
            record_count=self.record_count,
        )

    def __repr__(self) -> str:
        return (
            f"LoaderStats(batch_count={self.batch_count}, "
            f"error_count={self.error_count}, record_count={self.record_count})"
        )
