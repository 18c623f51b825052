# src/processors/batch_accumulator.py
"""
In-memory batch of trips waiting to be written to the store
"""

from types import MappingProxyType
from typing import Dict, Mapping

from src.models.taxi_trip import TaxiTrip, TripKey
from src.utils.exceptions import ConfigurationError


class BatchAccumulator:
    """
    Buffers enriched trips keyed by their TripKey

    A key seen twice keeps the later trip. The accumulator is meant for a
    single writer; it does no locking of its own.
    """

    def __init__(self, batch_size: int):
        if batch_size < 1:
            raise ConfigurationError(
                f"Batch size must be at least 1, got {batch_size}",
                context={'batch_size': batch_size}
            )
        self.batch_size = batch_size
        self._entries: Dict[TripKey, TaxiTrip] = {}

    def put(self, key: TripKey, trip: TaxiTrip) -> int:
        """Insert or overwrite the trip stored under ``key`` and return the batch size"""
        self._entries[key] = trip
        return len(self._entries)

    def should_flush(self) -> bool:
        return len(self._entries) >= self.batch_size

    @property
    def batch(self) -> Mapping[TripKey, TaxiTrip]:
        """Read-only live view of the pending batch"""
        return MappingProxyType(self._entries)

    def drain(self) -> Dict[TripKey, TaxiTrip]:
        """Hand over the whole pending batch and start a new, empty one"""
        drained, self._entries = self._entries, {}
        return drained

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)
