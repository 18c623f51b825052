# src/loaders/store_writer.py
"""
Store writer interface and an in-memory implementation
"""

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from src.models.taxi_trip import TaxiTrip, TripKey
from src.utils.logger import get_logger


class TripStoreWriter(ABC):
    """
    Destination of flushed batches

    Implementations must:
    - apply the whole batch or raise StoreError
    - overwrite by key, so that re-sending a batch changes nothing
    - not keep a reference to the batch once ``write`` returns
    """

    @abstractmethod
    def write(self, batch: Mapping[TripKey, TaxiTrip]) -> None:
        """Apply one batch to the store"""

    def close(self) -> None:
        """Release any resources held by the writer"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class InMemoryTripStore(TripStoreWriter):
    """
    Dict-backed trip store

    Used for dry runs and tests: same upsert semantics as the real store,
    nothing leaves the process.
    """

    def __init__(self):
        self.logger = get_logger(__name__)
        self._trips: Dict[TripKey, TaxiTrip] = {}
        self.write_count = 0

    def write(self, batch: Mapping[TripKey, TaxiTrip]) -> None:
        self._trips.update(batch)
        self.write_count += 1
        self.logger.debug(f"Stored batch of {len(batch)} trips ({len(self._trips)} total)")

    def get(self, key: TripKey) -> Optional[TaxiTrip]:
        return self._trips.get(key)

    def snapshot(self) -> Dict[TripKey, TaxiTrip]:
        return dict(self._trips)

    def __contains__(self, key: TripKey) -> bool:
        return key in self._trips

    def __len__(self) -> int:
        return len(self._trips)
