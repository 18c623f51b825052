"""Store writers"""

from .store_writer import TripStoreWriter, InMemoryTripStore
from .snowflake_loader import SnowflakeTripWriter

__all__ = ['TripStoreWriter', 'InMemoryTripStore', 'SnowflakeTripWriter']
