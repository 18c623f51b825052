"""Data models"""

from .taxi_trip import Cell, TaxiTrip, TripKey, derive_trip_key, GRID_SIZE

__all__ = ['Cell', 'TaxiTrip', 'TripKey', 'derive_trip_key', 'GRID_SIZE']
