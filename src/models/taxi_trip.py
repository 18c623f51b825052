# src/models/taxi_trip.py
"""
Data models for taxi trip records and their grid cells
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict, Any

from src.utils.exceptions import OutOfRangeError

GRID_SIZE = 300


@dataclass(frozen=True, order=True)
class Cell:
    """
    One square of the 300x300 trip grid

    Coordinates are 1-based: the north-west corner of the grid is (1, 1).
    Cells compare and sort by (x, y).
    """
    x: int
    y: int

    def __post_init__(self):
        if not 1 <= self.x <= GRID_SIZE:
            raise OutOfRangeError("cell x", self.x)
        if not 1 <= self.y <= GRID_SIZE:
            raise OutOfRangeError("cell y", self.y)

    def __str__(self) -> str:
        return f"{self.x}.{self.y}"


@dataclass
class TaxiTrip:
    """
    A single taxi trip as read from the input file

    ``pickup_cell`` and ``dropoff_cell`` are derived from the coordinates
    and stay unset until both have been converted; use ``assign_cells``
    to set them together.
    """
    medallion: str
    pickup_datetime: datetime
    dropoff_datetime: datetime
    pickup_latitude: float
    pickup_longitude: float
    dropoff_latitude: float
    dropoff_longitude: float
    fare_amount: Decimal
    pickup_cell: Optional[Cell] = field(default=None, compare=False)
    dropoff_cell: Optional[Cell] = field(default=None, compare=False)

    def assign_cells(self, pickup_cell: Cell, dropoff_cell: Cell) -> None:
        self.pickup_cell = pickup_cell
        self.dropoff_cell = dropoff_cell

    @property
    def has_cells(self) -> bool:
        return self.pickup_cell is not None and self.dropoff_cell is not None

    @property
    def trip_duration_seconds(self) -> float:
        return (self.dropoff_datetime - self.pickup_datetime).total_seconds()

    def to_record(self) -> Dict[str, Any]:
        """
        Flatten the trip into a row for the store

        Raises:
            ValueError: If the grid cells have not been assigned
        """
        if not self.has_cells:
            raise ValueError(f"Trip {self.medallion} has no grid cells assigned")

        return {
            'medallion': self.medallion,
            'pickup_datetime': self.pickup_datetime,
            'dropoff_datetime': self.dropoff_datetime,
            'pickup_latitude': self.pickup_latitude,
            'pickup_longitude': self.pickup_longitude,
            'dropoff_latitude': self.dropoff_latitude,
            'dropoff_longitude': self.dropoff_longitude,
            'fare_amount': self.fare_amount,
            'pickup_cell_x': self.pickup_cell.x,
            'pickup_cell_y': self.pickup_cell.y,
            'dropoff_cell_x': self.dropoff_cell.x,
            'dropoff_cell_y': self.dropoff_cell.y,
        }


@dataclass(frozen=True)
class TripKey:
    """Identity of a trip in the store: same key, same logical trip"""
    medallion: str
    pickup_datetime: datetime
    pickup_cell: Cell

    @classmethod
    def from_trip(cls, trip: TaxiTrip) -> 'TripKey':
        if trip.pickup_cell is None:
            raise ValueError(f"Trip {trip.medallion} has no pickup cell assigned")
        return cls(trip.medallion, trip.pickup_datetime, trip.pickup_cell)

    def __str__(self) -> str:
        return f"{self.medallion}@{self.pickup_datetime.isoformat()}#{self.pickup_cell}"


def derive_trip_key(trip: TaxiTrip) -> TripKey:
    return TripKey.from_trip(trip)
