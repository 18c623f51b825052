# src/processors/grid_converter.py
"""
Conversion of geographic coordinates to trip grid cells
"""

import math

from src.models.taxi_trip import Cell, GRID_SIZE
from src.utils.exceptions import OutOfRangeError
from src.utils.logger import get_logger

LAT_DELTA = 0.004491556
LONG_DELTA = 0.005986

# Centre of cell (1, 1)
REFERENCE_LATITUDE = 41.474937
REFERENCE_LONGITUDE = -74.913585

# North-west corner of the grid
START_LATITUDE = REFERENCE_LATITUDE + (LAT_DELTA / 2)
START_LONGITUDE = REFERENCE_LONGITUDE - (LONG_DELTA / 2)

# South-east corner of the grid
END_LATITUDE = START_LATITUDE - (LAT_DELTA * GRID_SIZE)
END_LONGITUDE = START_LONGITUDE + (LONG_DELTA * GRID_SIZE)


class GridConverter:
    """
    Maps a (latitude, longitude) pair onto the 300x300 grid

    x grows southwards from the start latitude, y grows eastwards from
    the start longitude. Points outside the grid rectangle are rejected,
    never clamped.
    """

    def __init__(self):
        self.logger = get_logger(__name__)

    def get_cell(self, latitude: float, longitude: float) -> Cell:
        """
        Args:
            latitude: Degrees north
            longitude: Degrees east (negative in New York)

        Returns:
            Cell with x and y in [1, 300]

        Raises:
            OutOfRangeError: If the point lies outside the grid
        """
        self.logger.debug(f"### Lat: {latitude}, Long {longitude}")

        self.verify_location(latitude, longitude)

        # 1-based grid; min() absorbs float rounding on the far edge
        x = min(int((START_LATITUDE - latitude) / LAT_DELTA) + 1, GRID_SIZE)
        y = min(int(abs(START_LONGITUDE - longitude) / LONG_DELTA) + 1, GRID_SIZE)

        return Cell(x, y)

    @staticmethod
    def verify_location(latitude: float, longitude: float) -> None:
        if not math.isfinite(latitude) or latitude > START_LATITUDE or latitude < END_LATITUDE:
            raise OutOfRangeError("latitude", latitude)
        if not math.isfinite(longitude) or longitude < START_LONGITUDE or longitude > END_LONGITUDE:
            raise OutOfRangeError("longitude", longitude)
