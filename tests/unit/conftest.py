# tests/unit/conftest.py
"""
Shared pytest fixtures for the loader tests
"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

from src.config.settings import SnowflakeConfig
from src.loaders.store_writer import InMemoryTripStore
from src.models.taxi_trip import Cell, TaxiTrip


def make_line(index: int = 0, **overrides) -> str:
    """Build one valid input line; keyword arguments replace single fields"""
    fields = {
        'medallion': f"MED{index:05d}",
        'pickup_datetime': "2013-01-01 00:00:00",
        'dropoff_datetime': "2013-01-01 00:02:00",
        'pickup_latitude': "40.715008",
        'pickup_longitude': "-73.955170",
        'dropoff_latitude': "40.720386",
        'dropoff_longitude': "-73.962440",
        'fare_amount': "3.50",
    }
    fields.update(overrides)
    # trailing columns the loader ignores
    return ",".join(list(fields.values()) + ["CSH", "0.50", "0.00"])


@pytest.fixture
def line_factory():
    """Expose make_line to tests"""
    return make_line


@pytest.fixture
def trip_file(tmp_path):
    """Write the given lines to a trip file and return its path"""
    def _write(lines):
        path = tmp_path / "trips.csv"
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def memory_store():
    return InMemoryTripStore()


@pytest.fixture
def no_sleep():
    """Stand-in for time.sleep that records the requested delays"""
    return Mock(return_value=None)


@pytest.fixture
def sample_trip():
    """Trip with both grid cells assigned"""
    trip = TaxiTrip(
        medallion="07290D3599E7A0D62097A346EFCC1FB5",
        pickup_datetime=datetime(2013, 1, 1, 0, 0, 0),
        dropoff_datetime=datetime(2013, 1, 1, 0, 2, 0),
        pickup_latitude=40.715008,
        pickup_longitude=-73.955170,
        dropoff_latitude=40.720386,
        dropoff_longitude=-73.962440,
        fare_amount=Decimal("3.50"),
    )
    trip.assign_cells(Cell(170, 161), Cell(169, 160))
    return trip


@pytest.fixture
def snowflake_config_minimal():
    """Create minimal Snowflake configuration for testing"""
    return SnowflakeConfig(
        account="test",
        username="test",
        password="test",
        warehouse="test",
        database="test",
        schema="test",
        max_retries=2
    )
