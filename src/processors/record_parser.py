# src/processors/record_parser.py
"""
Parser turning raw delimited lines into trip records
"""

import math
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Sequence

from src.models.taxi_trip import TaxiTrip
from src.utils.exceptions import ParseError

DELIMITER = ","
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Fares are stored as NUMBER(12, 2)
FARE_PRECISION = Decimal("0.01")
MAX_FARE = Decimal("9999999999.99")

# Leading columns of every input line; anything after them is ignored
FIELD_NAMES = (
    'medallion',
    'pickup_datetime',
    'dropoff_datetime',
    'pickup_latitude',
    'pickup_longitude',
    'dropoff_latitude',
    'dropoff_longitude',
    'fare_amount',
)


class TripParser:
    """
    Turns one line of the input file into a TaxiTrip

    The parser is stateless: every call depends on its input only.
    Coordinates are checked to be numbers here; whether they fall on
    the grid is the converter's business.
    """

    def __init__(self, delimiter: str = DELIMITER, timestamp_format: str = TIMESTAMP_FORMAT):
        self.delimiter = delimiter
        self.timestamp_format = timestamp_format

    def parse_line(self, line: str) -> TaxiTrip:
        return self.parse_fields(line.rstrip("\r\n").split(self.delimiter))

    def parse_fields(self, fields: Sequence[str]) -> TaxiTrip:
        """
        Build a trip from the already split fields of one line

        Args:
            fields: Raw text fields in input order

        Returns:
            TaxiTrip without grid cells

        Raises:
            ParseError: If a required field is missing or malformed
        """
        if len(fields) < len(FIELD_NAMES):
            raise ParseError(
                "field count",
                f"expected at least {len(FIELD_NAMES)} fields, got {len(fields)}",
                len(fields)
            )

        values = dict(zip(FIELD_NAMES, (f.strip() for f in fields)))

        medallion = values['medallion']
        if not medallion:
            raise ParseError('medallion', "vehicle id is empty")

        return TaxiTrip(
            medallion=medallion,
            pickup_datetime=self._parse_timestamp('pickup_datetime', values['pickup_datetime']),
            dropoff_datetime=self._parse_timestamp('dropoff_datetime', values['dropoff_datetime']),
            pickup_latitude=self._parse_coordinate('pickup_latitude', values['pickup_latitude']),
            pickup_longitude=self._parse_coordinate('pickup_longitude', values['pickup_longitude']),
            dropoff_latitude=self._parse_coordinate('dropoff_latitude', values['dropoff_latitude']),
            dropoff_longitude=self._parse_coordinate('dropoff_longitude', values['dropoff_longitude']),
            fare_amount=self._parse_fare(values['fare_amount']),
        )

    def _parse_timestamp(self, name: str, text: str) -> datetime:
        try:
            return datetime.strptime(text, self.timestamp_format)
        except ValueError as e:
            raise ParseError(name, str(e), text) from e

    @staticmethod
    def _parse_coordinate(name: str, text: str) -> float:
        try:
            value = float(text)
        except ValueError as e:
            raise ParseError(name, "not a number", text) from e
        if not math.isfinite(value):
            raise ParseError(name, "not a finite number", text)
        return value

    @staticmethod
    def _parse_fare(text: str) -> Decimal:
        try:
            value = Decimal(text)
        except InvalidOperation as e:
            raise ParseError('fare_amount', "not a decimal number", text) from e
        if not value.is_finite():
            raise ParseError('fare_amount', "not a finite number", text)
        if value < 0:
            raise ParseError('fare_amount', "cannot be negative", text)
        if value > MAX_FARE:
            raise ParseError('fare_amount', "too large", text)
        if value != value.quantize(FARE_PRECISION):
            raise ParseError('fare_amount', "more than two decimal places", text)
        return value
