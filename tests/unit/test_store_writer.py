# tests/unit/test_store_writer.py
"""
Unit tests for the in-memory trip store
"""

import dataclasses
from decimal import Decimal

from src.loaders.store_writer import InMemoryTripStore
from src.models.taxi_trip import Cell, derive_trip_key


def build_batch(sample_trip, count):
    batch = {}
    for i in range(count):
        trip = dataclasses.replace(sample_trip, medallion=f"M{i}")
        trip.assign_cells(sample_trip.pickup_cell, sample_trip.dropoff_cell)
        batch[derive_trip_key(trip)] = trip
    return batch


class TestInMemoryTripStore:
    """Upsert semantics of the in-memory store"""

    def test_write_stores_every_trip(self, sample_trip):
        store = InMemoryTripStore()
        batch = build_batch(sample_trip, 3)

        store.write(batch)

        assert len(store) == 3
        for key in batch:
            assert key in store

    def test_rewriting_a_batch_is_idempotent(self, sample_trip):
        once = InMemoryTripStore()
        twice = InMemoryTripStore()
        batch = build_batch(sample_trip, 4)

        once.write(batch)
        twice.write(batch)
        twice.write(batch)

        assert once.snapshot() == twice.snapshot()
        assert twice.write_count == 2

    def test_later_batch_overwrites_same_key(self, sample_trip):
        store = InMemoryTripStore()
        key = derive_trip_key(sample_trip)
        corrected = dataclasses.replace(sample_trip, fare_amount=Decimal("4.00"))
        corrected.assign_cells(sample_trip.pickup_cell, Cell(1, 1))

        store.write({key: sample_trip})
        store.write({derive_trip_key(corrected): corrected})

        assert len(store) == 1
        assert store.get(key).fare_amount == Decimal("4.00")

    def test_store_does_not_keep_the_batch(self, sample_trip):
        store = InMemoryTripStore()
        batch = build_batch(sample_trip, 2)

        store.write(batch)
        batch.clear()

        assert len(store) == 2

    def test_context_manager(self, sample_trip):
        with InMemoryTripStore() as store:
            store.write(build_batch(sample_trip, 1))
        assert len(store) == 1
