"""Loader orchestration"""

from .trip_loader import TripLoader, LoadResult, LoaderState

__all__ = ['TripLoader', 'LoadResult', 'LoaderState']
