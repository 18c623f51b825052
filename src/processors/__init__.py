"""Line parsing, grid conversion and batching"""

from .record_parser import TripParser
from .grid_converter import GridConverter
from .batch_accumulator import BatchAccumulator

__all__ = ['TripParser', 'GridConverter', 'BatchAccumulator']
