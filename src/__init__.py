"""
Taxi Trip Grid Loader

Streams a delimited file of taxi trips, assigns each pickup and dropoff
a cell on a 300x300 grid and upserts the trips in paced batches into a
keyed Snowflake table.
"""

__version__ = "1.0.0"
__author__ = "Data Engineering Team"
