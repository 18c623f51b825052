# src/loaders/snowflake_loader.py
"""
Snowflake-backed trip store for the Taxi Trip Grid Loader
"""

from typing import Mapping, List, Tuple
import pandas as pd
import snowflake.connector
from snowflake.connector.pandas_tools import write_pandas

from src.config.settings import SnowflakeConfig
from src.loaders.store_writer import TripStoreWriter
from src.models.taxi_trip import TaxiTrip, TripKey
from src.utils.logger import get_logger
from src.utils.exceptions import (
    PipelineError, StoreError, handle_store_exception, retry_on_exception
)

TRIP_COLUMNS: List[Tuple[str, str]] = [
    ('medallion', 'VARCHAR(64) NOT NULL'),
    ('pickup_datetime', 'TIMESTAMP_NTZ NOT NULL'),
    ('dropoff_datetime', 'TIMESTAMP_NTZ'),
    ('pickup_latitude', 'FLOAT'),
    ('pickup_longitude', 'FLOAT'),
    ('dropoff_latitude', 'FLOAT'),
    ('dropoff_longitude', 'FLOAT'),
    ('fare_amount', 'NUMBER(12, 2)'),
    ('pickup_cell_x', 'SMALLINT NOT NULL'),
    ('pickup_cell_y', 'SMALLINT NOT NULL'),
    ('dropoff_cell_x', 'SMALLINT'),
    ('dropoff_cell_y', 'SMALLINT'),
]

# Columns making up a TripKey
KEY_COLUMNS = ['medallion', 'pickup_datetime', 'pickup_cell_x', 'pickup_cell_y']


class SnowflakeTripWriter(TripStoreWriter):
    """
    Writes trip batches into a keyed Snowflake table

    One connection is opened on first use and reused for every flush.
    Each batch is uploaded to a temporary staging table and merged into
    the target table on the trip key, so replaying a batch overwrites
    rows instead of duplicating them.
    """

    def __init__(self, config: SnowflakeConfig):
        """
        Args:
            config: Snowflake configuration object
        """
        self.config = config
        self.table_name = config.table_name.upper()
        self.staging_table_name = f"{self.table_name}_STAGING"
        self.logger = get_logger(__name__)
        self._connection = None

    def connect(self):
        """
        Open the store connection, or return the one already open

        Raises:
            StoreError: If Snowflake cannot be reached
        """
        if self._connection is not None:
            return self._connection

        try:
            self._connection = snowflake.connector.connect(
                account=self.config.account,
                user=self.config.username,
                password=self.config.password,
                warehouse=self.config.warehouse,
                database=self.config.database,
                schema=self.config.schema,
                role=self.config.role
            )
        except snowflake.connector.errors.Error as e:
            self.logger.error(f"Failed to connect to Snowflake: {str(e)}")
            raise StoreError(
                f"Snowflake connection failed: {str(e)}",
                error_code="STORE_UNAVAILABLE",
                context={'account': self.config.account},
                cause=e
            ) from e

        self.logger.info(f"Connected to Snowflake account {self.config.account}")
        return self._connection

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            self.logger.info("Snowflake connection closed")

    def create_trip_table(self) -> None:
        """
        Create the trip table if it does not exist yet

        Raises:
            StoreError: If table creation fails
        """
        key_columns = ", ".join(KEY_COLUMNS)
        column_definitions = ",\n            ".join(
            f"{name} {sql_type}" for name, sql_type in TRIP_COLUMNS
        )
        create_table_sql = f"""
        CREATE TABLE IF NOT EXISTS {self.table_name} (
            {column_definitions},
            _load_timestamp TIMESTAMP_NTZ DEFAULT CURRENT_TIMESTAMP(),
            PRIMARY KEY ({key_columns})
        )
        """

        connection = self.connect()
        try:
            cursor = connection.cursor()
            try:
                cursor.execute(create_table_sql)
            finally:
                cursor.close()
        except snowflake.connector.errors.Error as e:
            raise StoreError(
                f"Failed to create table {self.table_name}: {str(e)}",
                context={'table': self.table_name},
                cause=e
            ) from e

        self.logger.info(f"Successfully created/verified table: {self.table_name}")

    def write(self, batch: Mapping[TripKey, TaxiTrip]) -> None:
        """
        Upsert one batch of trips

        Transient connector errors are retried with exponential backoff
        before giving up.

        Raises:
            StoreError: If the batch could not be applied
        """
        if not batch:
            return

        df = self.batch_to_dataframe(batch)

        merge = retry_on_exception(
            max_retries=self.config.max_retries,
            exceptions=(snowflake.connector.errors.Error,)
        )(self._merge_dataframe)

        try:
            rows_merged = merge(df)
        except PipelineError:
            raise
        except Exception as e:
            raise handle_store_exception(
                "write", e, {'table': self.table_name, 'batch_size': len(df)}
            ) from e

        self.logger.info(f"Merged batch of {len(df)} trips into {self.table_name} ({rows_merged} rows affected)")

    @staticmethod
    def batch_to_dataframe(batch: Mapping[TripKey, TaxiTrip]) -> pd.DataFrame:
        df = pd.DataFrame(
            [trip.to_record() for trip in batch.values()],
            columns=[name for name, _ in TRIP_COLUMNS]
        )
        df['fare_amount'] = df['fare_amount'].astype(float)
        return df

    def _merge_dataframe(self, df: pd.DataFrame) -> int:
        connection = self.connect()

        success, _, nrows, _ = write_pandas(
            conn=connection,
            df=df,
            table_name=self.staging_table_name,
            database=self.config.database,
            schema=self.config.schema,
            auto_create_table=True,
            overwrite=True,
            table_type='temporary',
            quote_identifiers=False,
            use_logical_type=True
        )
        if not success or nrows != len(df):
            raise StoreError(
                f"Staging upload incomplete: {nrows} of {len(df)} rows",
                context={'table': self.staging_table_name}
            )

        cursor = connection.cursor()
        try:
            cursor.execute(self._merge_sql())
            result = cursor.fetchone()
        finally:
            cursor.close()

        # MERGE reports (rows inserted, rows updated)
        return sum(result) if result else 0

    def _merge_sql(self) -> str:
        columns = [name for name, _ in TRIP_COLUMNS]
        on_clause = " AND ".join(f"t.{c} = s.{c}" for c in KEY_COLUMNS)
        update_clause = ", ".join(f"t.{c} = s.{c}" for c in columns if c not in KEY_COLUMNS)
        insert_columns = ", ".join(columns)
        insert_values = ", ".join(f"s.{c}" for c in columns)

        return f"""
        MERGE INTO {self.table_name} t
        USING {self.staging_table_name} s
        ON {on_clause}
        WHEN MATCHED THEN UPDATE SET {update_clause}
        WHEN NOT MATCHED THEN INSERT ({insert_columns}) VALUES ({insert_values})
        """
