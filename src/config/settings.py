"""
Configuration management for the Taxi Trip Grid Loader
"""

import os
from dataclasses import dataclass
from typing import Optional, List
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass
class SnowflakeConfig:
    """Snowflake connection configuration for the trip store"""
    account: str
    username: str
    password: str
    warehouse: str
    database: str
    schema: str
    role: Optional[str] = None
    table_name: str = "TAXI_TRIP"
    max_retries: int = 3

    @classmethod
    def from_env(cls) -> 'SnowflakeConfig':
        """Load Snowflake config from environment variables"""
        return cls(
            account=os.getenv('SNOWFLAKE_ACCOUNT', ''),
            username=os.getenv('SNOWFLAKE_USERNAME', ''),
            password=os.getenv('SNOWFLAKE_PASSWORD', ''),
            warehouse=os.getenv('SNOWFLAKE_WAREHOUSE', 'COMPUTE_WH'),
            database=os.getenv('SNOWFLAKE_DATABASE', 'TAXI_GRID_DB'),
            schema=os.getenv('SNOWFLAKE_SCHEMA', 'RAW'),
            role=os.getenv('SNOWFLAKE_ROLE'),
            table_name=os.getenv('SNOWFLAKE_TABLE', 'TAXI_TRIP'),
            max_retries=int(os.getenv('STORE_MAX_RETRIES', '3'))
        )


@dataclass
class LoaderConfig:
    """Batch loading configuration"""
    input_file: Optional[Path] = None
    batch_size: int = 1000
    pause_millis: int = 1000
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    def __post_init__(self):
        if self.input_file is not None:
            self.input_file = Path(self.input_file)

    @property
    def pause_seconds(self) -> float:
        return self.pause_millis / 1000.0

    @classmethod
    def from_env(cls) -> 'LoaderConfig':
        return cls(
            input_file=os.getenv('INPUT_FILE') or None,
            batch_size=int(os.getenv('BATCH_SIZE', '1000')),
            pause_millis=int(os.getenv('PAUSE_MILLIS', '1000')),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            log_dir=os.getenv('LOG_DIR') or None
        )


class Settings:
    """
    Main settings class that aggregates all configuration
    """

    def __init__(self):
        self.snowflake = SnowflakeConfig.from_env()
        self.loader = LoaderConfig.from_env()

    def validation_errors(self, require_store: bool = True) -> List[str]:
        """
        Describe everything wrong with the current configuration

        Args:
            require_store: Whether Snowflake credentials are needed
                (not the case for dry runs)

        Returns:
            List of problems, empty when the configuration is usable
        """
        problems = []

        if self.loader.batch_size < 1:
            problems.append(f"BATCH_SIZE must be at least 1, got {self.loader.batch_size}")

        if self.loader.pause_millis < 0:
            problems.append(f"PAUSE_MILLIS cannot be negative, got {self.loader.pause_millis}")

        if require_store:
            required_snowflake_fields = {
                'SNOWFLAKE_ACCOUNT': self.snowflake.account,
                'SNOWFLAKE_USERNAME': self.snowflake.username,
                'SNOWFLAKE_PASSWORD': self.snowflake.password,
            }
            for name, value in required_snowflake_fields.items():
                if not value:
                    problems.append(f"{name} is not set")

        return problems

    def validate(self, require_store: bool = True) -> bool:
        """
        Validate that all required configuration is present

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        return not self.validation_errors(require_store)


# Global settings instance
settings = Settings()
