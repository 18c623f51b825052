# tests/unit/test_settings.py
"""Tests for configuration loading and validation."""

import os
import pytest
from pathlib import Path
from unittest.mock import patch

from src.config.settings import Settings, SnowflakeConfig, LoaderConfig


class TestSnowflakeConfig:
    """Test SnowflakeConfig environment loading."""

    def test_from_env(self):
        env_vars = {
            'SNOWFLAKE_ACCOUNT': 'acct',
            'SNOWFLAKE_USERNAME': 'user',
            'SNOWFLAKE_PASSWORD': 'secret',
            'SNOWFLAKE_TABLE': 'trips',
            'STORE_MAX_RETRIES': '5',
        }
        with patch.dict(os.environ, env_vars, clear=True):
            config = SnowflakeConfig.from_env()

        assert config.account == 'acct'
        assert config.username == 'user'
        assert config.table_name == 'trips'
        assert config.max_retries == 5
        assert config.warehouse == 'COMPUTE_WH'
        assert config.database == 'TAXI_GRID_DB'
        assert config.schema == 'RAW'
        assert config.role is None


class TestLoaderConfig:
    """Test LoaderConfig defaults and environment loading."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = LoaderConfig.from_env()

        assert config.input_file is None
        assert config.batch_size == 1000
        assert config.pause_millis == 1000
        assert config.pause_seconds == 1.0
        assert config.log_level == 'INFO'
        assert config.log_dir is None

    def test_from_env(self):
        env_vars = {
            'INPUT_FILE': '/data/trips.csv',
            'BATCH_SIZE': '250',
            'PAUSE_MILLIS': '50',
            'LOG_LEVEL': 'DEBUG',
            'LOG_DIR': '/var/log/loader',
        }
        with patch.dict(os.environ, env_vars, clear=True):
            config = LoaderConfig.from_env()

        assert config.input_file == Path('/data/trips.csv')
        assert config.batch_size == 250
        assert config.pause_seconds == pytest.approx(0.05)
        assert config.log_level == 'DEBUG'
        assert config.log_dir == '/var/log/loader'

    def test_input_file_coerced_to_path(self):
        assert isinstance(LoaderConfig(input_file='trips.csv').input_file, Path)


class TestSettingsValidation:
    """Test Settings.validate and validation_errors."""

    def test_valid_configuration(self):
        env_vars = {
            'SNOWFLAKE_ACCOUNT': 'acct',
            'SNOWFLAKE_USERNAME': 'user',
            'SNOWFLAKE_PASSWORD': 'secret',
        }
        with patch.dict(os.environ, env_vars, clear=True):
            settings = Settings()

        assert settings.validate() is True
        assert settings.validation_errors() == []

    def test_missing_credentials(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.validate() is False
        problems = settings.validation_errors()
        assert "SNOWFLAKE_ACCOUNT is not set" in problems
        assert "SNOWFLAKE_PASSWORD is not set" in problems

    def test_dry_run_does_not_need_credentials(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.validate(require_store=False) is True

    def test_invalid_numbers(self):
        with patch.dict(os.environ, {'BATCH_SIZE': '0', 'PAUSE_MILLIS': '-1'}, clear=True):
            settings = Settings()

        problems = settings.validation_errors(require_store=False)
        assert len(problems) == 2
        assert problems[0].startswith("BATCH_SIZE must be at least 1")
        assert problems[1].startswith("PAUSE_MILLIS cannot be negative")
