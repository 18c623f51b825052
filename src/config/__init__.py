"""Configuration management module"""

from .settings import settings, Settings, SnowflakeConfig, LoaderConfig

__all__ = ['settings', 'Settings', 'SnowflakeConfig', 'LoaderConfig']
