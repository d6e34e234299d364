"""Configuration management utilities."""

from chessprep.core.configs.schema import (
    AppConfig,
    EngineConfig,
    LoggingConfig,
    config_from_dict,
    config_to_dict,
)

__all__ = [
    "AppConfig",
    "EngineConfig",
    "LoggingConfig",
    "config_from_dict",
    "config_to_dict",
]
