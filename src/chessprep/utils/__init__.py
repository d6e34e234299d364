"""Shared utilities for chessprep."""

from chessprep.utils.config import (
    load_app_config,
    load_config,
    resolve_engine_path,
    save_config,
)
from chessprep.utils.logging import setup_logging

__all__ = [
    "load_app_config",
    "load_config",
    "resolve_engine_path",
    "save_config",
    "setup_logging",
]
