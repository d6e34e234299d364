"""Configuration loading utilities."""

import os
import shutil
from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf

from chessprep.core.configs import AppConfig, config_from_dict, config_to_dict

ENGINE_ENV_VAR = "CHESSPREP_ENGINE"
DEFAULT_ENGINE_COMMAND = "stockfish"


def load_config(config_path: str | Path, overrides: list[str] | None = None) -> DictConfig:
    """Load a configuration file with optional overrides.

    Args:
        config_path: Path to the YAML configuration file.
        overrides: Optional list of CLI-style overrides (e.g., ["engine.default_depth=22"]).

    Returns:
        Merged configuration as a DictConfig.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    config = OmegaConf.load(config_path)

    if overrides:
        override_conf = OmegaConf.from_dotlist(overrides)
        config = OmegaConf.merge(config, override_conf)

    return config


def save_config(config: AppConfig | DictConfig | dict[str, Any], path: str | Path) -> None:
    """Save a configuration to a YAML file.

    Args:
        config: Configuration to save.
        path: Path to save the configuration to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(config, AppConfig):
        config = config_to_dict(config)
    if isinstance(config, dict):
        config = OmegaConf.create(config)

    OmegaConf.save(config, path)


def load_app_config(
    config_path: str | Path | None = None,
    overrides: list[str] | None = None,
) -> AppConfig:
    """Build an AppConfig from defaults, an optional YAML file and overrides.

    Args:
        config_path: Optional YAML file; missing sections keep their defaults.
        overrides: Optional dotlist overrides applied last.

    Returns:
        Validated AppConfig.
    """
    if config_path is not None:
        config = load_config(config_path, overrides)
    else:
        config = OmegaConf.from_dotlist(overrides or [])

    data = OmegaConf.to_container(config, resolve=True) or {}
    return config_from_dict(data)


def resolve_engine_path(explicit: str | Path | None, config: AppConfig | None = None) -> str | None:
    """Pick the engine executable to use.

    Order: explicit argument, ``engine.path`` from config, the
    CHESSPREP_ENGINE environment variable, then ``stockfish`` on PATH.

    Returns:
        The engine path, or None if nothing is available.
    """
    if explicit:
        return str(explicit)
    if config is not None and config.engine.path:
        return config.engine.path
    env_path = os.environ.get(ENGINE_ENV_VAR)
    if env_path:
        return env_path
    return shutil.which(DEFAULT_ENGINE_COMMAND)
