"""Strongly-typed configuration schemas for chessprep.

These dataclasses provide validation, IDE support, and serve as the
single source of truth for all configuration options.
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class EngineConfig:
    """Configuration for the external UCI engine."""

    path: str | None = None  # Executable path or command on PATH
    args: list[str] = field(default_factory=list)
    default_depth: int = 18  # Used when a request asks for depth 0
    multipv: int = 1  # Clamped to [1, 10] per request

    # Safety bounds on how many output lines are read per wait
    handshake_max_lines: int = 20_000
    analysis_max_lines: int = 50_000

    read_timeout: float | None = None  # Seconds of silence before giving up
    quit_timeout: float = 2.0  # Seconds to wait after "quit" before killing

    # Extra UCI options set after the handshake, e.g. {"Hash": 256}
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if self.default_depth < 1:
            msg = f"default_depth must be >= 1, got {self.default_depth}"
            raise ValueError(msg)

        if self.handshake_max_lines < 1 or self.analysis_max_lines < 1:
            msg = (
                "line bounds must be >= 1, got "
                f"handshake_max_lines={self.handshake_max_lines}, "
                f"analysis_max_lines={self.analysis_max_lines}"
            )
            raise ValueError(msg)

        if self.read_timeout is not None and self.read_timeout <= 0:
            msg = f"read_timeout must be positive or None, got {self.read_timeout}"
            raise ValueError(msg)

        if self.quit_timeout < 0:
            msg = f"quit_timeout must be >= 0, got {self.quit_timeout}"
            raise ValueError(msg)


@dataclass
class LoggingConfig:
    """Configuration for loguru sinks."""

    level: str = "INFO"
    file: str | None = None
    rotation: str = "10 MB"
    retention: str = "1 week"


@dataclass
class AppConfig:
    """Top-level configuration combining all sub-configs."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def config_from_dict(data: dict[str, Any]) -> AppConfig:
    """Create AppConfig from a dictionary (e.g., from OmegaConf).

    Args:
        data: Dictionary with configuration values.

    Returns:
        AppConfig instance.

    Raises:
        TypeError: If a section contains an unknown key.
    """
    return AppConfig(
        engine=EngineConfig(**(data.get("engine") or {})),
        logging=LoggingConfig(**(data.get("logging") or {})),
    )


def config_to_dict(config: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to a dictionary for serialization.

    Args:
        config: AppConfig instance.

    Returns:
        Dictionary representation.
    """
    return asdict(config)
