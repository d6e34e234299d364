"""Tests for configuration schemas and loading."""

from pathlib import Path

import pytest

from chessprep.core.configs import AppConfig, EngineConfig, config_from_dict, config_to_dict
from chessprep.utils import load_app_config, load_config, resolve_engine_path, save_config
from chessprep.utils.config import ENGINE_ENV_VAR


class TestEngineConfig:
    """Tests for EngineConfig validation."""

    def test_defaults(self) -> None:
        """Test the default engine settings."""
        config = EngineConfig()
        assert config.path is None
        assert config.default_depth == 18
        assert config.multipv == 1
        assert config.read_timeout is None
        assert config.options == {}

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"default_depth": 0},
            {"handshake_max_lines": 0},
            {"analysis_max_lines": -1},
            {"read_timeout": 0},
            {"quit_timeout": -1.0},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        """Test that nonsensical settings are rejected."""
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)


class TestConfigDicts:
    """Tests for dict conversion."""

    def test_from_dict_partial(self) -> None:
        """Test that missing sections keep their defaults."""
        config = config_from_dict({"engine": {"path": "/opt/sf", "options": {"Hash": 128}}})
        assert config.engine.path == "/opt/sf"
        assert config.engine.options == {"Hash": 128}
        assert config.logging.level == "INFO"

    def test_from_dict_unknown_key(self) -> None:
        """Test that typos in config keys are caught."""
        with pytest.raises(TypeError):
            config_from_dict({"engine": {"depht": 20}})

    def test_to_dict(self) -> None:
        """Test serialisation to plain containers."""
        data = config_to_dict(AppConfig())
        assert data["engine"]["default_depth"] == 18
        assert data["logging"]["rotation"] == "10 MB"


class TestLoadConfig:
    """Tests for YAML loading with OmegaConf."""

    def test_load_with_overrides(self, tmp_path: Path) -> None:
        """Test a YAML file merged with dotlist overrides."""
        path = tmp_path / "config.yaml"
        path.write_text("engine:\n  path: /usr/bin/stockfish\n  default_depth: 20\n")

        config = load_app_config(path, ["engine.default_depth=24", "logging.level=DEBUG"])

        assert config.engine.path == "/usr/bin/stockfish"
        assert config.engine.default_depth == 24
        assert config.logging.level == "DEBUG"

    def test_overrides_without_file(self) -> None:
        """Test building a config from overrides alone."""
        config = load_app_config(overrides=["engine.multipv=3"])
        assert config.engine.multipv == 3
        assert config.engine.path is None

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test loading a nonexistent file."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_save_and_reload(self, tmp_path: Path) -> None:
        """Test that a saved AppConfig loads back unchanged."""
        config = AppConfig(engine=EngineConfig(path="sf", args=["--nnue"], read_timeout=5.0))
        path = tmp_path / "nested" / "config.yaml"

        save_config(config, path)

        assert load_app_config(path) == config


class TestResolveEnginePath:
    """Tests for engine path resolution order."""

    def test_explicit_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the command-line value takes precedence."""
        monkeypatch.setenv(ENGINE_ENV_VAR, "/env/engine")
        config = AppConfig(engine=EngineConfig(path="/config/engine"))
        assert resolve_engine_path("/cli/engine", config) == "/cli/engine"

    def test_config_before_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the config path beats the environment."""
        monkeypatch.setenv(ENGINE_ENV_VAR, "/env/engine")
        config = AppConfig(engine=EngineConfig(path="/config/engine"))
        assert resolve_engine_path(None, config) == "/config/engine"

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the environment variable."""
        monkeypatch.setenv(ENGINE_ENV_VAR, "/env/engine")
        assert resolve_engine_path(None, AppConfig()) == "/env/engine"

    def test_nothing_available(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test that None is returned when no engine can be found."""
        monkeypatch.delenv(ENGINE_ENV_VAR, raising=False)
        monkeypatch.setenv("PATH", str(tmp_path))
        assert resolve_engine_path(None) is None
