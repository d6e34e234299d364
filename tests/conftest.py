"""Pytest configuration and shared fixtures."""

import os
import stat
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from chessprep.core.configs import EngineConfig
from chessprep.engine import EngineSession, ProcessTransport

FAKE_ENGINE = Path(__file__).parent / "fixtures" / "fake_uci_engine.py"


def fake_engine_args(scenario: str, log_path: Path | None = None) -> list[str]:
    """Command-line arguments that run the fake engine in a scenario."""
    args = [str(FAKE_ENGINE), scenario]
    if log_path is not None:
        args.append(str(log_path))
    return args


@pytest.fixture
def start_fake_engine() -> Iterator[Callable[..., EngineSession]]:
    """Factory starting fake-engine sessions, all closed at teardown."""
    sessions: list[EngineSession] = []

    def _start(scenario: str = "echo", log_path: Path | None = None, **kwargs) -> EngineSession:
        kwargs.setdefault("quit_timeout", 1.0)
        session = EngineSession(
            sys.executable,
            args=fake_engine_args(scenario, log_path),
            **kwargs,
        )
        sessions.append(session)
        return session

    yield _start

    for session in sessions:
        session.close()


@pytest.fixture
def fake_engine_config() -> Callable[..., EngineConfig]:
    """Factory building an EngineConfig that runs the fake engine."""

    def _config(scenario: str = "echo", log_path: Path | None = None, **kwargs) -> EngineConfig:
        kwargs.setdefault("quit_timeout", 1.0)
        return EngineConfig(
            path=sys.executable,
            args=fake_engine_args(scenario, log_path),
            **kwargs,
        )

    return _config


class ScriptedTransport:
    """In-memory transport replaying canned engine output."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = list(lines)
        self.sent: list[str] = []

    def write_line(self, line: str) -> None:
        self.sent.append(line)

    def read_line(self) -> str | None:
        if not self.lines:
            return None
        return self.lines.pop(0)


@pytest.fixture
def scripted_transport() -> Callable[[list[str]], ScriptedTransport]:
    """Factory for transports that replay the given output lines."""
    return ScriptedTransport


@pytest.fixture
def engine_args() -> Callable[..., list[str]]:
    """Return the argument builder for fake-engine scenarios."""
    return fake_engine_args


@pytest.fixture
def fake_engine_executable(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing an executable that runs the fake engine in a scenario.

    Needed where only an engine path (no arguments) can be given.
    """

    def _executable(scenario: str = "echo") -> Path:
        script = tmp_path / f"engine-{scenario}"
        script.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{FAKE_ENGINE}" {scenario}\n')
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return script

    return _executable


def process_running(pid: int) -> bool:
    """Return True if ``pid`` still exists (running or an unreaped zombie)."""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    return True


@pytest.fixture
def is_running() -> Callable[[int], bool]:
    """Return the OS-level process check."""
    return process_running


@pytest.fixture
def spawned_pids(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Record the pid of every engine process started during the test."""
    pids: list[int] = []
    original_spawn = ProcessTransport.spawn

    def _spawn(*args, **kwargs) -> ProcessTransport:
        transport = original_spawn(*args, **kwargs)
        pids.append(transport.pid)
        return transport

    monkeypatch.setattr(ProcessTransport, "spawn", _spawn)
    return pids
