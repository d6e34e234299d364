"""Exceptions raised by the engine session layer."""

from pathlib import Path


class EngineError(Exception):
    """Base class for all engine communication failures."""

    pass


class SpawnError(EngineError):
    """Raised when the engine executable cannot be started.

    This is a configuration problem (wrong path, missing permissions,
    exhausted OS resources), not an engine misbehaviour.
    """

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"failed to start engine '{self.path}': {reason}")


class ProtocolError(EngineError):
    """Raised when the engine violates the UCI conversation.

    Covers a closed output stream, an expected token that never arrives
    within the line bound, and an analysis that produced no usable info.
    """

    pass


class EngineTimeoutError(ProtocolError):
    """Raised when a single read exceeds the configured inactivity timeout."""

    pass


class TransportError(EngineError):
    """Raised when reading from or writing to the engine pipes fails."""

    pass
