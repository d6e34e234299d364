"""Persistent engine session shared by successive analysis requests."""

import threading
from dataclasses import replace
from pathlib import Path

from loguru import logger

from chessprep.core.configs import EngineConfig
from chessprep.engine.errors import EngineError
from chessprep.engine.session import EngineSession
from chessprep.engine.types import AnalysisResult


class EngineSessionManager:
    """Keeps one engine session alive between requests.

    The session is started lazily, replaced when a different engine path is
    requested, and discarded after any engine error so that the next request
    starts from a fresh process. Requests are serialised with a lock, so
    the underlying session only ever sees one caller at a time.

    Example:
        with EngineSessionManager(EngineConfig(path="stockfish")) as manager:
            first = manager.analyze(fen_a, depth=18)
            second = manager.analyze(fen_b, depth=18, multipv=3)
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config
        self._session: EngineSession | None = None
        self._session_path: str | None = None
        self._lock = threading.Lock()

    @property
    def session(self) -> EngineSession | None:
        """The currently running session, if any."""
        return self._session

    def _ensure_session(self, engine_path: str) -> EngineSession:
        if self._session is not None and self._session_path != engine_path:
            logger.debug(f"Engine path changed to {engine_path}, restarting session")
            self._discard()

        if self._session is not None and not self._session.is_alive():
            logger.warning(f"{self._session.name} is no longer running, restarting")
            self._discard()

        if self._session is None:
            config = replace(self.config, path=engine_path)
            self._session = EngineSession.from_config(config)
            self._session_path = engine_path

        return self._session

    def _discard(self) -> None:
        session = self._session
        self._session = None
        self._session_path = None
        if session is not None:
            session.close()

    def analyze(
        self,
        fen: str,
        depth: int = 0,
        multipv: int | None = None,
        engine_path: str | Path | None = None,
    ) -> AnalysisResult:
        """Analyse a position on the managed session.

        Args:
            fen: Position to analyse.
            depth: Search depth; 0 uses the configured default.
            multipv: Number of ranked lines; None uses the configured value.
            engine_path: Engine to use; None uses the configured path.

        Raises:
            ValueError: If no engine path is configured or given.
            EngineError: If starting or talking to the engine fails. The
                failed session is closed before the error propagates.
        """
        path = str(engine_path) if engine_path is not None else self.config.path
        if not path:
            raise ValueError("No engine path configured")

        width = multipv if multipv is not None else self.config.multipv

        with self._lock:
            try:
                session = self._ensure_session(path)
                return session.analyze_multipv(fen, depth, width)
            except EngineError as e:
                logger.warning(f"Engine request failed, discarding session: {e}")
                self._discard()
                raise

    def close(self) -> None:
        """Stop the managed session, if one is running."""
        with self._lock:
            self._discard()

    def __enter__(self) -> "EngineSessionManager":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
