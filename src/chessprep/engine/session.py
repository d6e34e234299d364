"""UCI engine session for position analysis.

An EngineSession keeps one engine process running across many analyses so
that expensive engine start-up (tablebases, NNUE weights) is paid once.

Example:
    with EngineSession("/usr/local/bin/stockfish") as session:
        result = session.analyze_multipv(fen, depth=20, multipv=3)
        print(result.best_move, result.score_cp)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from chessprep.engine import protocol
from chessprep.engine.aggregator import DEFAULT_MAX_ANALYSIS_LINES, collect_analysis
from chessprep.engine.errors import EngineTimeoutError
from chessprep.engine.transport import ProcessTransport
from chessprep.engine.types import DEFAULT_DEPTH, AnalysisRequest, AnalysisResult

if TYPE_CHECKING:
    from chessprep.core.configs import EngineConfig


class EngineSession:
    """A handshaken UCI engine process serving one caller at a time.

    The handshake runs inside the constructor, so an EngineSession object
    always refers to an engine that has answered ``uciok`` and ``readyok``.
    The process is stopped by :meth:`close`, by leaving a ``with`` block, or
    when the session is garbage collected.

    Sessions are not thread-safe: issue one request at a time.
    """

    def __init__(
        self,
        engine_path: str | Path,
        *,
        args: list[str] | None = None,
        default_depth: int = DEFAULT_DEPTH,
        handshake_max_lines: int = protocol.DEFAULT_MAX_LINES,
        analysis_max_lines: int = DEFAULT_MAX_ANALYSIS_LINES,
        read_timeout: float | None = None,
        quit_timeout: float = 2.0,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Start the engine and complete the UCI handshake.

        Args:
            engine_path: Path to the engine executable (or command on PATH).
            args: Extra command-line arguments for the engine.
            default_depth: Depth used when a request asks for depth 0.
            handshake_max_lines: Line bound when waiting for acknowledgements.
            analysis_max_lines: Line bound when reading an analysis.
            read_timeout: Optional per-read inactivity timeout in seconds.
                On expiry the engine is killed and EngineTimeoutError raised.
            quit_timeout: Seconds to wait for a clean exit before killing.
            options: UCI options to set after the handshake
                (e.g. {"Hash": 256, "Threads": 4}).

        Raises:
            SpawnError: If the engine cannot be started.
            ProtocolError: If the handshake fails.
            TransportError: If the pipes fail during the handshake.
        """
        self.engine_path = Path(engine_path)
        self.default_depth = default_depth
        self.handshake_max_lines = handshake_max_lines
        self.analysis_max_lines = analysis_max_lines
        self.quit_timeout = quit_timeout

        self._transport: ProcessTransport | None = None
        transport = ProcessTransport.spawn(engine_path, args, timeout=read_timeout)
        self._transport = transport

        try:
            protocol.handshake(transport, handshake_max_lines)
            if options:
                for name, value in options.items():
                    protocol.set_option(transport, name, value)
                protocol.wait_ready(transport, handshake_max_lines)
        except BaseException:
            self.close()
            raise

        logger.debug(f"UCI engine initialized: {self.name}")

    @classmethod
    def from_config(cls, config: "EngineConfig") -> "EngineSession":
        """Start a session from an EngineConfig."""
        if not config.path:
            raise ValueError("EngineConfig.path is not set")
        return cls(
            config.path,
            args=list(config.args),
            default_depth=config.default_depth,
            handshake_max_lines=config.handshake_max_lines,
            analysis_max_lines=config.analysis_max_lines,
            read_timeout=config.read_timeout,
            quit_timeout=config.quit_timeout,
            options=dict(config.options),
        )

    @property
    def name(self) -> str:
        """Return the engine name."""
        return f"UCI({self.engine_path.name})"

    @property
    def pid(self) -> int | None:
        """Process id of the engine, or None once closed."""
        return self._transport.pid if self._transport is not None else None

    def is_alive(self) -> bool:
        """Return True while the engine process is running."""
        return self._transport is not None and self._transport.is_alive()

    def _require_transport(self) -> ProcessTransport:
        if self._transport is None:
            raise RuntimeError(f"{self.name} session is closed")
        return self._transport

    def set_option(self, name: str, value: Any) -> None:
        """Set a UCI option and wait until the engine has applied it."""
        transport = self._require_transport()
        with self._kill_on_timeout():
            protocol.set_option(transport, name, value)
            protocol.wait_ready(transport, self.handshake_max_lines)

    def new_game(self) -> None:
        """Tell the engine the next position is unrelated to the previous one."""
        transport = self._require_transport()
        with self._kill_on_timeout():
            protocol.send_command(transport, "ucinewgame")
            protocol.wait_ready(transport, self.handshake_max_lines)

    def analyze(self, fen: str, depth: int = 0) -> AnalysisResult:
        """Analyse a position, reporting a single principal variation.

        Args:
            fen: Position to analyse.
            depth: Search depth; 0 uses the session's default depth.
        """
        return self.analyze_multipv(fen, depth, 1)

    def analyze_multipv(self, fen: str, depth: int = 0, multipv: int = 1) -> AnalysisResult:
        """Analyse a position, reporting up to ``multipv`` ranked lines.

        Args:
            fen: Position to analyse.
            depth: Search depth; 0 uses the session's default depth.
            multipv: Number of ranked lines, clamped into [1, 10].

        Returns:
            The analysis result, lines ordered by rank.

        Raises:
            ValueError: If the FEN spans more than one line.
            ProtocolError: If the engine misbehaves or reports no analysis.
            TransportError: If the pipes fail.
        """
        transport = self._require_transport()
        if "\n" in fen or "\r" in fen:
            raise ValueError(f"FEN must be a single line: {fen!r}")
        request = AnalysisRequest(depth=depth, multipv=multipv).normalized(self.default_depth)

        logger.debug(
            f"Analysing {fen} (depth={request.depth}, multipv={request.multipv})"
        )

        with self._kill_on_timeout():
            protocol.set_option(transport, "MultiPV", request.multipv)
            protocol.wait_ready(transport, self.handshake_max_lines)
            protocol.send_command(transport, f"position fen {fen}")
            protocol.send_command(transport, f"go depth {request.depth}")
            result = collect_analysis(
                transport,
                fen,
                request.depth,
                request.multipv,
                max_lines=self.analysis_max_lines,
            )

        logger.debug(
            f"Analysis finished: best={result.best_move} depth={result.depth} "
            f"cp={result.score_cp} mate={result.score_mate} lines={len(result.lines)}"
        )
        return result

    @contextmanager
    def _kill_on_timeout(self) -> Iterator[None]:
        """Stop the engine if a read times out inside the block."""
        try:
            yield
        except EngineTimeoutError:
            logger.warning(f"{self.name} timed out, stopping the engine")
            self.close()
            raise

    def close(self) -> None:
        """Send ``quit`` and reap the engine process."""
        transport = self._transport
        if transport is None:
            return
        self._transport = None
        transport.close("quit", grace_period=self.quit_timeout)

    def __enter__(self) -> "EngineSession":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __del__(self) -> None:
        """Destructor - ensure process is cleaned up."""
        if getattr(self, "_transport", None) is not None:
            self.close()


def start_session(engine_path: str | Path, **kwargs: Any) -> EngineSession:
    """Start an engine and perform the handshake.

    Keyword arguments are passed to :class:`EngineSession`.
    """
    return EngineSession(engine_path, **kwargs)


def analyze_position(engine_path: str | Path, fen: str, depth: int = 0) -> AnalysisResult:
    """Analyse one position with a fresh engine process."""
    return analyze_position_multipv(engine_path, fen, depth, 1)


def analyze_position_multipv(
    engine_path: str | Path,
    fen: str,
    depth: int = 0,
    multipv: int = 1,
) -> AnalysisResult:
    """Analyse one position with a fresh engine process, reporting MultiPV lines."""
    with EngineSession(engine_path) as session:
        return session.analyze_multipv(fen, depth, multipv)
