"""Aggregation of streamed ``info`` lines into a ranked MultiPV result.

While searching, an engine emits many progress lines per rank, at growing
depths and sometimes score-only. The aggregator keeps the most informative
line seen for each rank and turns them into an AnalysisResult once the
engine announces ``bestmove``.
"""

from collections.abc import Callable

from loguru import logger

from chessprep.core.chess.notation import pv_uci_to_san
from chessprep.engine.errors import ProtocolError
from chessprep.engine.info import parse_info_line
from chessprep.engine.transport import ProcessTransport
from chessprep.engine.types import AnalysisResult, EngineLine, InfoLine

DEFAULT_MAX_ANALYSIS_LINES = 50_000

# Tokens engines send after "bestmove" when there is no legal move
_NO_MOVE_TOKENS = frozenset({"(none)", "0000"})

Translator = Callable[[str, list[str]], list[str]]


def is_better(candidate: InfoLine, current: InfoLine) -> bool:
    """Return True if ``candidate`` should replace ``current`` for its rank.

    Deeper lines win. At equal depth a line with moves beats a score-only one.
    """
    candidate_depth = candidate.depth or 0
    current_depth = current.depth or 0
    if candidate_depth != current_depth:
        return candidate_depth > current_depth
    return bool(candidate.pv) and not current.pv


class MultiPVAggregator:
    """Keeps the best info line per rank for a single analysis request."""

    def __init__(self, depth: int, multipv: int, translator: Translator = pv_uci_to_san) -> None:
        """Initialize the aggregator.

        Args:
            depth: Requested search depth, used for lines without a depth.
            multipv: Number of ranks requested; higher ranks are ignored.
            translator: Function converting (fen, uci_pv) into SAN moves.
        """
        self.depth = depth
        self.multipv = multipv
        self.translator = translator
        self.best_by_rank: dict[int, InfoLine] = {}
        self.bestmove: str | None = None
        self.finished = False

    def update(self, info: InfoLine) -> bool:
        """Offer a parsed info line. Returns True if it was stored."""
        rank = info.multipv
        if rank < 1 or rank > self.multipv:
            return False

        current = self.best_by_rank.get(rank)
        if current is not None and not is_better(info, current):
            return False

        self.best_by_rank[rank] = info
        return True

    def feed(self, line: str) -> bool:
        """Consume one line of engine output.

        Args:
            line: Raw output line.

        Returns:
            True once the terminal ``bestmove`` line has been seen.
        """
        line = line.strip()

        info = parse_info_line(line)
        if info is not None:
            self.update(info)
            return False

        tokens = line.split()
        if tokens and tokens[0] == "bestmove":
            if len(tokens) > 1 and tokens[1] not in _NO_MOVE_TOKENS:
                self.bestmove = tokens[1]
            self.finished = True
            return True

        return False

    def finalize(self, fen: str) -> AnalysisResult:
        """Build the analysis result from the best line of each rank.

        Args:
            fen: Position that was analysed, used for SAN translation.

        Raises:
            ProtocolError: If no rank ever received usable info.
        """
        if not self.best_by_rank:
            raise ProtocolError("engine returned no analysis info for this position")

        lines = [
            EngineLine(
                multipv_rank=rank,
                depth=info.depth if info.depth is not None else self.depth,
                score_cp=info.score_cp,
                score_mate=info.score_mate,
                pv=list(info.pv),
                san_pv=self.translator(fen, info.pv),
                seldepth=info.seldepth,
                nodes=info.nodes,
            )
            for rank, info in sorted(self.best_by_rank.items())
        ]

        primary = next((line for line in lines if line.multipv_rank == 1), lines[0])

        if primary.san_pv:
            best_move = primary.san_pv[0]
        elif self.bestmove is not None:
            best_move = self.bestmove
        elif primary.pv:
            best_move = primary.pv[0]
        else:
            best_move = None

        return AnalysisResult(
            fen=fen,
            depth=primary.depth,
            score_cp=primary.score_cp,
            score_mate=primary.score_mate,
            best_move=best_move,
            pv=list(primary.pv),
            lines=lines,
        )


def collect_analysis(
    transport: ProcessTransport,
    fen: str,
    depth: int,
    multipv: int,
    *,
    max_lines: int = DEFAULT_MAX_ANALYSIS_LINES,
    translator: Translator = pv_uci_to_san,
) -> AnalysisResult:
    """Read engine output after ``go`` until ``bestmove`` and build the result.

    Args:
        transport: Connected engine transport.
        fen: Position being analysed.
        depth: Normalised requested depth.
        multipv: Normalised requested number of lines.
        max_lines: Safety bound on the number of lines read.
        translator: Function converting (fen, uci_pv) into SAN moves.

    Raises:
        ProtocolError: If the stream ends early, the bound is exhausted, or
            no usable info line arrived.
    """
    aggregator = MultiPVAggregator(depth, multipv, translator)

    for count in range(1, max_lines + 1):
        line = transport.read_line()
        if line is None:
            raise ProtocolError("engine closed output before sending bestmove")
        if aggregator.feed(line):
            logger.trace(f"bestmove received after {count} lines")
            break
    else:
        raise ProtocolError("did not receive 'bestmove' from engine")

    return aggregator.finalize(fen)
