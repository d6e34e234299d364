"""Value types for engine analysis requests and results."""

from dataclasses import dataclass, field, replace

DEFAULT_DEPTH = 18
MIN_MULTIPV = 1
MAX_MULTIPV = 10


@dataclass
class AnalysisRequest:
    """Search parameters for a single analysis.

    A depth of 0 means "use the default depth". The number of ranked lines
    (MultiPV) is clamped into [MIN_MULTIPV, MAX_MULTIPV] on normalisation.
    """

    depth: int = 0
    multipv: int = 1

    def normalized(self, default_depth: int = DEFAULT_DEPTH) -> "AnalysisRequest":
        """Return a copy with the default depth substituted and width clamped."""
        depth = self.depth if self.depth > 0 else default_depth
        multipv = max(MIN_MULTIPV, min(MAX_MULTIPV, self.multipv))
        return AnalysisRequest(depth=depth, multipv=multipv)


@dataclass
class InfoLine:
    """Progress data extracted from one ``info`` line of engine output."""

    depth: int | None = None
    score_cp: int | None = None
    score_mate: int | None = None
    pv: list[str] = field(default_factory=list)
    multipv: int = 1

    # Informational fields, not used for ranking
    seldepth: int | None = None
    nodes: int | None = None
    nps: int | None = None
    time_ms: int | None = None

    @property
    def is_empty(self) -> bool:
        """True if the line carries no depth, no score and no moves."""
        return (
            self.depth is None
            and self.score_cp is None
            and self.score_mate is None
            and not self.pv
        )


@dataclass
class EngineLine:
    """One ranked candidate line of a finished analysis."""

    multipv_rank: int
    depth: int
    score_cp: int | None
    score_mate: int | None
    pv: list[str]
    san_pv: list[str]
    seldepth: int | None = None
    nodes: int | None = None


@dataclass
class AnalysisResult:
    """Final result of analysing one position.

    The top-level depth, score and pv mirror the primary line (rank 1, or
    the lowest available rank). Scores are relative to the side to move,
    as reported by the engine.
    """

    fen: str
    depth: int
    score_cp: int | None
    score_mate: int | None
    best_move: str | None
    pv: list[str]
    lines: list[EngineLine]

    @property
    def primary(self) -> EngineLine:
        """The line the top-level fields were taken from."""
        for line in self.lines:
            if line.multipv_rank == 1:
                return line
        return self.lines[0]

    def white_perspective(self) -> "AnalysisResult":
        """Return a copy with scores expressed from white's point of view."""
        fields = self.fen.split()
        if len(fields) < 2 or fields[1] != "b":
            return self

        def flip(value: int | None) -> int | None:
            return None if value is None else -value

        lines = [
            replace(line, score_cp=flip(line.score_cp), score_mate=flip(line.score_mate))
            for line in self.lines
        ]
        return replace(
            self,
            score_cp=flip(self.score_cp),
            score_mate=flip(self.score_mate),
            lines=lines,
        )
