"""UCI engine session layer for chessprep."""

from chessprep.engine.aggregator import MultiPVAggregator, collect_analysis
from chessprep.engine.errors import (
    EngineError,
    EngineTimeoutError,
    ProtocolError,
    SpawnError,
    TransportError,
)
from chessprep.engine.info import parse_info_line
from chessprep.engine.manager import EngineSessionManager
from chessprep.engine.session import (
    EngineSession,
    analyze_position,
    analyze_position_multipv,
    start_session,
)
from chessprep.engine.transport import ProcessTransport
from chessprep.engine.types import (
    DEFAULT_DEPTH,
    MAX_MULTIPV,
    MIN_MULTIPV,
    AnalysisRequest,
    AnalysisResult,
    EngineLine,
    InfoLine,
)

__all__ = [
    "DEFAULT_DEPTH",
    "MAX_MULTIPV",
    "MIN_MULTIPV",
    "AnalysisRequest",
    "AnalysisResult",
    "EngineError",
    "EngineLine",
    "EngineSession",
    "EngineSessionManager",
    "EngineTimeoutError",
    "InfoLine",
    "MultiPVAggregator",
    "ProcessTransport",
    "ProtocolError",
    "SpawnError",
    "TransportError",
    "analyze_position",
    "analyze_position_multipv",
    "collect_analysis",
    "parse_info_line",
    "start_session",
]
