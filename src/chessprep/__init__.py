"""chessprep: chess preparation backend.

Drives an external UCI analysis engine and turns its streamed output into
ranked principal variations:
- `from chessprep.engine import EngineSession` for a long-lived engine
- `from chessprep.engine import analyze_position` for one-shot analysis

Configuration and logging helpers live in `chessprep.utils`.
"""

__version__ = "0.1.0"

# Re-export common entry points for convenience
from chessprep.engine import (
    AnalysisResult,
    EngineError,
    EngineLine,
    EngineSession,
    EngineSessionManager,
    ProtocolError,
    SpawnError,
    TransportError,
    analyze_position,
    analyze_position_multipv,
    start_session,
)
from chessprep.utils import load_app_config, setup_logging

__all__ = [
    "AnalysisResult",
    "EngineError",
    "EngineLine",
    "EngineSession",
    "EngineSessionManager",
    "ProtocolError",
    "SpawnError",
    "TransportError",
    "__version__",
    "analyze_position",
    "analyze_position_multipv",
    "load_app_config",
    "setup_logging",
    "start_session",
]
