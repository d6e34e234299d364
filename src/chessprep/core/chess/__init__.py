"""Chess rules helpers backed by python-chess."""

from chessprep.core.chess.notation import (
    IllegalMoveTokenError,
    PositionError,
    parse_position,
    pv_uci_to_san,
    resolve_and_apply,
)

__all__ = [
    "IllegalMoveTokenError",
    "PositionError",
    "parse_position",
    "pv_uci_to_san",
    "resolve_and_apply",
]
