"""Move notation helpers built on python-chess.

The engine speaks UCI long algebraic notation (``e2e4``, ``e7e8q``); people
read SAN (``e4``, ``e8=Q+``). These helpers replay a UCI principal variation
from a FEN to produce SAN, degrading gracefully on bad input: translation
stops at the first token that cannot be played and keeps what came before.
"""

import chess


class PositionError(ValueError):
    """Raised when a FEN cannot be turned into a playable position."""

    pass


class IllegalMoveTokenError(ValueError):
    """Raised when a UCI token is malformed or illegal in the position."""

    pass


def parse_position(fen: str) -> chess.Board:
    """Parse a FEN into a board.

    Args:
        fen: Position in Forsyth-Edwards Notation.

    Returns:
        The parsed board.

    Raises:
        PositionError: If the FEN is malformed or describes an impossible
            position (missing kings, side not to move in check, ...).
    """
    try:
        board = chess.Board(fen)
    except ValueError as e:
        raise PositionError(f"Invalid FEN '{fen}': {e}") from e

    if not board.is_valid():
        raise PositionError(f"Invalid position '{fen}': {board.status()!r}")

    return board


def resolve_and_apply(board: chess.Board, uci: str) -> tuple[chess.Board, str]:
    """Play a UCI move token on a copy of the board.

    Args:
        board: Position to play from. Not modified.
        uci: Move in UCI notation.

    Returns:
        Tuple of (board after the move, SAN of the move).

    Raises:
        IllegalMoveTokenError: If the token does not parse, is a null move,
            or is not legal in the position.
    """
    try:
        move = board.parse_uci(uci)
    except ValueError as e:
        raise IllegalMoveTokenError(f"Cannot play '{uci}' in {board.fen()}: {e}") from e

    # parse_uci accepts "0000" as a null move
    if not move:
        raise IllegalMoveTokenError(f"Null move '{uci}' is not playable")

    san = board.san(move)
    after = board.copy(stack=False)
    after.push(move)
    return after, san


def pv_uci_to_san(fen: str, pv: list[str]) -> list[str]:
    """Translate a UCI principal variation into SAN.

    Args:
        fen: Starting position of the variation.
        pv: Move tokens in UCI notation.

    Returns:
        SAN moves for the longest playable prefix of ``pv``. Empty if the
        starting position cannot be parsed.
    """
    try:
        board = parse_position(fen)
    except PositionError:
        return []

    san_moves: list[str] = []
    for uci in pv:
        try:
            board, san = resolve_and_apply(board, uci)
        except IllegalMoveTokenError:
            break
        san_moves.append(san)

    return san_moves
