"""Position loaders for batch analysis.

Supports plain FEN lists, EPD and PGN files. EPD is the usual format for
test suites; PGN games contribute one position each (the end of the main
line, or the position after a fixed number of plies).
"""

from pathlib import Path

import chess
import chess.pgn
from loguru import logger


def load_positions(
    path: str | Path,
    *,
    max_positions: int | None = None,
    pgn_plies: int | None = None,
) -> list[str]:
    """Load positions to analyse from a .fen, .epd or .pgn file.

    Args:
        path: Path to the position file.
        max_positions: Maximum number of positions to return. None for all.
        pgn_plies: For PGN files, number of plies to play from each game.
            None uses the final position of the main line.

    Returns:
        De-duplicated FEN strings in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file format is not supported.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Position file not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".epd":
        positions = _load_epd(path)
    elif suffix == ".pgn":
        positions = _load_pgn(path, pgn_plies)
    elif suffix == ".fen":
        positions = _load_fen(path)
    else:
        raise ValueError(
            f"Unsupported position file format: {suffix}. "
            "Supported formats: .epd, .pgn, .fen"
        )

    positions = list(dict.fromkeys(positions))
    logger.info(f"Loaded {len(positions)} positions from {path}")

    if max_positions is not None and len(positions) > max_positions:
        positions = positions[:max_positions]
        logger.debug(f"Truncated to {max_positions} positions")

    return positions


def _content_lines(path: Path):
    """Yield (line number, stripped line), skipping blanks and # comments."""
    with path.open() as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if line and not line.startswith("#"):
                yield line_num, line


def _load_epd(path: Path) -> list[str]:
    """Load positions from an EPD file.

    Example EPD line:
        rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 hmvc 0; fmvn 1;
    """
    positions = []

    for line_num, line in _content_lines(path):
        board = chess.Board()
        try:
            # python-chess understands hmvc/fmvn opcodes and ignores the rest
            board.set_epd(line)
        except ValueError as e:
            logger.warning(f"{path.name}:{line_num}: Failed to parse EPD: {e}")
            continue
        positions.append(board.fen())

    return positions


def _load_fen(path: Path) -> list[str]:
    """Load positions from a plain FEN file (one FEN per line)."""
    positions = []

    for line_num, line in _content_lines(path):
        try:
            board = chess.Board(line)
        except ValueError as e:
            logger.warning(f"{path.name}:{line_num}: Invalid FEN: {e}")
            continue
        positions.append(board.fen())

    return positions


def _load_pgn(path: Path, plies: int | None) -> list[str]:
    """Load one position per game from a PGN file."""
    positions = []

    with path.open() as f:
        while True:
            game = chess.pgn.read_game(f)
            if game is None:
                break

            if game.errors:
                logger.warning(
                    f"{path.name}: skipping game '{game.headers.get('Event', '?')}': {game.errors[0]}"
                )
                continue

            board = game.board()
            for i, move in enumerate(game.mainline_moves()):
                if plies is not None and i >= plies:
                    break
                board.push(move)

            positions.append(board.fen())

    return positions
