"""Tests for position file loading."""

from pathlib import Path

import chess
import pytest

from chessprep.positions import load_positions

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
SICILIAN = "rnbqkbnr/pp1ppppp/8/2p5/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 2"


def _board_after(*san_moves: str) -> str:
    board = chess.Board()
    for san in san_moves:
        board.push_san(san)
    return board.fen()


class TestLoadPositions:
    """Tests for load_positions."""

    def test_fen_file(self, tmp_path: Path) -> None:
        """Test plain FEN lists with comments, blanks and bad lines."""
        path = tmp_path / "positions.fen"
        path.write_text(
            f"# opening positions\n{chess.STARTING_FEN}\n\n{AFTER_E4}\nnot a fen\n{SICILIAN}\n"
        )

        assert load_positions(path) == [chess.STARTING_FEN, AFTER_E4, SICILIAN]

    def test_duplicates_removed_in_order(self, tmp_path: Path) -> None:
        """Test de-duplication keeps the first occurrence."""
        path = tmp_path / "positions.fen"
        path.write_text(f"{AFTER_E4}\n{chess.STARTING_FEN}\n{AFTER_E4}\n")

        assert load_positions(path) == [AFTER_E4, chess.STARTING_FEN]

    def test_max_positions(self, tmp_path: Path) -> None:
        """Test truncation."""
        path = tmp_path / "positions.fen"
        path.write_text(f"{chess.STARTING_FEN}\n{AFTER_E4}\n{SICILIAN}\n")

        assert load_positions(path, max_positions=2) == [chess.STARTING_FEN, AFTER_E4]

    def test_epd_file(self, tmp_path: Path) -> None:
        """Test EPD records with opcodes."""
        path = tmp_path / "suite.epd"
        path.write_text(
            'rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - id "king pawn";\n'
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - bm e4;\n"
        )

        positions = load_positions(path)

        assert [fen.split()[:4] for fen in positions] == [
            AFTER_E4.split()[:4],
            chess.STARTING_FEN.split()[:4],
        ]

    def test_pgn_final_positions(self, tmp_path: Path) -> None:
        """Test one position per game from the end of the main line."""
        path = tmp_path / "games.pgn"
        path.write_text(
            '[Event "A"]\n\n1. e4 c5 2. Nf3 *\n\n'
            '[Event "B"]\n\n1. d4 d5 *\n'
        )

        assert load_positions(path) == [
            _board_after("e4", "c5", "Nf3"),
            _board_after("d4", "d5"),
        ]

    def test_pgn_plies(self, tmp_path: Path) -> None:
        """Test stopping each game after a fixed number of plies."""
        path = tmp_path / "games.pgn"
        path.write_text('[Event "A"]\n\n1. e4 c5 2. Nf3 d6 *\n')

        assert load_positions(path, pgn_plies=2) == [SICILIAN]

    def test_pgn_game_with_illegal_move_is_skipped(self, tmp_path: Path) -> None:
        """Test that broken games do not contribute positions."""
        path = tmp_path / "games.pgn"
        path.write_text(
            '[Event "Broken"]\n\n1. e4 e5 2. Ke3 *\n\n'
            '[Event "Fine"]\n\n1. d4 *\n'
        )

        assert load_positions(path) == [_board_after("d4")]

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test loading a nonexistent file."""
        with pytest.raises(FileNotFoundError):
            load_positions(tmp_path / "missing.fen")

    def test_unsupported_format(self, tmp_path: Path) -> None:
        """Test an unknown suffix."""
        path = tmp_path / "positions.txt"
        path.write_text(chess.STARTING_FEN)
        with pytest.raises(ValueError, match="Unsupported"):
            load_positions(path)
