"""Tests for text rendering."""

from src.board import Piece, compute_overlap_grid
from src.utils.board_visualizer import render_board, render_overlap, render_piece, render_pool


class TestRenderBoard:
    """Test cases for the board and overlap renderers."""

    def test_render_board(self):
        pieces = [Piece(id="a", letters=["CAT"], board_top=1, board_left=0), Piece(id="b", letters=["X"])]
        assert render_board(pieces, 3) == "...\nCAT\n..."

    def test_conflicts_marked(self):
        pieces = [
            Piece(id="a", letters=["CAT"], board_top=0, board_left=0),
            Piece(id="b", letters=["O"], board_top=0, board_left=1),
        ]
        assert render_board(pieces, 3).split("\n")[0] == "C*T"

    def test_render_overlap(self):
        pieces = [
            Piece(id="a", letters=["AB"], board_top=0, board_left=0),
            Piece(id="b", letters=["B"], board_top=0, board_left=1),
        ]
        assert render_overlap(compute_overlap_grid(pieces, 2)) == "12\n00"


class TestRenderPieces:
    """Test cases for piece outlines and the pool listing."""

    def test_render_piece_outline(self):
        assert render_piece(Piece(id="a", letters=["A"])) == "+-+\n|A|\n+-+"

    def test_render_piece_with_hole(self):
        lines = render_piece(Piece(id="a", letters=["AB", ".C"])).split("\n")
        assert lines[1] == "|A B|"
        assert lines[3] == "  |C|"

    def test_render_pool(self):
        pieces = [Piece(id="a", letters=["A.", "BC"], group_left=2), Piece(id="b", letters=["X"], board_top=0, board_left=0)]
        assert render_pool(pieces) == "[a] at pool (0, 2)\n  A.\n  BC"
