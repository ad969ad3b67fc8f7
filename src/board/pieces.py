"""Queries and position updates on pieces."""

from typing import Dict, Iterable, List, Set, Tuple

from .models import Border, Cell, Piece, PieceID


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


def get_piece_by_id(pieces: Iterable[Piece], piece_id: PieceID) -> Piece:
    """
    Look up a piece by id.

    Raises:
        KeyError: If no piece has this id
    """
    for piece in pieces:
        if piece.id == piece_id:
            return piece
    raise KeyError(f"Unknown piece id: {piece_id!r}")


def letter_cells(piece: Piece) -> List[Cell]:
    """Local (row, col) coordinates of the piece's non-empty letters."""
    return [
        Cell(r, c)
        for r, row in enumerate(piece.letters)
        for c, letter in enumerate(row)
        if letter
    ]


def piece_cells(piece: Piece) -> Set[Cell]:
    """Board cells covered by a placed piece's letters. Empty for pool pieces."""
    if not piece.is_placed:
        return set()
    return {Cell(piece.board_top + r, piece.board_left + c) for r, c in letter_cells(piece)}


def _boxes_intersect(a: Piece, b: Piece) -> bool:
    return (
        a.board_top < b.board_top + b.rows
        and b.board_top < a.board_top + a.rows
        and a.board_left < b.board_left + b.cols
        and b.board_left < a.board_left + a.cols
    )


def pieces_overlapping(a: Piece, b: Piece) -> bool:
    """True if both pieces are placed and share a cell where both have a letter."""
    if not (a.is_placed and b.is_placed) or not _boxes_intersect(a, b):
        return False
    return not piece_cells(a).isdisjoint(piece_cells(b))


def pieces_adjacent(a: Piece, b: Piece) -> bool:
    """True if a letter of one piece sits directly beside a letter of the other."""
    if not (a.is_placed and b.is_placed):
        return False
    cells_b = piece_cells(b)
    for row, col in piece_cells(a):
        for d_row, d_col in ORTHOGONAL_STEPS:
            if (row + d_row, col + d_col) in cells_b:
                return True
    return False


def fits_on_board(piece: Piece, row: int, col: int, grid_size: int) -> bool:
    """Whether the piece's bounding box fits on the board with its top-left at (row, col)."""
    return 0 <= row and 0 <= col and row + piece.rows <= grid_size and col + piece.cols <= grid_size


def place_piece(piece: Piece, row: int, col: int) -> Piece:
    """Copy of the piece with its top-left at board cell (row, col)."""
    return piece.model_copy(update={"board_top": row, "board_left": col})


def translate_piece(piece: Piece, d_row: int, d_col: int) -> Piece:
    """
    Copy of a placed piece moved by (d_row, d_col).

    Raises:
        ValueError: If the piece is not on the board
    """
    if not piece.is_placed:
        raise ValueError(f"Cannot translate piece {piece.id!r}: it is not on the board")
    return place_piece(piece, piece.board_top + d_row, piece.board_left + d_col)


def letter_borders(piece: Piece) -> Dict[Cell, Border]:
    """For each letter, which of its edges are on the piece outline."""
    letters = piece.letters

    def filled(r: int, c: int) -> bool:
        return 0 <= r < piece.rows and 0 <= c < piece.cols and bool(letters[r][c])

    return {
        Cell(r, c): Border(
            top=not filled(r - 1, c),
            bottom=not filled(r + 1, c),
            left=not filled(r, c - 1),
            right=not filled(r, c + 1),
        )
        for r, c in letter_cells(piece)
    }


def replace_pieces(pieces: Iterable[Piece], updated: Dict[PieceID, Piece]) -> List[Piece]:
    """Return the piece list with the given pieces swapped in, order preserved."""
    return [updated.get(piece.id, piece) for piece in pieces]
