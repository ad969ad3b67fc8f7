"""Text rendering of the board, overlap counts, pieces and the pool."""

from typing import Iterable, List

from ..board.models import Piece
from ..board.overlap import OverlapGrid, compute_overlap_grid, conflict_cells
from ..board.pieces import letter_borders, letter_cells


CONFLICT_MARK = "*"
EMPTY_MARK = "."


def render_board(pieces: Iterable[Piece], grid_size: int) -> str:
    """
    Render placed pieces as a letter grid.

    Empty cells show '.', cells covered by more than one piece show '*'.
    """
    pieces = list(pieces)
    grid = [[EMPTY_MARK] * grid_size for _ in range(grid_size)]
    for piece in pieces:
        if not piece.is_placed:
            continue
        for r, c in letter_cells(piece):
            grid[piece.board_top + r][piece.board_left + c] = piece.letters[r][c]

    for row, col in conflict_cells(compute_overlap_grid(pieces, grid_size)):
        grid[row][col] = CONFLICT_MARK

    return "\n".join("".join(row) for row in grid)


def render_overlap(grid: OverlapGrid) -> str:
    """Render the overlap grid as digits, one row per line."""
    return "\n".join("".join(str(min(count, 9)) for count in row) for row in grid)


def render_piece(piece: Piece) -> str:
    """
    Draw a piece with its outline.

    Each letter sits in a 3x3 block of characters whose edges are drawn
    where the letter borders a hole or the outside of the piece.
    """
    height, width = piece.rows * 2 + 1, piece.cols * 2 + 1
    canvas: List[List[str]] = [[" "] * width for _ in range(height)]

    for (r, c), border in letter_borders(piece).items():
        y, x = r * 2 + 1, c * 2 + 1
        canvas[y][x] = piece.letters[r][c]
        if border.top:
            canvas[y - 1][x] = "-"
        if border.bottom:
            canvas[y + 1][x] = "-"
        if border.left:
            canvas[y][x - 1] = "|"
        if border.right:
            canvas[y][x + 1] = "|"

    # Corners wherever an edge meets them
    for y in range(0, height, 2):
        for x in range(0, width, 2):
            around = [
                canvas[yy][xx]
                for yy, xx in ((y - 1, x), (y + 1, x), (y, x - 1), (y, x + 1))
                if 0 <= yy < height and 0 <= xx < width
            ]
            if any(ch in "-|" for ch in around):
                canvas[y][x] = "+"

    return "\n".join("".join(row).rstrip() for row in canvas)


def render_pool(pieces: Iterable[Piece]) -> str:
    """List the pieces still waiting in the pool."""
    lines = []
    for piece in pieces:
        if piece.is_placed:
            continue
        lines.append(f"[{piece.id}] at pool ({piece.group_top}, {piece.group_left})")
        lines.extend(f"  {row}" for row in piece.text.split("\n"))
    return "\n".join(lines)
