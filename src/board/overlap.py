"""Occupancy counts of board cells, recomputed from piece positions."""

from typing import Iterable, List, Set

from .models import Cell, Piece
from .pieces import letter_cells


# A cell counted this many times or more is a conflict
CONFLICT_THRESHOLD = 2

OverlapGrid = List[List[int]]


def compute_overlap_grid(pieces: Iterable[Piece], grid_size: int) -> OverlapGrid:
    """
    Count how many placed pieces have a letter on each board cell.

    Pieces are assumed to be in bounds; the reducer refuses placements that
    are not.
    """
    grid = [[0] * grid_size for _ in range(grid_size)]
    for piece in pieces:
        if not piece.is_placed:
            continue
        for r, c in letter_cells(piece):
            grid[piece.board_top + r][piece.board_left + c] += 1
    return grid


def conflict_cells(grid: OverlapGrid) -> Set[Cell]:
    """Board cells covered by two or more pieces."""
    return {
        Cell(r, c)
        for r, row in enumerate(grid)
        for c, count in enumerate(row)
        if count >= CONFLICT_THRESHOLD
    }


def has_conflicts(grid: OverlapGrid) -> bool:
    return any(count >= CONFLICT_THRESHOLD for row in grid for count in row)


def overlapping_letters(piece: Piece, grid: OverlapGrid) -> Set[Cell]:
    """Local coordinates of a placed piece's letters that sit on a conflict."""
    if not piece.is_placed:
        return set()
    return {
        Cell(r, c)
        for r, c in letter_cells(piece)
        if grid[piece.board_top + r][piece.board_left + c] >= CONFLICT_THRESHOLD
    }
