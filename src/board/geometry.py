"""Coordinate math between pixel space and board cells."""

import math
from typing import Iterable, Optional, Tuple

from .models import Cell, Piece, Point, Rect, Surfaces, Where
from ..utils.logger import get_logger


logger = get_logger(__name__)


def cell_size(board: Rect, grid_size: int) -> Tuple[float, float]:
    """Pixel (width, height) of a single board cell."""
    return board.width / grid_size, board.height / grid_size


def pixel_to_cell(board: Rect, point: Point, grid_size: int) -> Cell:
    """
    Map a pixel coordinate to the board cell containing it.

    The result is not clamped: points left of or above the board give
    negative indices, points past the far edge give indices >= grid_size.
    """
    cell_w, cell_h = cell_size(board, grid_size)
    return Cell(
        math.floor((point.y - board.top) / cell_h),
        math.floor((point.x - board.left) / cell_w),
    )


def snap_to_cell(board: Rect, top_left: Point, grid_size: int) -> Cell:
    """Board cell nearest to the top-left pixel of a dragged group."""
    cell_w, cell_h = cell_size(board, grid_size)
    return pixel_to_cell(board, Point(x=top_left.x + cell_w / 2, y=top_left.y + cell_h / 2), grid_size)


def group_extent(pieces: Iterable[Piece]) -> Tuple[int, int]:
    """(rows, cols) spanned by a drag group, measured from its top-left."""
    pieces = list(pieces)
    if not pieces:
        return 0, 0
    rows = max(piece.group_top + piece.rows for piece in pieces)
    cols = max(piece.group_left + piece.cols for piece in pieces)
    return rows, cols


def clamp_group_to_board(
    board: Optional[Rect],
    extent: Tuple[int, int],
    grid_size: int,
    top_left: Point,
) -> Point:
    """
    Constrain a dragged group's top-left pixel so the whole group stays on the board.

    Args:
        board: Board rectangle, or None if the board cannot be measured yet
        extent: (rows, cols) of the group, see group_extent()
        grid_size: Number of cells per board side
        top_left: Unclamped top-left pixel of the group

    Returns:
        The clamped top-left pixel. Without a board rectangle the point is
        returned unchanged.
    """
    if board is None:
        logger.debug("Board geometry unavailable, group position left unclamped")
        return top_left

    cell_w, cell_h = cell_size(board, grid_size)
    rows, cols = extent
    max_left = board.left + cell_w * (grid_size - cols)
    max_top = board.top + cell_h * (grid_size - rows)
    return Point(
        x=max(board.left, min(top_left.x, max_left)),
        y=max(board.top, min(top_left.y, max_top)),
    )


def locate(surfaces: Surfaces, point: Point) -> Where:
    """Hit-test a pointer against the board and pool. The board wins where both match."""
    if surfaces.board is not None and surfaces.board.contains(point):
        return "board"
    if surfaces.pool is not None and surfaces.pool.contains(point):
        return "pool"
    return "none"
