"""Board core: pieces, geometry, overlap counting, shift groups and solve detection."""

from .models import Piece, PieceID, Point, Rect, Surfaces, Destination, Cell, Border, Where
from .geometry import cell_size, pixel_to_cell, snap_to_cell, group_extent, clamp_group_to_board, locate
from .pieces import (
    get_piece_by_id,
    letter_cells,
    piece_cells,
    pieces_overlapping,
    pieces_adjacent,
    fits_on_board,
    place_piece,
    translate_piece,
    letter_borders,
)
from .overlap import OverlapGrid, compute_overlap_grid, conflict_cells, has_conflicts, overlapping_letters
from .shift import pieces_touching, find_touching_group, group_bounds, assign_group_offsets, shift_group
from .solve import (
    SolutionPredicate,
    no_target,
    matches_layout,
    forms_words,
    extract_words,
    board_letters,
    all_pieces_are_used,
    evaluate,
)

__all__ = [
    # Models
    "Piece",
    "PieceID",
    "Point",
    "Rect",
    "Surfaces",
    "Destination",
    "Cell",
    "Border",
    "Where",
    # Geometry
    "cell_size",
    "pixel_to_cell",
    "snap_to_cell",
    "group_extent",
    "clamp_group_to_board",
    "locate",
    # Pieces
    "get_piece_by_id",
    "letter_cells",
    "piece_cells",
    "pieces_overlapping",
    "pieces_adjacent",
    "fits_on_board",
    "place_piece",
    "translate_piece",
    "letter_borders",
    # Overlap grid
    "OverlapGrid",
    "compute_overlap_grid",
    "conflict_cells",
    "has_conflicts",
    "overlapping_letters",
    # Shift groups
    "pieces_touching",
    "find_touching_group",
    "group_bounds",
    "assign_group_offsets",
    "shift_group",
    # Solve detection
    "SolutionPredicate",
    "no_target",
    "matches_layout",
    "forms_words",
    "extract_words",
    "board_letters",
    "all_pieces_are_used",
    "evaluate",
]
