"""Finding clusters of touching pieces and moving them rigidly."""

from collections import deque
from typing import Iterable, List, Sequence, Set, Tuple

from .models import Piece, PieceID
from .pieces import get_piece_by_id, pieces_adjacent, pieces_overlapping, replace_pieces, translate_piece


def pieces_touching(a: Piece, b: Piece) -> bool:
    """Pieces rest against each other if they overlap or sit edge to edge."""
    return pieces_overlapping(a, b) or pieces_adjacent(a, b)


def find_touching_group(pieces: Sequence[Piece], seed_id: PieceID) -> List[Piece]:
    """
    Find every placed piece transitively touching the seed.

    Args:
        pieces: All pieces in the game
        seed_id: The piece being dragged

    Returns:
        The seed's cluster, in the order the pieces appear in `pieces`.
        A seed that is not on the board forms a cluster of one.

    Raises:
        KeyError: If the seed id is unknown
    """
    seed = get_piece_by_id(pieces, seed_id)
    if not seed.is_placed:
        return [seed]

    placed = [piece for piece in pieces if piece.is_placed]
    found: Set[PieceID] = {seed.id}
    queue = deque([seed])

    while queue:
        current = queue.popleft()
        for other in placed:
            if other.id not in found and pieces_touching(current, other):
                found.add(other.id)
                queue.append(other)

    return [piece for piece in pieces if piece.id in found]


def group_bounds(pieces: Iterable[Piece]) -> Tuple[int, int, int, int]:
    """
    Board bounding box (top, left, bottom, right) of placed pieces.

    Bottom and right are exclusive.

    Raises:
        ValueError: If no piece is given or one is not on the board
    """
    pieces = list(pieces)
    if not pieces or not all(piece.is_placed for piece in pieces):
        raise ValueError("group_bounds needs at least one piece, all on the board")
    return (
        min(piece.board_top for piece in pieces),
        min(piece.board_left for piece in pieces),
        max(piece.board_top + piece.rows for piece in pieces),
        max(piece.board_left + piece.cols for piece in pieces),
    )


def assign_group_offsets(members: Sequence[Piece]) -> List[Piece]:
    """Copies of the members with group_top/group_left relative to the cluster's top-left."""
    top, left, _, _ = group_bounds(members)
    return [
        piece.model_copy(update={"group_top": piece.board_top - top, "group_left": piece.board_left - left})
        for piece in members
    ]


def shift_group(
    pieces: Sequence[Piece],
    member_ids: Iterable[PieceID],
    d_row: int,
    d_col: int,
    grid_size: int,
) -> List[Piece]:
    """
    Translate every member by the same delta, keeping the cluster on the board.

    The delta is clamped so the cluster's bounding box stays inside the
    board; relative offsets between members never change.

    Returns:
        The full piece list with the members moved.
    """
    member_ids = set(member_ids)
    members = [piece for piece in pieces if piece.id in member_ids]
    if not members:
        return list(pieces)

    top, left, bottom, right = group_bounds(members)
    d_row = max(-top, min(d_row, grid_size - bottom))
    d_col = max(-left, min(d_col, grid_size - right))

    moved = {piece.id: translate_piece(piece, d_row, d_col) for piece in members}
    return replace_pieces(pieces, moved)
