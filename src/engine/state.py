"""Game and drag state models. Both are frozen; the reducer produces copies."""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..board.models import Destination, Piece, PieceID, Point
from ..board.pieces import fits_on_board
from ..board.solve import SolutionPredicate, no_target, evaluate


class Phase(str, Enum):
    """Interaction phase derived from the drag state."""

    IDLE = "idle"
    DRAGGING_SINGLE = "dragging-single"
    DRAGGING_GROUP = "dragging-group"


class DragState(BaseModel):
    """
    An in-progress drag. Exists only between a drag start and its end.

    Attributes:
        piece_ids: Pieces moving together, in game order
        pointer_id: Pointer driving the drag
        pointer: Latest pointer position
        pointer_offset: Pointer position relative to the drag group's top-left
        destination: Where the group would land if released now
        is_shifting: True once the drag became a group shift confined to the board
        drag_has_moved: True once any move arrived
        group_origins: Pre-drag (group_top, group_left) of each dragged piece
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    piece_ids: List[PieceID] = Field(..., alias="pieceIDs", min_length=1)
    pointer_id: int = Field(..., alias="pointerID")
    pointer: Point
    pointer_offset: Point
    destination: Destination = Field(default_factory=Destination)
    is_shifting: bool = False
    drag_has_moved: bool = False
    group_origins: Dict[PieceID, Tuple[int, int]] = Field(default_factory=dict)

    @property
    def top_left(self) -> Point:
        """Unclamped top-left pixel of the drag group."""
        return self.pointer - self.pointer_offset


class GameState(BaseModel):
    """
    Complete state of one puzzle.

    Only the reducer produces new states; nothing else writes to it.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    pieces: List[Piece] = Field(default_factory=list)
    grid_size: int = Field(default=5, ge=1)
    drag_state: Optional[DragState] = None
    game_is_solved: bool = False
    all_pieces_are_used: bool = False

    @model_validator(mode="after")
    def _check_pieces(self) -> "GameState":
        seen = set()
        for piece in self.pieces:
            if piece.id in seen:
                raise ValueError(f"Duplicate piece id: {piece.id!r}")
            seen.add(piece.id)
            if piece.is_placed and not fits_on_board(piece, piece.board_top, piece.board_left, self.grid_size):
                raise ValueError(
                    f"Piece {piece.id!r} at ({piece.board_top}, {piece.board_left}) "
                    f"does not fit on a {self.grid_size}x{self.grid_size} board"
                )
        return self

    @classmethod
    def create(
        cls,
        pieces: List[Piece],
        grid_size: int,
        predicate: SolutionPredicate = no_target,
    ) -> "GameState":
        """
        Factory method for a fresh game with solve flags evaluated.

        Raises:
            ValueError: On duplicate ids or out-of-bounds initial placements
        """
        state = cls(pieces=pieces, grid_size=grid_size)
        solved, used = evaluate(state.pieces, grid_size, predicate)
        return state.model_copy(update={"game_is_solved": solved, "all_pieces_are_used": used})

    @property
    def phase(self) -> Phase:
        if self.drag_state is None:
            return Phase.IDLE
        if self.drag_state.is_shifting:
            return Phase.DRAGGING_GROUP
        return Phase.DRAGGING_SINGLE

    @property
    def dragged_pieces(self) -> List[Piece]:
        if self.drag_state is None:
            return []
        ids = set(self.drag_state.piece_ids)
        return [piece for piece in self.pieces if piece.id in ids]

    @property
    def pool_pieces(self) -> List[Piece]:
        """Unplaced pieces that are not currently being dragged."""
        dragging = {piece.id for piece in self.dragged_pieces}
        return [piece for piece in self.pieces if not piece.is_placed and piece.id not in dragging]
