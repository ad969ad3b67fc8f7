"""
The drag session state machine.

reduce() applies one action to a GameState and returns the next state. It is
pure: the same state, action and geometry always give the same result.
Illegal actions are logged and return the input state unchanged; they never
raise.

Phases:
    idle --dragStart--> dragging-single --dragNeighbors--> dragging-group
    dragging-single --dragEnd--> idle
    dragging-group --shiftEnd--> idle
"""

from typing import Dict, List, Optional

from .actions import Action, DragEnd, DragMove, DragNeighbors, DragStart, ShiftEnd, ShiftMove
from .state import DragState, GameState
from ..board.geometry import cell_size, clamp_group_to_board, group_extent, locate, snap_to_cell
from ..board.models import Destination, Piece, PieceID, Point, Surfaces
from ..board.pieces import fits_on_board, get_piece_by_id, place_piece, replace_pieces
from ..board.shift import assign_group_offsets, find_touching_group, group_bounds, shift_group
from ..board.solve import SolutionPredicate, no_target, evaluate
from ..utils.logger import get_logger


logger = get_logger(__name__)


def reduce(
    state: GameState,
    action: Action,
    surfaces: Optional[Surfaces] = None,
    predicate: SolutionPredicate = no_target,
) -> GameState:
    """
    Apply a single action.

    Args:
        state: Current game state
        action: The action to apply
        surfaces: Board and pool rectangles for hit-testing and clamping
        predicate: Solution predicate re-evaluated after every drop

    Returns:
        The next state, or `state` itself if the action was rejected
    """
    surfaces = surfaces or Surfaces()

    match action:
        case DragStart():
            return _drag_start(state, action)
        case DragMove(pointer=pointer):
            return _move(state, pointer, surfaces, shifting=False)
        case ShiftMove(pointer=pointer):
            return _move(state, pointer, surfaces, shifting=True)
        case DragNeighbors():
            return _drag_neighbors(state, surfaces)
        case DragEnd():
            return _drop(state, predicate, shifting=False)
        case ShiftEnd():
            return _drop(state, predicate, shifting=True)
        case _:
            raise TypeError(f"Unknown action: {action!r}")


def _reject(state: GameState, action: str, reason: str) -> GameState:
    logger.warning("Ignoring %s: %s", action, reason)
    return state


def _drag_start(state: GameState, action: DragStart) -> GameState:
    if state.drag_state is not None:
        return _reject(state, "dragStart", "a drag is already in progress")
    if state.game_is_solved:
        return _reject(state, "dragStart", "the puzzle is solved")
    try:
        piece = get_piece_by_id(state.pieces, action.piece_id)
    except KeyError as e:
        return _reject(state, "dragStart", str(e))

    # A piece picked up on the board starts over the cell it occupies
    if piece.is_placed:
        destination = Destination(where="board", row=piece.board_top, col=piece.board_left)
    else:
        destination = Destination()

    drag_state = DragState(
        piece_ids=[piece.id],
        pointer_id=action.pointer_id,
        pointer=action.pointer,
        pointer_offset=action.pointer_offset,
        destination=destination,
        group_origins={piece.id: (piece.group_top, piece.group_left)},
    )
    lifted = piece.model_copy(update={"group_top": 0, "group_left": 0})
    logger.debug("Drag started on piece %r with pointer %d", piece.id, action.pointer_id)
    return state.model_copy(update={
        "pieces": replace_pieces(state.pieces, {piece.id: lifted}),
        "drag_state": drag_state,
    })


def _move(state: GameState, pointer: Point, surfaces: Surfaces, shifting: bool) -> GameState:
    name = "shiftMove" if shifting else "dragMove"
    drag = state.drag_state
    if drag is None:
        return _reject(state, name, "no drag in progress")
    if drag.is_shifting != shifting:
        return _reject(state, name, "wrong kind of drag in progress")

    top_left = drag.model_copy(update={"pointer": pointer}).top_left
    if shifting and surfaces.board is not None:
        extent = group_extent(state.dragged_pieces)
        top_left = clamp_group_to_board(surfaces.board, extent, state.grid_size, top_left)
        cell = snap_to_cell(surfaces.board, top_left, state.grid_size)
        destination = Destination(where="board", row=cell.row, col=cell.col)
    else:
        destination = _destination(surfaces, pointer, top_left, state.grid_size)

    return state.model_copy(update={
        "drag_state": drag.model_copy(update={
            "pointer": pointer,
            "drag_has_moved": True,
            "destination": destination,
        }),
    })


def _destination(surfaces: Surfaces, pointer: Point, top_left: Point, grid_size: int) -> Destination:
    where = locate(surfaces, pointer)
    if where != "board":
        return Destination(where=where)
    cell = snap_to_cell(surfaces.board, top_left, grid_size)
    return Destination(where="board", row=cell.row, col=cell.col)


def _drag_neighbors(state: GameState, surfaces: Surfaces) -> GameState:
    drag = state.drag_state
    if drag is None or drag.is_shifting:
        return _reject(state, "dragNeighbors", "no single-piece drag in progress")
    if drag.drag_has_moved or drag.destination.where != "board":
        return _reject(state, "dragNeighbors", "the drag is not resting on the board")

    seed = get_piece_by_id(state.pieces, drag.piece_ids[0])
    if not seed.is_placed:
        return _reject(state, "dragNeighbors", f"piece {seed.id!r} is not on the board")

    members = assign_group_offsets(find_touching_group(state.pieces, seed.id))
    top, left, _, _ = group_bounds(members)
    before = {piece.id: piece for piece in state.pieces}
    origins = dict(drag.group_origins)
    for member in members:
        origins.setdefault(member.id, (before[member.id].group_top, before[member.id].group_left))

    # Keep the seed under the pointer: the drag group's top-left moves to the cluster's top-left
    offset = drag.pointer_offset
    seed_in_group = next(m for m in members if m.id == seed.id)
    if surfaces.board is not None:
        cell_w, cell_h = cell_size(surfaces.board, state.grid_size)
        offset = Point(
            x=offset.x + seed_in_group.group_left * cell_w,
            y=offset.y + seed_in_group.group_top * cell_h,
        )
    else:
        logger.debug("Board geometry unavailable, pointer offset kept for group drag")

    logger.info("Shifting group of %d piece(s) around %r", len(members), seed.id)
    return state.model_copy(update={
        "pieces": replace_pieces(state.pieces, {m.id: m for m in members}),
        "drag_state": drag.model_copy(update={
            "piece_ids": [m.id for m in members],
            "pointer_offset": offset,
            "destination": Destination(where="board", row=top, col=left),
            "is_shifting": True,
            "group_origins": origins,
        }),
    })


def _drop(state: GameState, predicate: SolutionPredicate, shifting: bool) -> GameState:
    name = "shiftEnd" if shifting else "dragEnd"
    drag = state.drag_state
    if drag is None:
        return _reject(state, name, "no drag in progress")
    if drag.is_shifting != shifting:
        return _reject(state, name, "wrong kind of drag in progress")

    pieces = state.pieces
    dragged = state.dragged_pieces
    destination = drag.destination

    if destination.where != "board" or destination.row is None or destination.col is None:
        logger.debug("Drop of %s outside the board, positions kept", drag.piece_ids)
    elif shifting:
        top, left, _, _ = group_bounds(dragged)
        pieces = shift_group(pieces, drag.piece_ids, destination.row - top, destination.col - left, state.grid_size)
    else:
        targets = {
            piece.id: (destination.row + piece.group_top, destination.col + piece.group_left)
            for piece in dragged
        }
        if all(fits_on_board(piece, *targets[piece.id], state.grid_size) for piece in dragged):
            pieces = replace_pieces(pieces, {
                piece.id: place_piece(piece, *targets[piece.id]) for piece in dragged
            })
        else:
            logger.info(
                "Drop of %s at (%d, %d) is out of bounds, reverting",
                drag.piece_ids, destination.row, destination.col,
            )

    pieces = _restore_group_origins(pieces, drag)
    solved, used = evaluate(pieces, state.grid_size, predicate)
    if solved and not state.game_is_solved:
        logger.info("Puzzle solved")

    return state.model_copy(update={
        "pieces": pieces,
        "drag_state": None,
        "game_is_solved": solved,
        "all_pieces_are_used": used,
    })


def _restore_group_origins(pieces: List[Piece], drag: DragState) -> List[Piece]:
    restored: Dict[PieceID, Piece] = {}
    for piece in pieces:
        if piece.id in drag.group_origins:
            group_top, group_left = drag.group_origins[piece.id]
            restored[piece.id] = piece.model_copy(update={"group_top": group_top, "group_left": group_left})
    return replace_pieces(pieces, restored)
