"""
Actions consumed by the reducer.

The rendering layer dispatches these as plain mappings such as
``{"action": "dragMove", "pointer": {"x": 10, "y": 20}}``; parse_action()
validates them into the closed union below.
"""

from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ..board.models import PieceID, Point


class _ActionBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class DragStart(_ActionBase):
    """A pointer went down on a piece."""
    action: Literal["dragStart"] = "dragStart"
    piece_id: PieceID = Field(..., alias="pieceID")
    pointer_id: int = Field(..., alias="pointerID")
    pointer: Point
    pointer_offset: Point = Field(..., alias="pointerOffset")


class DragMove(_ActionBase):
    """The pointer moved during a single-piece drag."""
    action: Literal["dragMove"] = "dragMove"
    pointer: Point


class DragNeighbors(_ActionBase):
    """The dwell timer fired: pick up every piece touching the dragged one."""
    action: Literal["dragNeighbors"] = "dragNeighbors"


class DragEnd(_ActionBase):
    """The pointer was released during a single-piece drag."""
    action: Literal["dragEnd"] = "dragEnd"


class ShiftMove(_ActionBase):
    """The pointer moved during a group shift."""
    action: Literal["shiftMove"] = "shiftMove"
    pointer: Point


class ShiftEnd(_ActionBase):
    """The pointer was released during a group shift."""
    action: Literal["shiftEnd"] = "shiftEnd"


Action = Annotated[
    Union[DragStart, DragMove, DragNeighbors, DragEnd, ShiftMove, ShiftEnd],
    Field(discriminator="action"),
]

_ACTION_ADAPTER: TypeAdapter = TypeAdapter(Action)


def parse_action(data: Mapping[str, Any]) -> Action:
    """
    Validate a plain mapping into an action.

    Raises:
        pydantic.ValidationError: If the action name or payload is invalid
    """
    return _ACTION_ADAPTER.validate_python(dict(data))
