"""Data models for pieces and board geometry."""

from typing import List, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# Type aliases
PieceID = Union[int, str]
Where = Literal["board", "pool", "none"]

# Characters accepted as holes when letters are given as row strings
HOLE_CHARS = {".", " ", "_"}


class Cell(NamedTuple):
    """A board cell (row, col)."""
    row: int
    col: int


class Border(NamedTuple):
    """Which edges of a letter lie on its piece's outline."""
    top: bool
    bottom: bool
    left: bool
    right: bool


class Point(BaseModel):
    """A pointer coordinate in pixel space."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def __sub__(self, other: "Point") -> "Point":
        return Point(x=self.x - other.x, y=self.y - other.y)


class Rect(BaseModel):
    """A bounding rectangle in pixel space."""
    model_config = ConfigDict(frozen=True)

    left: float
    top: float
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, point: Point) -> bool:
        return self.left <= point.x < self.right and self.top <= point.y < self.bottom


class Surfaces(BaseModel):
    """Hit-test geometry supplied by the rendering layer. Either rect may be unknown."""
    model_config = ConfigDict(frozen=True)

    board: Optional[Rect] = None
    pool: Optional[Rect] = None


class Destination(BaseModel):
    """Where a drag would land if released now."""
    model_config = ConfigDict(frozen=True)

    where: Where = "none"
    row: Optional[int] = None
    col: Optional[int] = None


class Piece(BaseModel):
    """
    A rigid matrix of letters with holes.

    Letters never change after creation. Only the position fields change,
    and only by copying the piece.

    Attributes:
        id: Unique piece identifier
        letters: Rectangular letter matrix, "" marks a hole
        board_top: Board row of the top-left cell, None while in the pool
        board_left: Board column of the top-left cell, None while in the pool
        group_top: Row offset within the pool layout or the drag group
        group_left: Column offset within the pool layout or the drag group
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: PieceID
    letters: List[List[str]]
    board_top: Optional[int] = None
    board_left: Optional[int] = None
    group_top: int = Field(default=0, ge=0)
    group_left: int = Field(default=0, ge=0)

    @field_validator("letters", mode="before")
    @classmethod
    def _split_rows(cls, value):
        """Accept rows given as strings, e.g. ["CA.", ".TS"]."""
        if isinstance(value, str):
            value = value.split("\n")
        if isinstance(value, (list, tuple)):
            return [
                ["" if ch in HOLE_CHARS else ch for ch in row] if isinstance(row, (str, list, tuple)) else row
                for row in value
            ]
        return value

    @field_validator("letters")
    @classmethod
    def _check_matrix(cls, letters: List[List[str]]) -> List[List[str]]:
        if not letters or not letters[0]:
            raise ValueError("Piece letters must have at least one row and one column")
        width = len(letters[0])
        for row in letters:
            if len(row) != width:
                raise ValueError(f"Piece letters must be rectangular (rows of width {width})")
            for ch in row:
                if len(ch) > 1:
                    raise ValueError(f"Letter cell '{ch}' must be a single character or empty")
        if not any(ch for row in letters for ch in row):
            raise ValueError("Piece must contain at least one letter")
        return [[ch.upper() for ch in row] for row in letters]

    @model_validator(mode="after")
    def _check_position(self) -> "Piece":
        if (self.board_top is None) != (self.board_left is None):
            raise ValueError(f"Piece {self.id!r} must set both board_top and board_left, or neither")
        return self

    @property
    def rows(self) -> int:
        return len(self.letters)

    @property
    def cols(self) -> int:
        return len(self.letters[0])

    @property
    def is_placed(self) -> bool:
        return self.board_top is not None and self.board_left is not None

    @property
    def text(self) -> str:
        """Letters joined row by row, holes shown as '.'."""
        return "\n".join("".join(ch or "." for ch in row) for row in self.letters)
