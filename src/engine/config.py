"""Puzzle configuration loaded from YAML."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, model_validator

from .state import GameState
from ..board.models import Piece, Rect, Surfaces
from ..board.solve import SolutionPredicate, no_target, forms_words, matches_layout


class SolutionConfig(BaseModel):
    """How the finished board is checked. With neither field set, the board is never solved."""
    layout: Optional[List[str]] = None
    words: Optional[List[str]] = None

    @model_validator(mode="after")
    def _one_rule(self) -> "SolutionConfig":
        if self.layout is not None and self.words is not None:
            raise ValueError("Solution may give a layout or a word list, not both")
        return self

    def predicate(self) -> SolutionPredicate:
        if self.layout is not None:
            return matches_layout(self.layout)
        if self.words is not None:
            return forms_words(self.words)
        return no_target


class PuzzleConfig(BaseModel):
    """Configuration for one puzzle and, optionally, a scripted interaction."""
    grid_size: int = Field(default=5, ge=1)
    dwell_ms: int = Field(default=500, ge=0)
    board: Optional[Rect] = None
    pool: Optional[Rect] = None
    pieces: List[Piece] = Field(default_factory=list)
    solution: SolutionConfig = Field(default_factory=SolutionConfig)
    script: List[Dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_layout_size(self) -> "PuzzleConfig":
        layout = self.solution.layout
        if layout is not None and (
            len(layout) != self.grid_size or any(len(row) != self.grid_size for row in layout)
        ):
            raise ValueError(f"Solution layout must be {self.grid_size}x{self.grid_size}")
        return self

    @property
    def surfaces(self) -> Surfaces:
        return Surfaces(board=self.board, pool=self.pool)

    def initial_state(self) -> GameState:
        """
        Build the starting GameState.

        Raises:
            ValueError: On duplicate piece ids or out-of-bounds placements
        """
        return GameState.create(self.pieces, self.grid_size, self.solution.predicate())


def load_config(config_path: Union[str, Path]) -> PuzzleConfig:
    """
    Load a puzzle configuration from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not a valid puzzle
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    return PuzzleConfig(**data)
