"""Drag session engine: actions, state, reducer and the engine that owns them."""

from .actions import (
    Action,
    DragStart,
    DragMove,
    DragNeighbors,
    DragEnd,
    ShiftMove,
    ShiftEnd,
    parse_action,
)
from .state import Phase, DragState, GameState
from .reducer import reduce
from .timer import Scheduler, ManualClock, DwellTimer
from .capture import PointerCapture, NullCapture, ScriptedCapture, captured
from .config import SolutionConfig, PuzzleConfig, load_config
from .game import GameEngine, DEFAULT_DWELL_MS

__all__ = [
    "Action",
    "DragStart",
    "DragMove",
    "DragNeighbors",
    "DragEnd",
    "ShiftMove",
    "ShiftEnd",
    "parse_action",
    "Phase",
    "DragState",
    "GameState",
    "reduce",
    "Scheduler",
    "ManualClock",
    "DwellTimer",
    "PointerCapture",
    "NullCapture",
    "ScriptedCapture",
    "captured",
    "SolutionConfig",
    "PuzzleConfig",
    "load_config",
    "GameEngine",
    "DEFAULT_DWELL_MS",
]
