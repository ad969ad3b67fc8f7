"""
GameEngine: the single owner of a GameState.

The rendering layer dispatches actions here and reads snapshots back. The
engine feeds each action through the pure reducer and handles the two
time-dependent collaborators around it: the dwell timer that turns a held
drag into a group shift, and pointer capture for the active drag.
"""

from collections import deque
from contextlib import ExitStack
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Union

from .actions import Action, DragEnd, DragNeighbors, parse_action
from .capture import NullCapture, PointerCapture, captured
from .config import PuzzleConfig
from .reducer import reduce
from .state import GameState
from .timer import DwellTimer, ManualClock, Scheduler
from ..board.models import Rect, Surfaces
from ..board.overlap import OverlapGrid, compute_overlap_grid
from ..board.solve import SolutionPredicate, no_target
from ..utils.logger import get_logger


logger = get_logger(__name__)

# Hold time before a resting drag picks up its neighbours
DEFAULT_DWELL_MS = 500

Listener = Callable[[GameState], None]


class GameEngine:
    """
    Single-writer container for one game.

    Actions are processed one at a time to completion. Actions dispatched
    while another is being processed (by a capture failure or a timer that
    fires synchronously) are queued and run afterwards.

    Attributes:
        state: Current game state
        surfaces: Board and pool rectangles used for hit-testing
        predicate: Solution predicate
        scheduler: Scheduler for the dwell timer (an asyncio loop works)
        capture: Pointer capture collaborator
        rejected: Number of actions rejected as illegal so far
    """

    def __init__(
        self,
        state: GameState,
        surfaces: Optional[Surfaces] = None,
        predicate: SolutionPredicate = no_target,
        scheduler: Optional[Scheduler] = None,
        capture: Optional[PointerCapture] = None,
        dwell_ms: int = DEFAULT_DWELL_MS,
    ):
        self.state = state
        self.surfaces = surfaces or Surfaces()
        self.predicate = predicate
        self.scheduler = scheduler or ManualClock()
        self.capture = capture or NullCapture()
        self.rejected = 0
        self._dwell = DwellTimer(self.scheduler, dwell_ms / 1000, self._on_dwell)
        self._queue: Deque[Action] = deque()
        self._dispatching = False
        self._capture_scope: Optional[ExitStack] = None
        self._listeners: List[Listener] = []

    @classmethod
    def from_config(
        cls,
        config: PuzzleConfig,
        scheduler: Optional[Scheduler] = None,
        capture: Optional[PointerCapture] = None,
    ) -> "GameEngine":
        """
        Factory method to create an engine for a configured puzzle.

        Raises:
            ValueError: If the configured pieces do not form a valid starting state
        """
        return cls(
            state=config.initial_state(),
            surfaces=config.surfaces,
            predicate=config.solution.predicate(),
            scheduler=scheduler,
            capture=capture,
            dwell_ms=config.dwell_ms,
        )

    def subscribe(self, listener: Listener) -> None:
        """Call `listener` with the new state after every processed action."""
        self._listeners.append(listener)

    def set_board_rect(self, board: Optional[Rect]) -> None:
        """Update the measured board rectangle, or None if it cannot be measured."""
        self.surfaces = self.surfaces.model_copy(update={"board": board})

    def dispatch(self, action: Union[Action, Mapping[str, Any]]) -> GameState:
        """
        Apply an action and return the resulting state.

        Args:
            action: An action model or a mapping such as {"action": "dragEnd"}

        Raises:
            pydantic.ValidationError: If a mapping does not describe a known action
        """
        if isinstance(action, Mapping):
            action = parse_action(action)

        self._queue.append(action)
        if self._dispatching:
            return self.state

        self._dispatching = True
        try:
            while self._queue:
                self._apply(self._queue.popleft())
        finally:
            self._dispatching = False
        return self.state

    def overlap_grid(self) -> OverlapGrid:
        return compute_overlap_grid(self.state.pieces, self.state.grid_size)

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the state plus the overlap grid."""
        data = self.state.model_dump(mode="json", by_alias=True)
        data["phase"] = self.state.phase.value
        data["overlapGrid"] = self.overlap_grid()
        return data

    def close(self) -> None:
        """Cancel the dwell timer and release any held pointer."""
        self._dwell.cancel()
        self._release_capture()

    def _apply(self, action: Action) -> None:
        before = self.state
        after = reduce(before, action, self.surfaces, self.predicate)
        if after is before:
            self.rejected += 1
            return

        self.state = after
        self._sync_capture(before, after)
        self._sync_dwell(before, after)
        for listener in self._listeners:
            listener(after)

    def _sync_capture(self, before: GameState, after: GameState) -> None:
        if before.drag_state is not None and after.drag_state is None:
            self._release_capture()

        if before.drag_state is None and after.drag_state is not None:
            pointer_id = after.drag_state.pointer_id
            self._capture_scope = ExitStack()
            if not self._capture_scope.enter_context(captured(self.capture, pointer_id)):
                logger.warning("Failed to capture pointer %d, ending drag", pointer_id)
                self._queue.append(DragEnd())

    def _release_capture(self) -> None:
        if self._capture_scope is not None:
            scope, self._capture_scope = self._capture_scope, None
            scope.close()

    @staticmethod
    def _resting_on_board(state: GameState) -> bool:
        drag = state.drag_state
        return (
            drag is not None
            and not drag.is_shifting
            and not drag.drag_has_moved
            and drag.destination.where == "board"
        )

    def _sync_dwell(self, before: GameState, after: GameState) -> None:
        # Armed once per entry into the resting condition
        if not self._resting_on_board(after):
            self._dwell.cancel()
        elif not self._resting_on_board(before):
            self._dwell.arm()

    def _on_dwell(self) -> None:
        logger.debug("Dwell timer fired")
        self.dispatch(DragNeighbors())
