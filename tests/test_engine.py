"""Tests for the engine: dispatch, dwell timer, pointer capture and snapshots."""

import asyncio

import pytest

from src.board import Piece, Rect, Surfaces, matches_layout, no_target
from src.engine import (
    DragEnd,
    DragNeighbors,
    DwellTimer,
    GameEngine,
    GameState,
    ManualClock,
    NullCapture,
    Phase,
    ScriptedCapture,
    captured,
)


BOARD = Rect(left=0, top=0, width=500, height=500)
POOL = Rect(left=0, top=520, width=500, height=300)


def drag_start(piece_id, x, y, pointer_id=1, dx=50, dy=50):
    return {
        "action": "dragStart",
        "pieceID": piece_id,
        "pointerID": pointer_id,
        "pointer": {"x": x, "y": y},
        "pointerOffset": {"x": dx, "y": dy},
    }


def pointer_action(name, x, y):
    return {"action": name, "pointer": {"x": x, "y": y}}


def make_engine(pieces=None, capture=None, predicate=no_target):
    if pieces is None:
        pieces = [
            Piece(id="a", letters=["AB"], board_top=0, board_left=0),
            Piece(id="b", letters=["C"], board_top=0, board_left=2),
            Piece(id="p", letters=["XY"]),
        ]
    clock = ManualClock()
    engine = GameEngine(
        GameState.create(pieces, 5, predicate),
        surfaces=Surfaces(board=BOARD, pool=POOL),
        predicate=predicate,
        scheduler=clock,
        capture=capture or ScriptedCapture(),
    )
    return engine, clock


class TestManualClock:
    """Test cases for the virtual-time scheduler."""

    def test_runs_due_callbacks_in_order(self):
        clock = ManualClock()
        calls = []
        clock.call_later(0.2, lambda: calls.append("late"))
        clock.call_later(0.1, lambda: calls.append("early"))
        assert clock.advance(0.15) == 1
        assert calls == ["early"]
        assert clock.advance(0.1) == 1
        assert calls == ["early", "late"]
        assert clock.now == pytest.approx(0.25)

    def test_cancelled_callbacks_do_not_run(self):
        clock = ManualClock()
        calls = []
        handle = clock.call_later(0.1, lambda: calls.append("x"))
        handle.cancel()
        assert clock.pending == 0
        assert clock.advance(1) == 0
        assert calls == []


class TestDwellTimer:
    """Test cases for the single-shot re-armable timer."""

    def test_arm_is_idempotent(self):
        clock = ManualClock()
        calls = []
        timer = DwellTimer(clock, 0.5, lambda: calls.append(1))
        timer.arm()
        timer.arm()
        assert clock.pending == 1
        clock.advance(1)
        assert calls == [1]
        assert timer.armed is False

    def test_cancel(self):
        clock = ManualClock()
        calls = []
        timer = DwellTimer(clock, 0.5, lambda: calls.append(1))
        timer.arm()
        timer.cancel()
        clock.advance(1)
        assert calls == []

    def test_works_with_asyncio_loop(self):
        """An asyncio event loop is a valid scheduler."""
        async def scenario():
            calls = []
            timer = DwellTimer(asyncio.get_running_loop(), 0.01, lambda: calls.append(1))
            timer.arm()
            await asyncio.sleep(0.05)
            return calls

        assert asyncio.run(scenario()) == [1]


class TestDispatch:
    """Test cases for dispatching actions through the engine."""

    def test_dispatch_mapping(self):
        engine, _ = make_engine()
        state = engine.dispatch(drag_start("p", 60, 560))
        assert state is engine.state
        assert engine.state.phase == Phase.DRAGGING_SINGLE

    def test_rejected_actions_are_counted(self):
        engine, _ = make_engine()
        engine.dispatch(DragEnd())
        engine.dispatch({"action": "shiftEnd"})
        assert engine.rejected == 2
        assert engine.state.drag_state is None

    def test_double_drag_start_is_noop(self):
        engine, _ = make_engine()
        engine.dispatch(drag_start("a", 50, 50, pointer_id=1))
        engine.dispatch(drag_start("b", 250, 50, pointer_id=2))
        assert engine.state.drag_state.piece_ids == ["a"]
        assert engine.rejected == 1

    def test_listeners_see_each_new_state(self):
        engine, _ = make_engine()
        seen = []
        engine.subscribe(lambda state: seen.append(state.phase))
        engine.dispatch(drag_start("p", 60, 560))
        engine.dispatch(pointer_action("dragMove", 60, 60))
        engine.dispatch(DragEnd())
        engine.dispatch(DragEnd())  # rejected, no notification
        assert seen == [Phase.DRAGGING_SINGLE, Phase.DRAGGING_SINGLE, Phase.IDLE]

    def test_snapshot(self):
        engine, _ = make_engine()
        snapshot = engine.snapshot()
        assert snapshot["gridSize"] == 5
        assert snapshot["dragState"] is None
        assert snapshot["phase"] == "idle"
        assert snapshot["pieces"][0]["boardTop"] == 0
        assert snapshot["overlapGrid"][0] == [1, 1, 1, 0, 0]
        assert snapshot["allPiecesAreUsed"] is False

    def test_set_board_rect(self):
        engine, _ = make_engine()
        engine.set_board_rect(None)
        assert engine.surfaces.board is None
        assert engine.surfaces.pool == POOL

    def test_last_piece_solves_and_freezes(self):
        """Placing the last pool piece on its target cell solves and freezes the board."""
        engine, _ = make_engine(predicate=matches_layout(["ABC..", ".....", ".....", "XY...", "....."]))
        engine.dispatch(drag_start("p", 60, 560))
        engine.dispatch(pointer_action("dragMove", 60, 360))
        engine.dispatch(DragEnd())
        assert engine.state.all_pieces_are_used is True
        assert engine.state.game_is_solved is True
        engine.dispatch(drag_start("a", 50, 50))
        assert engine.state.drag_state is None

    def test_complete_board_without_rule_stays_playable(self):
        engine, _ = make_engine()
        engine.dispatch(drag_start("p", 60, 560))
        engine.dispatch(pointer_action("dragMove", 60, 360))
        engine.dispatch(DragEnd())
        assert engine.state.all_pieces_are_used is True
        assert engine.state.game_is_solved is False
        engine.dispatch(drag_start("a", 50, 50))
        assert engine.state.drag_state.piece_ids == ["a"]


class TestDwell:
    """Test cases for the timer that turns a resting drag into a shift."""

    def test_resting_drag_groups_neighbors(self):
        engine, clock = make_engine()
        engine.dispatch(drag_start("a", 50, 50))
        assert clock.pending == 1
        clock.advance(0.5)
        assert engine.state.phase == Phase.DRAGGING_GROUP
        assert engine.state.drag_state.piece_ids == ["a", "b"]

    def test_full_group_shift(self):
        """Hold A, wait for B to join, shift down a row: A at (1, 0), B at (1, 2)."""
        engine, clock = make_engine()
        engine.dispatch(drag_start("a", 50, 50))
        clock.advance(0.6)
        engine.dispatch(pointer_action("shiftMove", 50, 150))
        engine.dispatch({"action": "shiftEnd"})
        positions = {p.id: (p.board_top, p.board_left) for p in engine.state.pieces}
        assert positions == {"a": (1, 0), "b": (1, 2), "p": (None, None)}

    def test_move_cancels_timer(self):
        engine, clock = make_engine()
        engine.dispatch(drag_start("a", 50, 50))
        clock.advance(0.3)
        engine.dispatch(pointer_action("dragMove", 52, 52))
        assert clock.pending == 0
        clock.advance(1)
        assert engine.state.phase == Phase.DRAGGING_SINGLE

    def test_release_cancels_timer(self):
        engine, clock = make_engine()
        engine.dispatch(drag_start("a", 50, 50))
        engine.dispatch(DragEnd())
        assert clock.pending == 0

    def test_pool_drag_never_arms(self):
        engine, clock = make_engine()
        engine.dispatch(drag_start("p", 60, 560))
        assert clock.pending == 0

    def test_timer_fires_once(self):
        engine, clock = make_engine()
        engine.dispatch(drag_start("a", 50, 50))
        assert clock.advance(5) == 1
        assert engine.rejected == 0

    def test_late_dwell_is_ignored(self):
        """A dragNeighbors that arrives after movement is a no-op."""
        engine, _ = make_engine()
        engine.dispatch(drag_start("a", 50, 50))
        engine.dispatch(pointer_action("dragMove", 150, 50))
        engine.dispatch(DragNeighbors())
        assert engine.state.phase == Phase.DRAGGING_SINGLE
        assert engine.rejected == 1


class TestPointerCapture:
    """Test cases for capture acquisition and the forced end on failure."""

    def test_capture_held_for_drag(self):
        capture = ScriptedCapture()
        engine, _ = make_engine(capture=capture)
        engine.dispatch(drag_start("p", 60, 560, pointer_id=3))
        assert capture.held == {3}
        engine.dispatch(DragEnd())
        assert capture.held == set()
        assert capture.history == ["capture:3", "release:3"]

    def test_capture_released_after_shift(self):
        capture = ScriptedCapture()
        engine, clock = make_engine(capture=capture)
        engine.dispatch(drag_start("a", 50, 50, pointer_id=4))
        clock.advance(1)
        engine.dispatch({"action": "shiftEnd"})
        assert capture.history == ["capture:4", "release:4"]

    def test_failed_capture_forces_end(self):
        """A drag that cannot capture its pointer ends immediately, as if released."""
        capture = ScriptedCapture()
        capture.fail_next = True
        engine, clock = make_engine(capture=capture)
        state = engine.dispatch(drag_start("a", 50, 50))
        assert state.drag_state is None
        assert state.pieces[0].board_top == 0
        assert clock.pending == 0
        assert capture.history == ["fail:1"]
        assert engine.rejected == 0

    def test_close_releases_capture(self):
        capture = ScriptedCapture()
        engine, clock = make_engine(capture=capture)
        engine.dispatch(drag_start("a", 50, 50))
        engine.close()
        assert capture.held == set()
        assert clock.pending == 0

    def test_captured_context_manager(self):
        capture = ScriptedCapture()
        with captured(capture, 9) as ok:
            assert ok is True
            assert capture.held == {9}
        assert capture.held == set()

    def test_null_capture(self):
        with captured(NullCapture(), 1) as ok:
            assert ok is True
