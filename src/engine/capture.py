"""Pointer capture, held for the lifetime of a drag."""

from contextlib import contextmanager
from typing import Iterator, List, Protocol, Set


class PointerCapture(Protocol):
    """Rendering-layer hook that routes a pointer's events to the drag group."""

    def capture(self, pointer_id: int) -> bool: ...

    def release(self, pointer_id: int) -> None: ...


class NullCapture:
    """Capture that always succeeds, for headless use."""

    def capture(self, pointer_id: int) -> bool:
        return True

    def release(self, pointer_id: int) -> None:
        pass


class ScriptedCapture:
    """
    Capture whose failures are decided ahead of time.

    Records every capture and release so callers can check that each
    acquired pointer was given back.
    """

    def __init__(self):
        self.fail_next = False
        self.held: Set[int] = set()
        self.history: List[str] = []

    def capture(self, pointer_id: int) -> bool:
        if self.fail_next:
            self.fail_next = False
            self.history.append(f"fail:{pointer_id}")
            return False
        self.held.add(pointer_id)
        self.history.append(f"capture:{pointer_id}")
        return True

    def release(self, pointer_id: int) -> None:
        self.held.discard(pointer_id)
        self.history.append(f"release:{pointer_id}")


@contextmanager
def captured(capture: PointerCapture, pointer_id: int) -> Iterator[bool]:
    """Acquire a pointer for the duration of the block; yields whether it succeeded."""
    acquired = capture.capture(pointer_id)
    try:
        yield acquired
    finally:
        if acquired:
            capture.release(pointer_id)
