"""
Undo log for in-memory ledger mutations.

A component records one reverse step per accepted mutation while a log is
open. Rolling back replays the steps newest first, which returns the
component to the state it had when the log was opened. Rejected calls
change nothing and record nothing.
"""

from collections.abc import Callable

UndoStep = Callable[[], object]


class UndoLog:
    """Reverse steps for mutations made since begin()."""

    __slots__ = ("_steps",)

    def __init__(self) -> None:
        self._steps: list[UndoStep] | None = None

    @property
    def is_open(self) -> bool:
        return self._steps is not None

    def __len__(self) -> int:
        return len(self._steps or ())

    def begin(self) -> None:
        if self._steps is not None:
            raise RuntimeError("Undo log is already open")
        self._steps = []

    def record(self, step: UndoStep) -> None:
        """Remember how to reverse a mutation. Does nothing while the log is closed."""
        if self._steps is not None:
            self._steps.append(step)

    def commit(self) -> None:
        """Keep every mutation made since begin() and close the log."""
        self._steps = None

    def rollback(self) -> None:
        """Reverse every mutation made since begin() and close the log."""
        steps, self._steps = self._steps or [], None
        for step in reversed(steps):
            step()
