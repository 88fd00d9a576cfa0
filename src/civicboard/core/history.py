"""
Linear undo/redo history over immutable snapshots.

A :class:`History` holds three slots:

- ``past``: older snapshots, oldest first.
- ``present``: the current snapshot.
- ``future``: snapshots undone since the last commit, nearest first.

Committing pushes ``present`` onto ``past`` and always clears ``future``, so
a non-empty ``future`` means the most recent operation was an undo. There is
no branching: a commit after an undo discards the redo branch.

Depth
-----
History is unbounded by default. Passing ``limit`` turns ``past`` into a
bounded buffer that drops its oldest entry once the limit is exceeded; the
``present`` value and the round-trip laws within the retained depth are
unaffected.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

S = TypeVar("S")


class HistoryStatus(str, Enum):
    """Undo/redo availability of a single history."""

    NO_HISTORY = "no-history"
    CAN_UNDO = "can-undo-only"
    CAN_REDO = "can-redo-only"
    CAN_UNDO_AND_REDO = "can-undo-and-redo"


class History(Generic[S]):
    """
    Past/present/future triple with commit, undo and redo.

    Attributes
    ----------
    _past : list[S]
        Older snapshots, oldest first.
    _present : S
        The current snapshot.
    _future : list[S]
        Undone snapshots; index 0 is the next one ``redo()`` restores.
    _limit : int | None
        Maximum length of ``_past`` (``None`` means unbounded).
    """

    __slots__ = ("_past", "_present", "_future", "_limit")

    def __init__(self, present: S, limit: int | None = None) -> None:
        if limit is not None and limit < 1:
            raise ValueError("history limit must be a positive integer")
        self._past: list[S] = []
        self._present: S = present
        self._future: list[S] = []
        self._limit = limit

    # ------------------------------- Views ----------------------------------

    @property
    def present(self) -> S:
        return self._present

    @property
    def past(self) -> tuple[S, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[S, ...]:
        return tuple(self._future)

    @property
    def limit(self) -> int | None:
        return self._limit

    def can_undo(self) -> bool:
        return bool(self._past)

    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def status(self) -> HistoryStatus:
        """Return the current state of the undo/redo state machine."""
        if self._past and self._future:
            return HistoryStatus.CAN_UNDO_AND_REDO
        if self._past:
            return HistoryStatus.CAN_UNDO
        if self._future:
            return HistoryStatus.CAN_REDO
        return HistoryStatus.NO_HISTORY

    # ----------------------------- Transitions ------------------------------

    def commit(self, mutator: Callable[[S], S]) -> S:
        """
        Apply ``mutator`` to ``present`` and record the old value in ``past``.

        The mutator runs before any stack is touched, so an exception raised
        by it leaves the history exactly as it was.

        Returns
        -------
        S
            The new ``present``.
        """
        new_present = mutator(self._present)
        self._past.append(self._present)
        if self._limit is not None and len(self._past) > self._limit:
            del self._past[0]
        self._present = new_present
        self._future.clear()
        return new_present

    def undo(self) -> bool:
        """Step back one snapshot. Returns ``False`` (no-op) when ``past`` is empty."""
        if not self._past:
            return False
        previous = self._past.pop()
        self._future.insert(0, self._present)
        self._present = previous
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns ``False`` (no-op) when ``future`` is empty."""
        if not self._future:
            return False
        following = self._future.pop(0)
        self._past.append(self._present)
        self._present = following
        return True

    def clear(self) -> None:
        """Forget past and future, keeping ``present``."""
        self._past.clear()
        self._future.clear()

    def reset(self, present: S) -> None:
        """Replace ``present`` and forget all history."""
        self._present = present
        self.clear()

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._past) + 1 + len(self._future)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return (
            f"History(past={len(self._past)}, future={len(self._future)}, "
            f"status={self.status.value})"
        )


__all__ = ["History", "HistoryStatus"]
