"""Unit tests for the linear undo/redo history container."""

from __future__ import annotations

import pytest

from civicboard.core.history import History, HistoryStatus


def _push(h: History[int], n: int) -> None:
    for _ in range(n):
        h.commit(lambda x: x + 1)


def test_commit_pushes_present_and_clears_future() -> None:
    """A commit moves present into past and drops any redo branch."""
    h: History[int] = History(0)
    _push(h, 2)
    assert h.undo()
    assert h.future == (2,)

    h.commit(lambda x: x * 10)

    assert h.present == 10
    assert h.past == (0, 1)
    assert h.future == ()


def test_round_trip_law() -> None:
    """N commits followed by N undos restore the initial value."""
    h: History[int] = History(0)
    _push(h, 5)
    for _ in range(5):
        h.undo()
    assert h.present == 0
    assert not h.can_undo()


def test_redo_is_inverse_of_undo() -> None:
    """Redo after undo restores the value present before the undo."""
    h: History[int] = History(0)
    _push(h, 3)
    for _ in range(3):
        h.undo()
    assert h.future == (1, 2, 3)
    for expected in (1, 2, 3):
        assert h.redo()
        assert h.present == expected
    assert not h.can_redo()


def test_undo_redo_on_empty_stacks_are_noops() -> None:
    h: History[str] = History("a")
    assert h.undo() is False
    assert h.redo() is False
    assert h.present == "a"
    assert h.status is HistoryStatus.NO_HISTORY


def test_failing_mutator_leaves_history_untouched() -> None:
    """An exception inside the mutator propagates and records nothing."""
    h: History[int] = History(1)

    def boom(_: int) -> int:
        raise RuntimeError("nope")

    with pytest.raises(RuntimeError):
        h.commit(boom)
    assert h.present == 1
    assert h.past == ()


def test_status_state_machine() -> None:
    """Commit, undo and redo move through the four availability states."""
    h: History[int] = History(0)
    assert h.status is HistoryStatus.NO_HISTORY
    _push(h, 2)
    assert h.status is HistoryStatus.CAN_UNDO
    h.undo()
    assert h.status is HistoryStatus.CAN_UNDO_AND_REDO
    h.undo()
    assert h.status is HistoryStatus.CAN_REDO
    h.commit(lambda x: x - 1)
    assert h.status is HistoryStatus.CAN_UNDO


def test_limit_drops_oldest_entries() -> None:
    h: History[int] = History(0, limit=2)
    _push(h, 4)
    assert h.past == (2, 3)
    h.undo()
    h.undo()
    assert h.present == 2
    assert not h.can_undo()


def test_invalid_limit_rejected() -> None:
    with pytest.raises(ValueError):
        History(0, limit=0)


def test_reset_and_clear() -> None:
    h: History[int] = History(0)
    _push(h, 2)
    h.undo()
    h.clear()
    assert h.present == 1 and h.past == () and h.future == ()
    h.reset(42)
    assert h.present == 42
