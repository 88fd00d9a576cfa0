"""
Cross-store undo/redo for a single UI gesture.

Every domain store keeps its own history, so one "Undo" button has to ask
each of them. :meth:`UndoCoordinator.undo_any` undoes every store that has
history, which means one call can revert several unrelated actions at once
(e.g. the last search edit *and* the last module toggle). That matches the
dashboard's observed behavior; a single shared history would need a
different container, not a change here.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from civicboard.core.settings import get_logger

logger = get_logger(__name__)


class Undoable(Protocol):
    """Anything with independent undo/redo history."""

    @property
    def name(self) -> str: ...
    def can_undo(self) -> bool: ...
    def can_redo(self) -> bool: ...
    def undo(self) -> bool: ...
    def redo(self) -> bool: ...


class UndoCoordinator:
    """Fan undo/redo out to a fixed set of stores."""

    def __init__(self, stores: Iterable[Undoable]) -> None:
        self._stores: tuple[Undoable, ...] = tuple(stores)

    @property
    def stores(self) -> tuple[Undoable, ...]:
        return self._stores

    def can_undo_any(self) -> bool:
        return any(store.can_undo() for store in self._stores)

    def can_redo_any(self) -> bool:
        return any(store.can_redo() for store in self._stores)

    def undo_any(self) -> int:
        """Undo once in every store that can; returns how many stores moved."""
        moved = [store.name for store in self._stores if store.can_undo() and store.undo()]
        if moved:
            logger.debug("undo_any: %s", ", ".join(moved))
        return len(moved)

    def redo_any(self) -> int:
        """Redo once in every store that can; returns how many stores moved."""
        moved = [store.name for store in self._stores if store.can_redo() and store.redo()]
        if moved:
            logger.debug("redo_any: %s", ", ".join(moved))
        return len(moved)


__all__ = ["UndoCoordinator", "Undoable"]
