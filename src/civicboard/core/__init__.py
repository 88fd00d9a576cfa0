"""Core primitives for CivicBoard.

Snapshots, history, storage, persistence and catalog reconciliation live
here; the concrete domain stores are assembled in :mod:`civicboard.stores`.
"""

from __future__ import annotations

__all__ = ["__doc__"]
