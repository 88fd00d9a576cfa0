"""CivicBoard: reactive client-state layer for the civic-data dashboard.

The package keeps three independent domain stores (view/filter, module
catalog, privacy/local votes), each with linear undo/redo history and
partial persistence to a local key/value store.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
