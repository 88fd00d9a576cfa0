"""
Public API for the stores package.

Import from here everywhere else:
    from civicboard.stores import (
        ViewStore, ModuleStore, PrivacyStore, DomainStore,
        UndoCoordinator, Dashboard, build_dashboard,
    )
"""

from __future__ import annotations

from .base import DomainStore
from .coordinator import UndoCoordinator
from .dashboard import Dashboard, build_dashboard
from .modules import ModuleStore
from .privacy import PrivacyStore
from .view import ViewStore

__all__ = [
    "Dashboard",
    "DomainStore",
    "ModuleStore",
    "PrivacyStore",
    "UndoCoordinator",
    "ViewStore",
    "build_dashboard",
]
