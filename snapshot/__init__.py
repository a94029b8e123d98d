"""
Saved state for revert.

Each tunable changed by an apply run gets one persisted record holding its
pre-change value. A revert run consumes the record and deletes it, so the
next apply starts a fresh capture cycle.
"""

from .models import SavedSnapshot
from .store import StateStore

__all__ = [
    'SavedSnapshot',
    'StateStore',
]
