"""
Data models for the saved state store.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict
import json


@dataclass
class SavedSnapshot:
    """Pre-change value of one tunable, captured before its first write."""

    key: str                               # "kernel.sem", "tmpfs.size", ...
    value: str                             # scalar or whitespace-joined tuple
    saved_at: str = ""                     # ISO timestamp

    @classmethod
    def create(cls, key: str, value: Any) -> 'SavedSnapshot':
        """Create a snapshot stamped with the current time."""
        return cls(
            key=key,
            value=str(value),
            saved_at=datetime.now().isoformat(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SavedSnapshot':
        """Create from dictionary (JSON deserialization)."""
        return cls(
            key=data["key"],
            value=str(data["value"]),
            saved_at=data.get("saved_at", ""),
        )

    @classmethod
    def load(cls, path: Path) -> 'SavedSnapshot':
        """Load snapshot from JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))
