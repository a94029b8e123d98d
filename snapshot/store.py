"""
StateStore - durable per-tunable snapshots for revert.

One JSON record per key under the state directory. A record is written at
most once per activation cycle: save() refuses to overwrite, so a second
apply run without an intervening revert keeps the true original value.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional

from ..protocol.errors import StorageUnavailable
from .models import SavedSnapshot

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class StateStore:
    """Key/value persistence pairing each apply with its later revert."""

    DEFAULT_STATE_DIR = Path("/var/lib/sapprep/saved_state")

    def __init__(self, state_dir: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            state_dir: Directory holding one record per key. Created lazily
                on the first save so that a read-only revert never needs
                write access.
        """
        self.state_dir = Path(state_dir) if state_dir else self.DEFAULT_STATE_DIR

    def _record_path(self, key: str) -> Path:
        if not _KEY_RE.match(key) or key in (".", ".."):
            raise ValueError(f"Invalid state key: {key!r}")
        return self.state_dir / f"{key}.json"

    # =========================================================================
    # Core Operations
    # =========================================================================

    def save(self, key: str, value) -> bool:
        """
        Record the pre-change value of a tunable.

        Args:
            key: Stable tunable key, e.g. "kernel.sem"
            value: Value to persist; stored in its string form

        Returns:
            True if a new record was written, False if one already existed

        Raises:
            StorageUnavailable: if the record cannot be written
        """
        path = self._record_path(key)
        snapshot = SavedSnapshot.create(key, value)

        try:
            if path.exists():
                logger.debug("Snapshot for %s already present, keeping it", key)
                return False

            self.state_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.state_dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(snapshot.to_dict(), f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageUnavailable(f"Cannot save {key} to {self.state_dir}: {e}") from e

        logger.debug("Saved %s=%s", key, snapshot.value)
        return True

    def restore(self, key: str) -> Optional[str]:
        """
        Look up the saved value of a tunable without removing it.

        Returns:
            The saved value, or None if nothing was saved for key

        Raises:
            StorageUnavailable: if the record exists but cannot be read
        """
        path = self._record_path(key)
        try:
            if not path.exists():
                return None
            return SavedSnapshot.load(path).value
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StorageUnavailable(f"Cannot read saved state for {key}: {e}") from e

    def clear(self, key: str) -> bool:
        """
        Delete the record for key after a successful restore.

        Returns:
            True if a record was removed, False if there was none
        """
        path = self._record_path(key)
        try:
            if not path.exists():
                return False
            path.unlink()
        except OSError as e:
            raise StorageUnavailable(f"Cannot clear saved state for {key}: {e}") from e
        return True

    # =========================================================================
    # Query Operations
    # =========================================================================

    def has(self, key: str) -> bool:
        """Check if a snapshot exists for key."""
        return self._record_path(key).exists()

    def keys(self) -> List[str]:
        """Keys with a saved snapshot, sorted."""
        return [s.key for s in self.list_snapshots()]

    def list_snapshots(self) -> List[SavedSnapshot]:
        """
        List all saved snapshots.

        Raises:
            StorageUnavailable: if the state directory cannot be listed
        """
        if not self.state_dir.exists():
            return []

        snapshots = []
        try:
            paths = sorted(self.state_dir.glob("*.json"))
        except OSError as e:
            raise StorageUnavailable(f"Cannot list {self.state_dir}: {e}") from e

        for path in paths:
            try:
                snapshots.append(SavedSnapshot.load(path))
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning("Ignoring unreadable snapshot %s: %s", path, e)

        snapshots.sort(key=lambda s: s.key)
        return snapshots
