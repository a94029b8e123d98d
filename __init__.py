"""
sapprep - Kernel and OS preparation for SAP workloads

Applies the tuning recommended by SAP notes 1275776, 1984787 and 1557506
(shared memory, semaphores, max_map_count, /dev/shm size, page cache
limit, nofile ulimits, uuidd.socket) and reverts it later from values
saved before the first change.

Usage:
    # As a module
    python -m sapprep apply
    python -m sapprep revert

    # Programmatically
    from sapprep import Config, Sysconfig, TuningExecutor

    config = Config.load()
    executor = TuningExecutor.from_config(config, Sysconfig.load())
    report = executor.apply()
"""

__version__ = "1.0.0"

# Main exports
from .config import Config
from .sysconfig_file import Sysconfig
from .snapshot import StateStore, SavedSnapshot
from .tuning import TuningExecutor, ParameterResolver, resolve

# Protocol exports
from .protocol import (
    SemaphoreLimits,
    Outcome,
    TuningResult,
    TuningReport,
    SapprepError,
    FatalPrecondition,
    UnresolvedTunable,
    StorageUnavailable,
    CommandError,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "Sysconfig",
    "StateStore",
    "SavedSnapshot",
    "TuningExecutor",
    "ParameterResolver",
    "resolve",
    # Protocol
    "SemaphoreLimits",
    "Outcome",
    "TuningResult",
    "TuningReport",
    "SapprepError",
    "FatalPrecondition",
    "UnresolvedTunable",
    "StorageUnavailable",
    "CommandError",
]
