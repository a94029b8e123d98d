"""
Protocol definitions for sapprep.

- tunables: stable tunable keys and the kernel.sem 4-tuple
- result: per-tunable outcomes collected into a TuningReport
- errors: FatalPrecondition / UnresolvedTunable / StorageUnavailable / CommandError
"""

from .tunables import (
    SemaphoreLimits,
    SCALAR_TUNABLES,
    SEM_FIELDS,
    LEGACY_SYSCONFIG_NAMES,
)
from .result import Outcome, TuningResult, TuningReport
from .errors import (
    SapprepError,
    FatalPrecondition,
    UnresolvedTunable,
    StorageUnavailable,
    CommandError,
)

__all__ = [
    # Tunables
    "SemaphoreLimits",
    "SCALAR_TUNABLES",
    "SEM_FIELDS",
    "LEGACY_SYSCONFIG_NAMES",
    # Results
    "Outcome",
    "TuningResult",
    "TuningReport",
    # Errors
    "SapprepError",
    "FatalPrecondition",
    "UnresolvedTunable",
    "StorageUnavailable",
    "CommandError",
]
