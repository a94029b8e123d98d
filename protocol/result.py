"""
TuningResult - per-tunable outcome of an apply or revert run.

Every tunable touched by a run produces exactly one TuningResult. The
report is what the console renders and what decides nothing about the
exit code: only fatal preconditions do that.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Outcome(str, Enum):
    """What happened to a tunable."""
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"
    RESTORED = "restored"
    NOTHING_TO_RESTORE = "nothing_to_restore"


@dataclass
class TuningResult:
    """Outcome for a single tunable."""
    key: str
    outcome: Outcome
    before: Optional[str] = None
    after: Optional[str] = None
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        return data


@dataclass
class TuningReport:
    """Ordered results of one apply or revert run."""
    action: str
    started_at: str = ""
    results: List[TuningResult] = field(default_factory=list)

    def __post_init__(self):
        if not self.started_at:
            self.started_at = datetime.now().isoformat()

    def add(self, result: TuningResult) -> TuningResult:
        self.results.append(result)
        return result

    def extend(self, results: List[TuningResult]) -> None:
        self.results.extend(results)

    def get(self, key: str) -> Optional[TuningResult]:
        """Return the last result recorded for key."""
        for result in reversed(self.results):
            if result.key == key:
                return result
        return None

    def with_outcome(self, outcome: Outcome) -> List[TuningResult]:
        return [r for r in self.results if r.outcome == outcome]

    @property
    def changed(self) -> List[TuningResult]:
        return [r for r in self.results if r.outcome in (Outcome.CHANGED, Outcome.RESTORED)]

    @property
    def failed(self) -> List[TuningResult]:
        return self.with_outcome(Outcome.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "started_at": self.started_at,
            "results": [r.to_dict() for r in self.results],
        }
