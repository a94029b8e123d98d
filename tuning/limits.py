"""
UlimitReconciler - keeps nofile limits for SAP groups in limits.conf.

For every (group, soft|hard) identity the limits file ends up holding
exactly the configured line. There is no revert for these lines.
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..protocol.result import Outcome, TuningResult

logger = logging.getLogger(__name__)

DEFAULT_LIMITS_FILE = Path("/etc/security/limits.conf")
DEFAULT_GROUPS: Tuple[str, ...] = ("@sapsys", "@sdba", "@dba")
LIMIT_TYPES: Tuple[str, ...] = ("soft", "hard")


def identity_pattern(group: str, limit_type: str) -> "re.Pattern":
    return re.compile(rf"^{re.escape(group)}\s+{limit_type}\s+nofile\s+\S")


def find_configured_line(lines: Sequence[str], group: str, limit_type: str) -> Optional[str]:
    """Last configured line matching the identity, or None."""
    pattern = identity_pattern(group, limit_type)
    found = None
    for line in lines:
        if pattern.match(line.strip()):
            found = line.strip()
    return found


class UlimitReconciler:
    """Merges configured nofile rules into the limits file."""

    def __init__(
        self,
        limits_file: Path = DEFAULT_LIMITS_FILE,
        groups: Sequence[str] = DEFAULT_GROUPS,
    ):
        self.limits_file = Path(limits_file)
        self.groups = tuple(groups)

    def reconcile(self, configured_lines: Sequence[str]) -> List[TuningResult]:
        """
        Apply configured nofile rules.

        Args:
            configured_lines: Values of the LIMIT_* sysconfig variables

        Returns:
            One result per (group, type) identity
        """
        try:
            original = self.limits_file.read_text()
        except FileNotFoundError:
            original = ""
        except OSError as e:
            logger.error("Cannot read %s: %s", self.limits_file, e)
            return [
                TuningResult(self._key(g, t), Outcome.FAILED, message=str(e))
                for g in self.groups for t in LIMIT_TYPES
            ]

        lines = original.splitlines()
        results = []

        for group in self.groups:
            for limit_type in LIMIT_TYPES:
                key = self._key(group, limit_type)
                wanted = find_configured_line(configured_lines, group, limit_type)
                if wanted is None:
                    logger.warning("No nofile %s limit configured for %s, leaving limits file untouched",
                                   limit_type, group)
                    results.append(TuningResult(key, Outcome.SKIPPED, message="not configured"))
                    continue

                pattern = identity_pattern(group, limit_type)
                existing = [line for line in lines if pattern.match(line.strip())]
                before = existing[-1].strip() if existing else None

                if [line.strip() for line in existing] == [wanted]:
                    results.append(TuningResult(key, Outcome.UNCHANGED, before=before, after=wanted))
                    continue

                lines = [line for line in lines if not pattern.match(line.strip())]
                lines.append(wanted)
                logger.info("Setting '%s' in %s (was: %s)", wanted, self.limits_file, before or "unset")
                results.append(TuningResult(key, Outcome.CHANGED, before=before, after=wanted))

        if any(r.outcome == Outcome.CHANGED for r in results):
            new_text = "\n".join(lines) + "\n"
            try:
                self._write(new_text)
            except OSError as e:
                logger.error("Cannot write %s: %s", self.limits_file, e)
                for result in results:
                    if result.outcome == Outcome.CHANGED:
                        result.outcome = Outcome.FAILED
                        result.message = str(e)

        return results

    def _write(self, text: str) -> None:
        """Replace the limits file atomically, keeping its mode."""
        directory = self.limits_file.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".limits.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(text)
            if self.limits_file.exists():
                os.chmod(tmp_name, self.limits_file.stat().st_mode & 0o7777)
            else:
                os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.limits_file)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _key(group: str, limit_type: str) -> str:
        return f"nofile:{group}:{limit_type}"
