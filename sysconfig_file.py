"""
Sysconfig - desired-state input from /etc/sysconfig/sapconf.

The file is a shell-style KEY=value list. Values are handed to the resolver
as opaque strings; typed accessors convert on demand and treat unusable
values as unset.
"""

import logging
import re
import shlex
from pathlib import Path
from typing import Dict, List, Optional

from .protocol.errors import FatalPrecondition
from .protocol.tunables import LEGACY_SYSCONFIG_NAMES

logger = logging.getLogger(__name__)

DEFAULT_SYSCONFIG_PATH = Path("/etc/sysconfig/sapconf")

_ASSIGNMENT_RE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$")


class Sysconfig:
    """Name/value pairs read from a sysconfig file."""

    def __init__(self, values: Optional[Dict[str, str]] = None, path: Optional[Path] = None):
        self.values: Dict[str, str] = dict(values or {})
        self.path = path

    @classmethod
    def load(cls, path: Path = DEFAULT_SYSCONFIG_PATH) -> "Sysconfig":
        """
        Read and parse a sysconfig file.

        Raises:
            FatalPrecondition: if the file cannot be read
        """
        path = Path(path)
        try:
            text = path.read_text()
        except OSError as e:
            raise FatalPrecondition(f"Failed to read {path}: {e}") from e

        config = cls(parse_sysconfig(text), path=path)
        config.apply_legacy_names()
        return config

    def apply_legacy_names(self) -> None:
        """Fill current variable names from their pre-rename spelling."""
        for old in LEGACY_SYSCONFIG_NAMES:
            new = old.rsplit("_", 1)[0]
            if self.values.get(old) and not self.values.get(new):
                logger.info("Using legacy sysconfig variable %s for %s", old, new)
                self.values[new] = self.values[old]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Raw value, with empty strings treated as unset."""
        value = self.values.get(name)
        if value is None or value == "":
            return default
        return value

    def get_int(self, name: str) -> Optional[int]:
        """Integer value of name, or None if unset or not an integer."""
        value = self.get(name)
        if value is None:
            return None
        try:
            return int(value.strip())
        except ValueError:
            logger.warning("Ignoring %s=%r: not an integer", name, value)
            return None

    def is_yes(self, name: str) -> bool:
        return (self.get(name) or "").strip().lower() == "yes"

    def with_prefix(self, prefix: str) -> List[str]:
        """Values of all variables starting with prefix, in name order."""
        return [self.values[k] for k in sorted(self.values) if k.startswith(prefix)]

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None


def parse_sysconfig(text: str) -> Dict[str, str]:
    """
    Parse shell-style assignments.

    Comments and blank lines are skipped. Quoting follows shell rules, so
    LIMIT_1="@sapsys soft nofile 1048576" yields the unquoted line.
    Lines that are not assignments are ignored.
    """
    values: Dict[str, str] = {}

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        match = _ASSIGNMENT_RE.match(line)
        if not match:
            logger.debug("sysconfig line %d is not an assignment: %r", lineno, line)
            continue

        name, rest = match.groups()
        try:
            tokens = shlex.split(rest, comments=True)
        except ValueError as e:
            logger.warning("sysconfig line %d: cannot parse value of %s: %s", lineno, name, e)
            continue

        values[name] = " ".join(tokens)

    return values
