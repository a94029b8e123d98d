"""
ParameterResolver - decides the value to apply for each tunable class.

All decisions go through resolve(), which never lowers a live value:
a configured value counts only when it meets the floor, the floor counts
only when it exceeds the live value.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import FloorsConfig
from ..protocol.errors import UnresolvedTunable
from ..protocol.tunables import SCALAR_TUNABLES, SEM, SEM_FIELDS, SemaphoreLimits
from ..sysconfig_file import Sysconfig

logger = logging.getLogger(__name__)


def resolve(configured: Optional[int], floor: Optional[int], current: Optional[int]) -> int:
    """
    Target value for a floor-governed tunable.

    Args:
        configured: Desired value from the sysconfig file, if any
        floor: Documented minimum, if any
        current: Live value, if it could be read

    Returns:
        configured when set, >= floor and above current; else floor when
        above current; else current

    Raises:
        UnresolvedTunable: if none of the three inputs is known
    """
    if configured is not None and (floor is None or configured >= floor):
        candidate = configured
    elif floor is not None:
        candidate = floor
    else:
        candidate = None

    if current is None:
        if candidate is None:
            raise UnresolvedTunable("no configured value, floor or live value")
        return candidate
    if candidate is None:
        return current
    return max(candidate, current)


@dataclass
class PageCacheTargets:
    """Resolved page cache limit settings."""
    enabled: bool
    limit_mb: int
    ignore_dirty: Optional[int] = None  # only managed when enabled


class ParameterResolver:
    """
    Computes targets from sysconfig values, floors and live state.
    """

    def __init__(self, sysconfig: Sysconfig, floors: Optional[FloorsConfig] = None):
        self.sysconfig = sysconfig
        self.floors = floors or FloorsConfig()

    def scalar_target(self, key: str, current: int) -> int:
        """
        Target for kernel.shmmax, kernel.shmall or vm.max_map_count.

        Raises:
            UnresolvedTunable: if neither a value nor a floor is configured
        """
        name = SCALAR_TUNABLES[key]
        configured = self.sysconfig.get_int(name)
        floor = self.floors.for_key(key)

        if configured is None and floor is None:
            raise UnresolvedTunable(f"{name} not set in sysconfig and no floor for {key}", key=key)
        if configured is not None and floor is not None and configured < floor:
            logger.warning("%s=%d is below the minimum %d for %s, using the minimum",
                           name, configured, floor, key)

        return resolve(configured, floor, current)

    def semaphore_target(self, current: SemaphoreLimits) -> SemaphoreLimits:
        """Resolve each kernel.sem field independently against its live value."""
        floors = self.floors.sem_floors()
        fields = []
        for name, floor, live in zip(SEM_FIELDS, floors, current):
            fields.append(resolve(self.sysconfig.get_int(name), floor, live))
        target = SemaphoreLimits(*fields)
        logger.debug("%s: live %s, target %s", SEM, current, target)
        return target

    def tmpfs_percent(self) -> int:
        percent = self.sysconfig.get_int("VSZ_TMPFS_PERCENT")
        if percent is None:
            return 0
        if percent < 0:
            logger.warning("Ignoring negative VSZ_TMPFS_PERCENT=%d", percent)
            return 0
        return percent

    def tmpfs_target_kb(self, total_kb: int) -> int:
        """Required /dev/shm size: a percentage of RAM + swap, in KB."""
        return total_kb * self.tmpfs_percent() // 100

    def page_cache_targets(self) -> PageCacheTargets:
        """
        Page cache limit settings.

        Unless ENABLE_PAGECACHE_LIMIT is "yes" the limit is forced to 0,
        whatever PAGECACHE_LIMIT_MB says.
        """
        if not self.sysconfig.is_yes("ENABLE_PAGECACHE_LIMIT"):
            return PageCacheTargets(enabled=False, limit_mb=0)

        limit = self.sysconfig.get_int("PAGECACHE_LIMIT_MB")
        if limit is None:
            logger.warning("ATTENTION: PAGECACHE_LIMIT_MB not set in sysconfig file. "
                           "Disabling page cache limit")
            limit = 0

        ignore_dirty = self.sysconfig.get_int("PAGECACHE_LIMIT_IGNORE_DIRTY")
        if ignore_dirty is None:
            logger.warning("ATTENTION: PAGECACHE_LIMIT_IGNORE_DIRTY not set in sysconfig file. "
                           "Setting system default '0'")
            ignore_dirty = 0

        return PageCacheTargets(enabled=True, limit_mb=limit, ignore_dirty=ignore_dirty)
