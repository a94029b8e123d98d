"""
Tunable keys and value types.

Keys double as the record names in the saved state store, so they must
stay stable across releases.
"""

from typing import Dict, NamedTuple, Tuple


SHMMAX = "kernel.shmmax"
SHMALL = "kernel.shmall"
SHMMNI = "kernel.shmmni"
SEM = "kernel.sem"
MAX_MAP_COUNT = "vm.max_map_count"
PAGECACHE_LIMIT_MB = "vm.pagecache_limit_mb"
PAGECACHE_LIMIT_IGNORE_DIRTY = "vm.pagecache_limit_ignore_dirty"
TMPFS_SIZE = "tmpfs.size"
TMPFS_MOUNT_OPTS = "tmpfs.mount_opts"

# Floor-governed kernel parameters and the sysconfig variable holding their
# desired value.
SCALAR_TUNABLES: Dict[str, str] = {
    SHMMAX: "SHMMAX",
    SHMALL: "SHMALL",
    MAX_MAP_COUNT: "MAX_MAP_COUNT",
}

SEM_FIELDS: Tuple[str, ...] = ("SEMMSL", "SEMMNS", "SEMOPM", "SEMMNI")

# Old sysconfig names still found on upgraded systems. The suffix is
# stripped to get the current name.
LEGACY_SYSCONFIG_NAMES: Tuple[str, ...] = (
    "SHMALL_MIN",
    "SHMMAX_MIN",
    "SEMMSL_MIN",
    "SEMMNS_MIN",
    "SEMOPM_MIN",
    "SEMMNI_MIN",
    "MAX_MAP_COUNT_DEF",
    "SHMMNI_DEF",
    "DIRTY_BYTES_DEF",
    "DIRTY_BG_BYTES_DEF",
)


class SemaphoreLimits(NamedTuple):
    """The four fields of kernel.sem, in kernel order."""
    semmsl: int
    semmns: int
    semopm: int
    semmni: int

    @classmethod
    def parse(cls, text: str) -> "SemaphoreLimits":
        """
        Parse the whitespace separated form printed by `sysctl -n kernel.sem`.

        Raises:
            ValueError: if the text does not hold exactly four integers
        """
        fields = text.split()
        if len(fields) != 4:
            raise ValueError(f"kernel.sem needs 4 fields, got {len(fields)}: {text!r}")
        return cls(*(int(f) for f in fields))

    def __str__(self) -> str:
        return " ".join(str(v) for v in self)
