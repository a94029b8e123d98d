"""
SystemScanner - Reads live memory and /dev/shm state from the host.

Reads /proc directly; no external tools are needed for discovery.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ..protocol.errors import FatalPrecondition

logger = logging.getLogger(__name__)


@dataclass
class SystemScannerConfig:
    """Locations of the host files the scanner reads."""
    meminfo: Path = Path("/proc/meminfo")
    mounts: Path = Path("/proc/mounts")
    shm_mount: Path = Path("/dev/shm")
    pagecache_control: Path = Path("/proc/sys/vm/pagecache_limit_mb")


@dataclass
class TmpfsMount:
    """The tmpfs line for the shared memory mount point."""
    mountpoint: str
    options: str            # mount options without any size= clause
    size_kb: int


class SystemScanner:
    """
    Scans memory totals and the tmpfs mount backing shared memory.
    """

    def __init__(self, config: Optional[SystemScannerConfig] = None):
        self.config = config or SystemScannerConfig()

    def memory_total_kb(self) -> int:
        """
        Total virtual memory size (MemTotal + SwapTotal) in KB.

        Raises:
            FatalPrecondition: if /proc/meminfo is unreadable or lacks MemTotal
        """
        try:
            meminfo = self.config.meminfo.read_text()
        except OSError as e:
            raise FatalPrecondition(f"Cannot read {self.config.meminfo}: {e}") from e

        totals = parse_meminfo(meminfo)
        if "MemTotal" not in totals:
            raise FatalPrecondition(f"MemTotal missing from {self.config.meminfo}")
        return totals["MemTotal"] + totals.get("SwapTotal", 0)

    def tmpfs_mount(self) -> TmpfsMount:
        """
        Current tmpfs options and size of the shared memory mount.

        Raises:
            FatalPrecondition: if the mount point is not a tmpfs mount
        """
        options = self.tmpfs_mount_options()
        return TmpfsMount(
            mountpoint=str(self.config.shm_mount),
            options=options,
            size_kb=self.tmpfs_size_kb(),
        )

    def tmpfs_mount_options(self) -> str:
        """
        Mount options of the tmpfs at the shared memory mount point,
        with any size= clause removed.
        """
        try:
            mounts = self.config.mounts.read_text()
        except OSError as e:
            raise FatalPrecondition(f"Cannot read {self.config.mounts}: {e}") from e

        mountpoint = str(self.config.shm_mount)
        for line in mounts.splitlines():
            fields = line.split()
            if len(fields) >= 4 and fields[0] == "tmpfs" and fields[1] == mountpoint:
                return strip_size_option(fields[3])

        raise FatalPrecondition(
            f"The system does not use tmpfs on {mountpoint}. Please configure tmpfs and try again."
        )

    def tmpfs_size_kb(self) -> int:
        """Size of the shared memory filesystem in KB (blocks * fragment size)."""
        try:
            st = os.statvfs(self.config.shm_mount)
        except OSError as e:
            raise FatalPrecondition(f"Cannot stat {self.config.shm_mount}: {e}") from e
        return (st.f_blocks * st.f_frsize) >> 10

    def shm_mount_exists(self) -> bool:
        return self.config.shm_mount.exists()

    def pagecache_limit_supported(self) -> bool:
        """Only some (SUSE) kernels carry the page cache limit patch."""
        return self.config.pagecache_control.exists()


def parse_meminfo(text: str) -> Dict[str, int]:
    """Parse /proc/meminfo into {field: kB}."""
    values: Dict[str, int] = {}
    for line in text.splitlines():
        match = re.match(r"^([A-Za-z0-9_()]+):\s+(\d+)", line)
        if match:
            values[match.group(1)] = int(match.group(2))
    return values


def strip_size_option(options: str) -> str:
    """Drop size=... from a comma separated mount option string."""
    kept = [opt for opt in options.split(",") if opt and not opt.startswith("size=")]
    return ",".join(kept)

