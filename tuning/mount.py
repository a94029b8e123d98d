"""
MountController - remounts the shared memory tmpfs with a new size.
"""

from typing import Callable, List, Optional
import subprocess

from .command import run_command


def remount_options(options: str, size_kb: int) -> str:
    """Build the -o argument for a tmpfs remount, e.g. remount,rw,nosuid,size=1024k."""
    parts = ["remount"]
    parts.extend(opt for opt in options.split(",") if opt and not opt.startswith("size="))
    parts.append(f"size={size_kb}k")
    return ",".join(parts)


class MountController:
    """Issues mount(8) calls for the tmpfs mount point."""

    def __init__(self, runner: Optional[Callable[[List[str]], subprocess.CompletedProcess]] = None):
        self._run = runner or run_command

    def remount(self, mountpoint: str, options: str, size_kb: int) -> None:
        """
        Remount a tmpfs, keeping its options and setting a new size.

        Raises:
            CommandError: if mount fails
        """
        self._run(["mount", "-o", remount_options(options, size_kb), mountpoint])
