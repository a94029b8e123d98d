"""
Error taxonomy for apply/revert runs.

FatalPrecondition: mandatory host state missing, the run aborts
UnresolvedTunable: a single tunable is skipped, the run continues
StorageUnavailable: the saved state directory cannot be used
CommandError: a system call (sysctl, mount, systemctl) failed
"""

from typing import List, Optional


class SapprepError(Exception):
    """Base class for all sapprep errors."""

    @property
    def message(self) -> str:
        return self.args[0] if self.args else ""


class FatalPrecondition(SapprepError):
    """Mandatory external state is missing (sysconfig file, tmpfs mount)."""
    pass


class UnresolvedTunable(SapprepError):
    """A tunable has no usable source of truth or could not be written."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class StorageUnavailable(SapprepError):
    """The saved state store could not be read or written."""
    pass


class CommandError(SapprepError):
    """A system command exited non-zero or could not be started."""

    def __init__(self, argv: List[str], returncode: Optional[int], stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            detail = f"could not run '{' '.join(self.argv)}'"
        else:
            detail = f"'{' '.join(self.argv)}' exited with {returncode}"
        if stderr:
            detail = f"{detail}: {stderr}"
        super().__init__(detail)
