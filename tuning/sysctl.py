"""
KernelParameters - read and write kernel tunables through sysctl(8).
"""

from typing import Callable, List, Optional
import subprocess

from .command import run_command


class KernelParameters:
    """
    Live kernel parameter access.

    get() normalizes whitespace so that multi-field values such as
    kernel.sem ("32000\\t1024000000\\t500\\t32000") compare as plain
    space separated strings.
    """

    def __init__(self, runner: Optional[Callable[[List[str]], subprocess.CompletedProcess]] = None):
        self._run = runner or run_command

    def get(self, name: str) -> str:
        """
        Current value of a kernel parameter.

        Raises:
            CommandError: if sysctl cannot read the parameter
        """
        result = self._run(["sysctl", "-n", name])
        return " ".join(result.stdout.split())

    def set(self, name: str, value) -> None:
        """
        Write a kernel parameter.

        Raises:
            CommandError: if sysctl rejects the value
        """
        self._run(["sysctl", "-w", f"{name}={value}"])
