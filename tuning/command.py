"""
Synchronous system command execution with explicit results.
"""

import logging
import subprocess
from typing import List

from ..protocol.errors import CommandError

logger = logging.getLogger(__name__)


def run_command(argv: List[str], check: bool = True) -> subprocess.CompletedProcess:
    """
    Run a command and capture its output.

    Args:
        argv: Program and arguments, no shell involved
        check: Raise CommandError on a non-zero exit status

    Returns:
        The completed process

    Raises:
        CommandError: if the program cannot be started, or exits non-zero
            while check is set
    """
    logger.debug("Running: %s", " ".join(argv))
    try:
        result = subprocess.run(argv, capture_output=True, text=True)
    except OSError as e:
        raise CommandError(argv, None, str(e)) from e

    if check and result.returncode != 0:
        raise CommandError(argv, result.returncode, (result.stderr or "").strip())
    return result
