"""
ServiceController - Manages systemd units needed by SAP workloads.

Provides:
- Active status query (systemctl is-active)
- Enable and start
- ensure_active(), which only touches the service manager when needed
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional

from .command import run_command

logger = logging.getLogger(__name__)


@dataclass
class SystemctlConfig:
    """Configuration for service controller."""
    systemctl: str = "systemctl"


class ServiceController:
    """
    Controls systemd units.
    """

    def __init__(
        self,
        config: Optional[SystemctlConfig] = None,
        runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
    ):
        self.config = config or SystemctlConfig()
        self._run = runner or run_command

    def is_active(self, unit: str) -> bool:
        """Check if a unit is active."""
        result = self._run([self.config.systemctl, "is-active", unit], check=False)
        return result.returncode == 0

    def enable(self, unit: str) -> None:
        """
        Enable a unit.

        Raises:
            CommandError: if systemctl fails
        """
        self._run([self.config.systemctl, "enable", unit])

    def start(self, unit: str) -> None:
        """
        Start a unit.

        Raises:
            CommandError: if systemctl fails
        """
        self._run([self.config.systemctl, "start", unit])

    def ensure_active(self, unit: str) -> bool:
        """
        Enable and start a unit unless it is already active.

        Returns:
            True if enable/start were issued, False if the unit was active

        Raises:
            CommandError: if enabling or starting fails
        """
        if self.is_active(unit):
            return False

        logger.info("--- Going to enable and start %s", unit)
        self.enable(unit)
        self.start(unit)
        return True
