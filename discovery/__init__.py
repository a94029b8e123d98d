"""
Discovery module - Gathers live host state before tuning.

Components:
- SystemScanner: memory totals, /dev/shm tmpfs options and size
"""

from .system import SystemScanner, SystemScannerConfig, TmpfsMount

__all__ = ["SystemScanner", "SystemScannerConfig", "TmpfsMount"]
