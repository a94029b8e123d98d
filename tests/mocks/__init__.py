"""
Mock components for testing sapprep.

These fakes replace sysctl, mount and systemctl so that apply/revert runs
can be exercised without root and without touching the host.
"""

from .golden_data import (
    UNTUNED_KERNEL,
    TUNED_KERNEL,
    SAPCONF,
    MEMINFO,
    MEMORY_TOTAL_KB,
    SHM_SIZE_KB,
    SHM_OPTIONS,
    PROC_MOUNTS,
    LIMITS_CONF,
)
from .fake_host import FakeKernel, FakeScanner, FakeMounts, FakeSystemctl, FakeRunner, FakeHost

__all__ = [
    # Fakes
    'FakeKernel',
    'FakeScanner',
    'FakeMounts',
    'FakeSystemctl',
    'FakeRunner',
    'FakeHost',
    # Golden data
    'UNTUNED_KERNEL',
    'TUNED_KERNEL',
    'SAPCONF',
    'MEMINFO',
    'MEMORY_TOTAL_KB',
    'SHM_SIZE_KB',
    'SHM_OPTIONS',
    'PROC_MOUNTS',
    'LIMITS_CONF',
]
