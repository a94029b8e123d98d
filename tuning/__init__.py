"""
Tuning module - applies and reverts SAP kernel/OS tuning.

Components:
- ParameterResolver: Computes target values from sysconfig, floors and live state
- TuningExecutor: Snapshot-then-write apply, restore-then-clear revert
- KernelParameters / MountController: sysctl and tmpfs remount calls
- ServiceController: Keeps auxiliary systemd units running
- UlimitReconciler: nofile limits in limits.conf
"""

from .resolver import ParameterResolver, PageCacheTargets, resolve
from .executor import TuningExecutor
from .sysctl import KernelParameters
from .mount import MountController
from .service import ServiceController
from .limits import UlimitReconciler

__all__ = [
    "ParameterResolver",
    "PageCacheTargets",
    "resolve",
    "TuningExecutor",
    "KernelParameters",
    "MountController",
    "ServiceController",
    "UlimitReconciler",
]
