"""
TuningExecutor - applies and reverts the SAP preparation tuning.

Apply, per tunable:
1. READ     - live value from the kernel / mount table
2. RESOLVE  - target from sysconfig, floors and live value
3. SNAPSHOT - pre-change value into the state store (at most once)
4. WRITE    - one system call, only when the target differs

Revert, per tunable:
1. LOOKUP   - saved value, if any
2. WRITE    - restore it
3. CLEAR    - drop the snapshot so the next apply captures afresh

A tunable that cannot be resolved or written is reported and skipped.
Only missing sysconfig, a missing tmpfs mount, and an unusable state store
during apply abort the run.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..config import Config, FloorsConfig
from ..discovery.system import SystemScanner, SystemScannerConfig
from ..protocol.errors import (
    CommandError,
    FatalPrecondition,
    StorageUnavailable,
    UnresolvedTunable,
)
from ..protocol.result import Outcome, TuningReport, TuningResult
from ..protocol.tunables import (
    MAX_MAP_COUNT,
    PAGECACHE_LIMIT_IGNORE_DIRTY,
    PAGECACHE_LIMIT_MB,
    SEM,
    SHMALL,
    SHMMAX,
    SHMMNI,
    TMPFS_MOUNT_OPTS,
    TMPFS_SIZE,
    SemaphoreLimits,
)
from ..snapshot.store import StateStore
from ..sysconfig_file import Sysconfig
from .limits import UlimitReconciler
from .mount import MountController
from .resolver import ParameterResolver
from .service import ServiceController
from .sysctl import KernelParameters

logger = logging.getLogger(__name__)


class TuningExecutor:
    """
    Runs the apply and revert sequences over all managed tunables.
    """

    def __init__(
        self,
        store: StateStore,
        sysconfig: Optional[Sysconfig] = None,
        kernel: Optional[KernelParameters] = None,
        scanner: Optional[SystemScanner] = None,
        mounts: Optional[MountController] = None,
        services: Optional[ServiceController] = None,
        limits: Optional[UlimitReconciler] = None,
        floors: Optional[FloorsConfig] = None,
        uuidd_unit: str = "uuidd.socket",
    ):
        self.store = store
        self.sysconfig = sysconfig
        self.kernel = kernel or KernelParameters()
        self.scanner = scanner or SystemScanner()
        self.mounts = mounts or MountController()
        self.services = services or ServiceController()
        self.limits = limits or UlimitReconciler()
        self.floors = floors or FloorsConfig()
        self.uuidd_unit = uuidd_unit

    @classmethod
    def from_config(cls, config: Config, sysconfig: Optional[Sysconfig] = None) -> "TuningExecutor":
        """Build an executor wired to the real host."""
        paths = config.paths
        return cls(
            store=StateStore(Path(paths.state_dir)),
            sysconfig=sysconfig,
            scanner=SystemScanner(SystemScannerConfig(
                meminfo=Path(paths.meminfo),
                mounts=Path(paths.mounts),
                shm_mount=Path(paths.shm_mount),
                pagecache_control=Path(paths.pagecache_control),
            )),
            limits=UlimitReconciler(Path(paths.limits_file), config.limits.groups),
            floors=config.floors,
            uuidd_unit=config.service.uuidd_unit,
        )

    # =========================================================================
    # Apply
    # =========================================================================

    def apply(self) -> TuningReport:
        """
        Apply all tuning.

        Raises:
            FatalPrecondition: sysconfig not loaded, or no tmpfs on /dev/shm
            StorageUnavailable: a rollback value could not be recorded
        """
        if self.sysconfig is None:
            raise FatalPrecondition("No sysconfig loaded, refusing to tune")

        report = TuningReport(action="apply")
        self.tune_preparation(report)
        self.tune_page_cache_limit(report)
        self.tune_uuidd_socket(report)
        return report

    def tune_preparation(self, report: TuningReport) -> None:
        """Universal tuning from SAP notes 1275776 and 1984787."""
        logger.info("--- Going to apply universal tuning techniques")
        resolver = ParameterResolver(self.sysconfig, self.floors)

        self._tune_tmpfs(report, resolver)
        self._tune_scalar(report, resolver, SHMMAX)
        self._tune_scalar(report, resolver, SHMALL)
        self._tune_semaphores(report, resolver)
        self._tune_scalar(report, resolver, MAX_MAP_COUNT)

        # nofile ulimits; no rollback for these
        report.extend(self.limits.reconcile(self.sysconfig.with_prefix("LIMIT_")))

        logger.info("--- Finished application of universal tuning techniques")

    def tune_page_cache_limit(self, report: TuningReport) -> None:
        """Page cache limit from SAP note 1557506."""
        logger.info("--- Going to tune page cache limit")
        if not self.scanner.pagecache_limit_supported():
            logger.info("pagecache limit is not supported by os, skipping.")
            report.add(TuningResult(PAGECACHE_LIMIT_MB, Outcome.SKIPPED, message="not supported by kernel"))
            return

        targets = ParameterResolver(self.sysconfig, self.floors).page_cache_targets()

        if targets.enabled:
            self._tune_exact(report, PAGECACHE_LIMIT_MB, targets.limit_mb)
            self._tune_exact(report, PAGECACHE_LIMIT_IGNORE_DIRTY, targets.ignore_dirty)
        else:
            # Always written, even when the live value is already 0
            current = self._read_int(PAGECACHE_LIMIT_MB)
            if current is None:
                report.add(TuningResult(PAGECACHE_LIMIT_MB, Outcome.SKIPPED, message="cannot read live value"))
            else:
                logger.info("Disabling page cache limit")
                report.add(self._change(PAGECACHE_LIMIT_MB, current, 0,
                                        lambda: self.kernel.set(PAGECACHE_LIMIT_MB, 0)))

        logger.info("--- Finished application of page cache limit")

    def tune_uuidd_socket(self, report: TuningReport) -> None:
        """Make sure uuidd.socket runs, as required by SAP note 1984787."""
        unit = self.uuidd_unit
        try:
            started = self.services.ensure_active(unit)
        except CommandError as e:
            logger.error("Failed to enable and start %s: %s", unit, e)
            report.add(TuningResult(unit, Outcome.FAILED, message=e.message))
            return

        if started:
            report.add(TuningResult(unit, Outcome.CHANGED, before="inactive", after="active"))
        else:
            logger.info("%s is already active", unit)
            report.add(TuningResult(unit, Outcome.UNCHANGED, before="active", after="active"))

    def _tune_tmpfs(self, report: TuningReport, resolver: ParameterResolver) -> None:
        mount = self.scanner.tmpfs_mount()
        required = resolver.tmpfs_target_kb(self.scanner.memory_total_kb())

        if required <= mount.size_kb:
            logger.info("Leaving size of %s untouched at %d", mount.mountpoint, mount.size_kb)
            report.add(TuningResult(TMPFS_SIZE, Outcome.UNCHANGED,
                                    before=str(mount.size_kb), after=str(mount.size_kb)))
            return

        logger.info("Increasing size of %s from %d to %d", mount.mountpoint, mount.size_kb, required)
        self.store.save(TMPFS_SIZE, mount.size_kb)
        self.store.save(TMPFS_MOUNT_OPTS, mount.options)
        try:
            self.mounts.remount(mount.mountpoint, mount.options, required)
        except CommandError as e:
            logger.error("Failed to resize %s: %s", mount.mountpoint, e)
            report.add(TuningResult(TMPFS_SIZE, Outcome.FAILED, before=str(mount.size_kb),
                                    after=str(required), message=e.message))
            return

        report.add(TuningResult(TMPFS_SIZE, Outcome.CHANGED, before=str(mount.size_kb), after=str(required)))

    def _tune_scalar(self, report: TuningReport, resolver: ParameterResolver, key: str) -> None:
        current = self._read_int(key)
        if current is None:
            report.add(TuningResult(key, Outcome.SKIPPED, message="cannot read live value"))
            return

        try:
            target = resolver.scalar_target(key, current)
        except UnresolvedTunable as e:
            logger.warning("%s, leaving %s untouched", e, key)
            report.add(TuningResult(key, Outcome.SKIPPED, before=str(current), message=e.message))
            return

        if target == current:
            logger.info("Leaving %s unchanged at %d", key, current)
            report.add(TuningResult(key, Outcome.UNCHANGED, before=str(current), after=str(current)))
            return

        report.add(self._change(key, current, target, lambda: self.kernel.set(key, target)))

    def _tune_semaphores(self, report: TuningReport, resolver: ParameterResolver) -> None:
        try:
            current = SemaphoreLimits.parse(self.kernel.get(SEM))
        except (CommandError, ValueError) as e:
            logger.warning("Cannot read %s, leaving it untouched: %s", SEM, e)
            report.add(TuningResult(SEM, Outcome.SKIPPED, message=str(e)))
            return

        target = resolver.semaphore_target(current)
        if target == current:
            logger.info("Leaving %s unchanged at '%s'", SEM, current)
            report.add(TuningResult(SEM, Outcome.UNCHANGED, before=str(current), after=str(current)))
            return

        report.add(self._change(SEM, current, target, lambda: self.kernel.set(SEM, target)))

    def _tune_exact(self, report: TuningReport, key: str, target: int) -> None:
        """Set key to exactly target; decreases are allowed."""
        current = self._read_int(key)
        if current is None:
            report.add(TuningResult(key, Outcome.SKIPPED, message="cannot read live value"))
            return

        if current == target:
            logger.info("Leaving %s unchanged at %d", key, current)
            report.add(TuningResult(key, Outcome.UNCHANGED, before=str(current), after=str(current)))
            return

        report.add(self._change(key, current, target, lambda: self.kernel.set(key, target)))

    def _change(self, key: str, before, after, write: Callable[[], None]) -> TuningResult:
        """
        Snapshot the live value, then write the target.

        A write of the value already in place is reported as unchanged.

        Raises:
            StorageUnavailable: the snapshot could not be recorded; nothing
                is written in that case
        """
        self.store.save(key, before)
        rewrite = str(before) == str(after)
        if rewrite:
            logger.info("Rewriting %s=%s", key, after)
        else:
            logger.info("Change %s from '%s' to '%s'", key, before, after)
        try:
            write()
        except CommandError as e:
            logger.error("Failed to set %s=%s: %s", key, after, e)
            return TuningResult(key, Outcome.FAILED, before=str(before), after=str(after), message=e.message)
        outcome = Outcome.UNCHANGED if rewrite else Outcome.CHANGED
        return TuningResult(key, outcome, before=str(before), after=str(after))

    def _read_int(self, key: str) -> Optional[int]:
        try:
            return int(self.kernel.get(key))
        except CommandError as e:
            logger.warning("Cannot read %s: %s", key, e)
        except ValueError as e:
            logger.warning("Unexpected value for %s: %s", key, e)
        return None

    # =========================================================================
    # Revert
    # =========================================================================

    def revert(self) -> TuningReport:
        """
        Restore every tunable that has a saved snapshot.

        Never raises for a single tunable; unreadable saved state leaves
        that tunable at its current value.
        """
        report = TuningReport(action="revert")
        self.revert_preparation(report)
        self.revert_page_cache_limit(report)
        self.revert_shmmni(report)
        return report

    def revert_preparation(self, report: TuningReport) -> None:
        logger.info("--- Going to revert universally tuned parameters")
        for key in (SHMMAX, SHMALL, SEM, MAX_MAP_COUNT):
            report.add(self._restore_kernel(key))
        report.add(self._restore_tmpfs())
        logger.info("--- Finished reverting universally tuned parameters")

    def revert_page_cache_limit(self, report: TuningReport) -> None:
        logger.info("--- Going to revert page cache limit")
        report.add(self._restore_kernel(PAGECACHE_LIMIT_MB))
        report.add(self._restore_kernel(PAGECACHE_LIMIT_IGNORE_DIRTY))
        logger.info("--- Finished reverting page cache limit")

    def revert_shmmni(self, report: TuningReport) -> None:
        """kernel.shmmni is only ever restored; other tools may have saved it."""
        report.add(self._restore_kernel(SHMMNI))

    def _restore_kernel(self, key: str) -> TuningResult:
        try:
            saved = self.store.restore(key)
        except StorageUnavailable as e:
            logger.warning("%s; leaving %s at its current value", e, key)
            return TuningResult(key, Outcome.SKIPPED, message=e.message)

        if saved is None:
            logger.debug("Nothing saved for %s", key)
            return TuningResult(key, Outcome.NOTHING_TO_RESTORE)

        logger.info("Restoring %s=%s", key, saved)
        try:
            self.kernel.set(key, saved)
        except CommandError as e:
            logger.error("Failed to restore %s=%s: %s", key, saved, e)
            return TuningResult(key, Outcome.FAILED, after=saved, message=e.message)

        self._forget(key)
        return TuningResult(key, Outcome.RESTORED, after=saved)

    def _restore_tmpfs(self) -> TuningResult:
        try:
            size = self.store.restore(TMPFS_SIZE)
            options = self.store.restore(TMPFS_MOUNT_OPTS)
        except StorageUnavailable as e:
            logger.warning("%s; leaving tmpfs size at its current value", e)
            return TuningResult(TMPFS_SIZE, Outcome.SKIPPED, message=e.message)

        if size is None:
            logger.debug("Nothing saved for %s", TMPFS_SIZE)
            return TuningResult(TMPFS_SIZE, Outcome.NOTHING_TO_RESTORE)

        mountpoint = str(self.scanner.config.shm_mount)
        if not self.scanner.shm_mount_exists():
            logger.warning("%s does not exist, cannot restore its size", mountpoint)
            return TuningResult(TMPFS_SIZE, Outcome.SKIPPED, message=f"{mountpoint} missing")

        try:
            size_kb = int(size)
        except ValueError:
            logger.warning("Saved %s=%r is not a size, leaving tmpfs untouched", TMPFS_SIZE, size)
            return TuningResult(TMPFS_SIZE, Outcome.SKIPPED, message="corrupt saved size")

        logger.info("Restoring size of %s to %d", mountpoint, size_kb)
        try:
            self.mounts.remount(mountpoint, options or "", size_kb)
        except CommandError as e:
            logger.error("Failed to restore size of %s: %s", mountpoint, e)
            return TuningResult(TMPFS_SIZE, Outcome.FAILED, after=size, message=e.message)

        self._forget(TMPFS_SIZE)
        self._forget(TMPFS_MOUNT_OPTS)
        return TuningResult(TMPFS_SIZE, Outcome.RESTORED, after=size)

    def _forget(self, key: str) -> None:
        try:
            self.store.clear(key)
        except StorageUnavailable as e:
            logger.warning("Restored %s but could not clear its snapshot: %s", key, e)
