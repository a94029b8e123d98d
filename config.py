"""
Configuration management for sapprep.

Supports:
- TOML config files
- Environment variables
- Command-line overrides
- Sensible defaults

Priority (highest to lowest):
1. Command-line arguments
2. Environment variables
3. Config file
4. Defaults

The desired tuning values themselves live in the sysconfig file
(/etc/sysconfig/sapconf); this file only describes where things are and
which minimum floors apply.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Older Python, declared as a conditional dependency

from .protocol.tunables import SHMMAX, SHMALL, MAX_MAP_COUNT, SemaphoreLimits


# Default config file locations (searched in order)
CONFIG_SEARCH_PATHS = [
    Path("/etc/sapprep/config.toml"),
    Path.home() / ".config" / "sapprep" / "config.toml",
]

CONFIG_ENV = "SAPPREP_CONFIG"
STATE_DIR_ENV = "SAPPREP_STATE_DIR"
SYSCONFIG_ENV = "SAPPREP_SYSCONFIG"


@dataclass
class PathsConfig:
    """Host file locations."""
    sysconfig: str = "/etc/sysconfig/sapconf"
    state_dir: str = "/var/lib/sapprep/saved_state"
    limits_file: str = "/etc/security/limits.conf"
    shm_mount: str = "/dev/shm"
    meminfo: str = "/proc/meminfo"
    mounts: str = "/proc/mounts"
    pagecache_control: str = "/proc/sys/vm/pagecache_limit_mb"


@dataclass
class FloorsConfig:
    """Documented minimum values; None means no floor."""
    shmmax: Optional[int] = None
    shmall: Optional[int] = None
    max_map_count: Optional[int] = 2000000
    sem: Optional[Tuple[int, int, int, int]] = (1250, 256000, 100, 8192)

    def for_key(self, key: str) -> Optional[int]:
        """Floor for a scalar tunable key."""
        return {
            SHMMAX: self.shmmax,
            SHMALL: self.shmall,
            MAX_MAP_COUNT: self.max_map_count,
        }.get(key)

    def sem_floors(self) -> Tuple[Optional[int], ...]:
        if self.sem is None:
            return (None, None, None, None)
        return tuple(SemaphoreLimits(*self.sem))


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = "/var/log/sapprep.log"


@dataclass
class ServiceConfig:
    """Auxiliary services that must be running."""
    uuidd_unit: str = "uuidd.socket"


@dataclass
class LimitsConfig:
    """Groups whose nofile limits are managed."""
    groups: List[str] = field(default_factory=lambda: ["@sapsys", "@sdba", "@dba"])


@dataclass
class Config:
    """Main configuration container."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    floors: FloorsConfig = field(default_factory=FloorsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)

    # Source tracking
    _config_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load configuration from file, then apply environment overrides.

        Args:
            config_path: Explicit path to config file. If None, SAPPREP_CONFIG
                and then the default locations are searched.

        Returns:
            Config instance with loaded values
        """
        config = cls()

        # Find config file
        config_path = config_path or os.environ.get(CONFIG_ENV)
        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            path = cls._find_config_file()

        if path:
            config = cls._load_from_file(path)
            config._config_file = path

        return config.override_from_env()

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Find config file in default locations."""
        for path in CONFIG_SEARCH_PATHS:
            if path.exists():
                return path
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load config from TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        # Paths
        if "paths" in data:
            p = data["paths"]
            defaults = config.paths
            config.paths = PathsConfig(
                sysconfig=p.get("sysconfig", defaults.sysconfig),
                state_dir=p.get("state_dir", defaults.state_dir),
                limits_file=p.get("limits_file", defaults.limits_file),
                shm_mount=p.get("shm_mount", defaults.shm_mount),
                meminfo=p.get("meminfo", defaults.meminfo),
                mounts=p.get("mounts", defaults.mounts),
                pagecache_control=p.get("pagecache_control", defaults.pagecache_control),
            )

        # Floors; a key set to 0 or an empty list disables that floor
        if "floors" in data:
            fl = data["floors"]
            defaults = config.floors
            sem = fl.get("sem", defaults.sem)
            config.floors = FloorsConfig(
                shmmax=fl.get("shmmax", defaults.shmmax) or None,
                shmall=fl.get("shmall", defaults.shmall) or None,
                max_map_count=fl.get("max_map_count", defaults.max_map_count) or None,
                sem=tuple(sem) if sem else None,
            )

        # Logging
        if "logging" in data:
            lg = data["logging"]
            config.logging = LoggingConfig(
                level=lg.get("level", config.logging.level),
                file=lg.get("file", config.logging.file) or None,
            )

        # Service
        if "service" in data:
            svc = data["service"]
            config.service = ServiceConfig(
                uuidd_unit=svc.get("uuidd_unit", config.service.uuidd_unit),
            )

        # Limits
        if "limits" in data:
            lim = data["limits"]
            config.limits = LimitsConfig(
                groups=list(lim.get("groups", config.limits.groups)),
            )

        return config

    def override_from_env(self) -> "Config":
        """Apply SAPPREP_* environment variables."""
        if os.environ.get(STATE_DIR_ENV):
            self.paths.state_dir = os.environ[STATE_DIR_ENV]
        if os.environ.get(SYSCONFIG_ENV):
            self.paths.sysconfig = os.environ[SYSCONFIG_ENV]
        return self

    def override_from_args(self, args) -> "Config":
        """
        Override config values from argparse namespace.

        Args with value None are ignored (keeping config file values).
        """
        if getattr(args, "sysconfig", None):
            self.paths.sysconfig = args.sysconfig
        if getattr(args, "state_dir", None):
            self.paths.state_dir = args.state_dir
        if getattr(args, "log_file", None):
            self.logging.file = args.log_file
        if getattr(args, "verbose", None):
            self.logging.level = "DEBUG"

        return self

    def validate(self) -> list:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        sem = self.floors.sem
        if sem is not None and (len(sem) != 4 or not all(_is_count(v) for v in sem)):
            errors.append("floors.sem must list exactly 4 non-negative integers (SEMMSL SEMMNS SEMOPM SEMMNI)")
        for name in ("shmmax", "shmall", "max_map_count"):
            value = getattr(self.floors, name)
            if value is not None and not _is_count(value):
                errors.append(f"floors.{name} must be a non-negative integer")
        if not self.limits.groups:
            errors.append("limits.groups must not be empty")
        if self.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown logging level: {self.logging.level}")

        return errors

    def summary(self, include_config_path: bool = True) -> str:
        """Generate human-readable config summary."""
        lines = []

        if include_config_path:
            if self._config_file:
                lines.append(f"Config: {self._config_file}")
            else:
                lines.append("Config: (defaults)")

        lines.append(f"Sysconfig: {self.paths.sysconfig}")
        lines.append(f"Saved state: {self.paths.state_dir}")
        lines.append(f"Limits file: {self.paths.limits_file}")
        lines.append(f"Shared memory: {self.paths.shm_mount}")

        return "\n".join(lines)


def _is_count(value) -> bool:
    """True for a non-negative int; TOML booleans are not counts."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
