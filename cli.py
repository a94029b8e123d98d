"""
CLI - Command-line interface for sapprep.

apply:  tune the host according to the sysconfig file
revert: restore every value saved by a previous apply
status: show what a revert would restore
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import Config
from .logs import configure_logging
from .protocol.errors import FatalPrecondition, StorageUnavailable
from .snapshot.store import StateStore
from .sysconfig_file import Sysconfig
from .tuning.executor import TuningExecutor
from .ui import ConsoleUI

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERRUPTED = 130


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="sapprep",
        description="Apply and revert kernel/OS tuning for SAP workloads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    sapprep apply
    sapprep revert
    sapprep status

    # Alternative desired-state file and state directory
    sapprep --sysconfig ./sapconf --state-dir /tmp/saved_state apply

Environment Variables:
    SAPPREP_CONFIG      Tool configuration file (TOML)
    SAPPREP_SYSCONFIG   Desired-state file (default: /etc/sysconfig/sapconf)
    SAPPREP_STATE_DIR   Saved state directory
        """,
    )

    parser.add_argument(
        "command",
        choices=["apply", "revert", "status"],
        help="Operation to run"
    )
    parser.add_argument(
        "-c", "--config",
        help="Tool configuration file (TOML)"
    )
    parser.add_argument(
        "--sysconfig",
        help="Desired-state file (default: /etc/sysconfig/sapconf)"
    )
    parser.add_argument(
        "--state-dir",
        dest="state_dir",
        help="Directory holding saved values for revert"
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        help="Append log messages to this file"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only print warnings and errors"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    ui = ConsoleUI(quiet=args.quiet)

    try:
        config = Config.load(args.config).override_from_args(args)
    except (OSError, ValueError) as e:
        ui.print_error(f"Cannot load configuration: {e}")
        sys.exit(EXIT_FATAL)

    errors = config.validate()
    if errors:
        for error in errors:
            ui.print_error(error)
        sys.exit(EXIT_FATAL)

    configure_logging(config.logging.level, config.logging.file, quiet=args.quiet)
    ui.print_banner()

    try:
        if args.command == "status":
            ui.print(config.summary())
            ui.print_snapshots(StateStore(Path(config.paths.state_dir)).list_snapshots())

        elif args.command == "apply":
            sysconfig = Sysconfig.load(Path(config.paths.sysconfig))
            report = TuningExecutor.from_config(config, sysconfig).apply()
            ui.print_report(report)

        else:
            report = TuningExecutor.from_config(config).revert()
            ui.print_report(report)

    except (FatalPrecondition, StorageUnavailable) as e:
        logger.error("%s", e.message)
        ui.print_error(e.message)
        sys.exit(EXIT_FATAL)

    except KeyboardInterrupt:
        ui.print("\nInterrupted by user")
        sys.exit(EXIT_INTERRUPTED)

    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
