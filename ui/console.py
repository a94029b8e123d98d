"""
ConsoleUI - Rich-based console output.

Renders tuning reports and the saved state store.
"""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..protocol.result import Outcome, TuningReport
from ..snapshot.models import SavedSnapshot


OUTCOME_STYLES = {
    Outcome.CHANGED: "green",
    Outcome.RESTORED: "green",
    Outcome.UNCHANGED: "dim",
    Outcome.NOTHING_TO_RESTORE: "dim",
    Outcome.SKIPPED: "yellow",
    Outcome.FAILED: "bold red",
}


class ConsoleUI:
    """
    Rich console interface for sapprep.
    """

    def __init__(self, quiet: bool = False, console: Optional[Console] = None):
        self.quiet = quiet
        self.console = console or Console()

    def print(self, *args, **kwargs):
        """Print to console."""
        if self.quiet:
            return
        self.console.print(*args, **kwargs)

    def print_header(self, title: str):
        """Print a section header."""
        if self.quiet:
            return
        self.console.print()
        self.console.rule(f"[bold blue]{title}[/]")

    def print_banner(self):
        """Print application banner."""
        if self.quiet:
            return

        banner = f"""
[bold cyan]sapprep[/] [dim]v{__version__}[/]
[dim]Kernel and OS preparation for SAP workloads[/]
        """
        self.console.print(Panel(banner.strip(), border_style="cyan"))

    def print_report(self, report: TuningReport):
        """Display the per-tunable results of an apply or revert run."""
        if self.quiet:
            return

        self.print_header(f"{report.action.capitalize()} results")

        table = Table(box=None)
        table.add_column("Tunable", style="bold")
        table.add_column("Outcome")
        table.add_column("Before", justify="right")
        table.add_column("After", justify="right")
        table.add_column("Note", style="dim")

        for result in report.results:
            style = OUTCOME_STYLES.get(result.outcome, "white")
            table.add_row(
                result.key,
                f"[{style}]{result.outcome.value}[/]",
                result.before or "-",
                result.after or "-",
                result.message,
            )

        self.console.print(table)

        failed = len(report.failed)
        changed = len(report.changed)
        if failed:
            self.console.print(f"[bold red]{failed} tunable(s) failed[/], {changed} changed")
        else:
            self.console.print(f"[green]{changed} tunable(s) changed[/]")

    def print_snapshots(self, snapshots: List[SavedSnapshot]):
        """Display saved snapshots awaiting revert."""
        if self.quiet:
            return

        self.print_header("Saved state")

        if not snapshots:
            self.console.print("[dim]Nothing saved; revert has nothing to do.[/]")
            return

        table = Table(box=None)
        table.add_column("Key", style="bold")
        table.add_column("Saved value", justify="right")
        table.add_column("Saved at", style="dim")

        for snapshot in snapshots:
            table.add_row(snapshot.key, snapshot.value, snapshot.saved_at)

        self.console.print(table)

    def print_error(self, message: str):
        """Errors are shown even in quiet mode."""
        self.console.print(f"[bold red]Error:[/] {message}")
