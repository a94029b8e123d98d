"""
Tests for console rendering and logging setup.
"""

import io
import logging

from rich.console import Console

from sapprep.logs import configure_logging
from sapprep.protocol.result import Outcome, TuningReport, TuningResult
from sapprep.snapshot.models import SavedSnapshot
from sapprep.ui import ConsoleUI


def make_ui(quiet=False):
    buffer = io.StringIO()
    return ConsoleUI(quiet=quiet, console=Console(file=buffer, width=120)), buffer


def sample_report():
    report = TuningReport(action="apply")
    report.add(TuningResult("kernel.shmmax", Outcome.CHANGED, before="33554432", after="18446744073692774399"))
    report.add(TuningResult("kernel.sem", Outcome.UNCHANGED, before="1250 256000 100 8192", after="1250 256000 100 8192"))
    report.add(TuningResult("uuidd.socket", Outcome.FAILED, message="exited with 1"))
    return report


def test_report_counts():
    report = sample_report()
    assert [r.key for r in report.changed] == ["kernel.shmmax"]
    assert [r.key for r in report.failed] == ["uuidd.socket"]
    assert report.to_dict()["results"][0]["outcome"] == "changed"


def test_print_report():
    ui, buffer = make_ui()
    ui.print_report(sample_report())

    out = buffer.getvalue()
    assert "Apply results" in out
    assert "18446744073692774399" in out
    assert "1 tunable(s) failed" in out


def test_print_snapshots():
    ui, buffer = make_ui()
    ui.print_snapshots([SavedSnapshot.create("tmpfs.size", 8000000)])
    assert "tmpfs.size" in buffer.getvalue()
    assert "8000000" in buffer.getvalue()


def test_quiet_only_shows_errors():
    ui, buffer = make_ui(quiet=True)
    ui.print_banner()
    ui.print_report(sample_report())
    ui.print_error("No sysconfig loaded")
    assert buffer.getvalue().strip() == "Error: No sysconfig loaded"


def test_configure_logging(tmp_path):
    log_file = tmp_path / "sapprep.log"
    console_buffer = io.StringIO()

    logger = configure_logging("INFO", str(log_file), quiet=True, console=Console(file=console_buffer))
    logging.getLogger("sapprep.tuning.executor").info("Change kernel.shmmax")
    logging.getLogger("sapprep.tuning.executor").warning("Cannot read kernel.sem")
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text()
    assert "INFO sapprep.tuning.executor: Change kernel.shmmax" in text
    assert "WARNING" in text
    assert "Change kernel.shmmax" not in console_buffer.getvalue()
    assert "Cannot read kernel.sem" in console_buffer.getvalue()


def test_configure_logging_replaces_handlers(tmp_path):
    configure_logging("DEBUG", str(tmp_path / "a.log"))
    logger = configure_logging("DEBUG", str(tmp_path / "b.log"))
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
