from __future__ import annotations

from datetime import timedelta
from io import StringIO

import pytest

from node_remover.removerconfig import RemoverConfig
from node_remover.removeremitter import RemoverEmitter
from node_remover.removermodel import RunTotals
from node_remover.removermodel import TargetDirectory

TARGET = TargetDirectory("proj/node_modules", 2 * 1024 * 1024, timedelta(hours=2))


def _emitter(**kwargs: bool) -> tuple[RemoverEmitter, StringIO, StringIO]:
    stdout = StringIO()
    stderr = StringIO()
    config = RemoverConfig.create(["proj", "other"], "1h", **kwargs)
    return RemoverEmitter(config, stdout=stdout, stderr=stderr), stdout, stderr


def test_verbose_lines_hidden_by_default() -> None:
    emitter, stdout, _ = _emitter()

    emitter.preamble()
    emitter.scanning("proj")
    emitter.skipping("proj/node_modules", timedelta(minutes=5))
    emitter.size_warning("proj/node_modules", PermissionError("denied"))

    assert stdout.getvalue() == ""


def test_verbose_lines_shown_when_verbose() -> None:
    emitter, stdout, _ = _emitter(verbose=True, dry_run=True)

    emitter.preamble()
    emitter.scanning("proj")
    emitter.skipping("proj/node_modules", timedelta(minutes=5))

    output = stdout.getvalue()
    assert "Scanning directories: proj, other" in output
    assert "Age threshold: 1h0m0s" in output
    assert "DRY RUN MODE" in output
    assert "Scanning directory: proj" in output
    assert "Skipping proj/node_modules (age: 5m0s, threshold: 1h0m0s)" in output


def test_quiet_overrides_verbose() -> None:
    emitter, stdout, stderr = _emitter(verbose=True, quiet=True)

    emitter.preamble()
    emitter.removed(TARGET)
    emitter.root_failed("missing", FileNotFoundError("gone"))
    emitter.remove_failed("proj/node_modules", PermissionError("denied"))
    emitter.summary(RunTotals(found=1, removed=1, size_bytes=100))

    assert stdout.getvalue() == ""
    assert stderr.getvalue() == ""


def test_target_lines() -> None:
    emitter, stdout, _ = _emitter()

    emitter.would_remove(TARGET)
    emitter.removed(TARGET)

    lines = stdout.getvalue().splitlines()
    assert lines == [
        "  [DRY RUN] Would remove: proj/node_modules (age: 2h0m0s, size: 2.00 MB)",
        "  Removed: proj/node_modules (age: 2h0m0s, size: 2.00 MB)",
    ]


def test_errors_go_to_stderr() -> None:
    emitter, stdout, stderr = _emitter()

    emitter.root_failed("missing", FileNotFoundError("gone"))
    emitter.remove_failed("proj/node_modules", PermissionError("denied"))

    assert stdout.getvalue() == ""
    assert "Error processing directory missing: gone" in stderr.getvalue()
    assert "Error removing proj/node_modules: denied" in stderr.getvalue()


def test_summary_live() -> None:
    emitter, stdout, _ = _emitter()

    emitter.summary(RunTotals(found=3, removed=2, size_bytes=5 * 1024 * 1024))

    output = stdout.getvalue()
    assert "\nSUMMARY:" in output
    assert "Found 3 node_modules directories older than 1h0m0s" in output
    assert "Removed 2 directories" in output
    assert "Freed approximately 5.00 MB" in output
    assert "could not be scanned" not in output


def test_summary_dry_run() -> None:
    emitter, stdout, _ = _emitter(dry_run=True)

    emitter.summary(RunTotals(found=1, size_bytes=1024 * 1024 * 3 // 2, errors=1))

    output = stdout.getvalue()
    assert "DRY RUN SUMMARY:" in output
    assert "Would free approximately 1.50 MB" in output
    assert "Removed" not in output
    assert "1 directories could not be scanned" in output


def test_streams_default_to_sys(capsys: pytest.CaptureFixture[str]) -> None:
    config = RemoverConfig.create()
    emitter = RemoverEmitter(config)

    emitter.to_stdout("out line")
    emitter.to_stderr("err line")

    captured = capsys.readouterr()
    assert captured.out == "out line\n"
    assert captured.err == "err line\n"
