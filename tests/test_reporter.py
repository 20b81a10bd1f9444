"""Tests for provlint.reporter."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from provlint.models import Violation
from provlint.reporter import DiagnosticsReporter


def test_reporter_writes_relative_locations(tmp_path: Path) -> None:
    sink = io.StringIO()
    reporter = DiagnosticsReporter(sink=sink, root=tmp_path)

    reporter.emit_all(
        [
            Violation(tmp_path / "resource_widget.go", 12, "name: Missing Description attribute"),
            Violation(Path("/elsewhere/x.go"), 3, "id: attribute name is reserved"),
        ]
    )

    assert sink.getvalue().splitlines() == [
        "resource_widget.go:12 name: Missing Description attribute",
        "/elsewhere/x.go:3 id: attribute name is reserved",
    ]
    assert len(reporter) == 2


def test_reporter_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    reporter = DiagnosticsReporter()
    reporter.emit(Violation(Path("a.go"), 1, "boom"))
    assert capsys.readouterr().out == "a.go:1 boom\n"
