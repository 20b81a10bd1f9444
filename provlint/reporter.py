"""Diagnostics output."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .models import Violation


class DiagnosticsReporter:
    """Writes ``path:line message`` lines to an append-only sink."""

    def __init__(self, sink: Optional[TextIO] = None, root: Optional[Path] = None) -> None:
        self._sink = sink
        self._root = root
        self.violations: List[Violation] = []

    @property
    def sink(self) -> TextIO:
        return self._sink if self._sink is not None else sys.stdout

    def emit(self, violation: Violation) -> None:
        self.violations.append(violation)
        self.sink.write(f"{self.format(violation)}\n")

    def emit_all(self, violations: Iterable[Violation]) -> None:
        for violation in violations:
            self.emit(violation)

    def format(self, violation: Violation) -> str:
        return f"{self._relativize(violation.path)}:{violation.line} {violation.message}"

    def _relativize(self, path: Path) -> str:
        if self._root is None:
            return str(path)
        try:
            return Path(path).relative_to(self._root).as_posix()
        except ValueError:
            return str(path)

    def __len__(self) -> int:
        return len(self.violations)


__all__ = ["DiagnosticsReporter"]
