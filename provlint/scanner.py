"""Filesystem traversal for provider sources and documentation."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, Sequence

from .logging import get_logger
from .models import DocFragment

_LOGGER = get_logger("scanner")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    "vendor",
    "node_modules",
    "testdata",
}


def _is_excluded(rel_path: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        pattern = pattern.rstrip("/")
        if not pattern:
            continue
        if fnmatchcase(rel_path, pattern) or rel_path.startswith(f"{pattern}/"):
            return True
        if "/" not in pattern and any(fnmatchcase(part, pattern) for part in rel_path.split("/")):
            return True
    return False


def _iter_files(root: Path, exclude: Sequence[str] = ()) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _is_excluded(rel_path, exclude):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_excluded(rel_path, exclude):
                continue
            yield current_dir / filename


def iter_source_files(
    root: Path,
    *,
    suffix: str = ".go",
    test_suffix: str = "_test.go",
    exclude: Sequence[str] = (),
) -> Iterator[Path]:
    """Yield source files under ``root``, skipping tests and excluded paths."""
    if not root.is_dir():
        raise NotADirectoryError(f"Provider path is not a directory: {root}")
    for path in _iter_files(root, exclude):
        name = path.name
        if name.endswith(test_suffix) or not name.endswith(suffix):
            continue
        yield path


def iter_doc_fragments(root: Path, extensions: Sequence[str]) -> Iterator[DocFragment]:
    """Yield fragments whose names end with an allowed extension, paths relative to ``root``."""
    if not root.is_dir():
        _LOGGER.warning("Documentation root %s does not exist", root)
        return
    for path in _iter_files(root):
        if not path.name.endswith(tuple(extensions)):
            continue
        yield DocFragment(content=path.read_bytes(), path=path.relative_to(root))


__all__ = ["iter_doc_fragments", "iter_source_files"]
