from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from provlint.syntax.parser import GoSourceParser
from tests._fixtures.provider_builder import ProviderBuilder


@pytest.fixture
def provider_builder(tmp_path: Path) -> ProviderBuilder:
    """Provide a reusable provider builder rooted at the pytest tmp_path."""
    return ProviderBuilder(tmp_path)


@pytest.fixture(scope="session")
def go_parser() -> GoSourceParser:
    return GoSourceParser()


@pytest.fixture(autouse=True)
def _reset_provlint_logger() -> Iterator[None]:
    """Undo configure_logging so caplog keeps seeing provlint records."""
    yield
    logger = logging.getLogger("provlint")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
