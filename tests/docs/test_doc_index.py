"""Tests for the documentation index."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from provlint.docs import Classifier, DocumentationIndex
from provlint.models import DocFragment, EntityKind


def _fragment(marker: str, path: str, body: str = "") -> DocFragment:
    content = f'---\nsidebar_current: "{marker}"\n---\n{body}'
    return DocFragment(content=content.encode("utf-8"), path=Path(path))


def test_index_partitions_by_kind() -> None:
    fragments = [
        _fragment("docs-acme-resource-widget", "docs/r/widget.md", "* `name`"),
        _fragment("docs-acme-datasource-widget", "docs/d/widget.md", "* `slug`"),
        _fragment("docs-acme-datasource-region", "docs/d/region.md"),
    ]

    index = DocumentationIndex.build(fragments, Classifier("acme"))

    assert len(index) == 3
    resource = index.get(EntityKind.RESOURCE, "acme_widget")
    datasource = index.get(EntityKind.DATASOURCE, "acme_widget")
    assert resource is not None and b"`name`" in resource.content
    assert datasource is not None and b"`slug`" in datasource.content
    assert set(index.names(EntityKind.DATASOURCE)) == {"acme_widget", "acme_region"}
    assert index.get(EntityKind.RESOURCE, "acme_region") is None


def test_index_drops_unclassifiable_fragments(caplog: pytest.LogCaptureFixture) -> None:
    fragments = [
        DocFragment(content=b"# Index\n", path=Path("docs/index.html.markdown")),
        _fragment("docs-acme-resource-widget", "docs/r/widget.md"),
    ]

    with caplog.at_level(logging.DEBUG, logger="provlint"):
        index = DocumentationIndex.build(fragments, Classifier("acme"), verbose=True)

    assert len(index) == 1
    assert "Ignoring docs/index.html.markdown" in caplog.text


def test_index_is_quiet_without_verbose(caplog: pytest.LogCaptureFixture) -> None:
    fragments = [DocFragment(content=b"# Index\n", path=Path("docs/index.md"))]

    with caplog.at_level(logging.DEBUG, logger="provlint"):
        DocumentationIndex.build(fragments, Classifier("acme"))

    assert caplog.text == ""


def test_later_fragments_replace_earlier_ones() -> None:
    fragments = [
        _fragment("docs-acme-resource-widget", "docs/r/widget.md", "old"),
        _fragment("docs-acme-resource-widget", "docs/r/widget2.md", "new"),
    ]

    index = DocumentationIndex.build(fragments, Classifier("acme"))

    doc = index.get(EntityKind.RESOURCE, "acme_widget")
    assert doc is not None
    assert doc.content.endswith(b"new")
    assert doc.path == Path("docs/r/widget2.md")
