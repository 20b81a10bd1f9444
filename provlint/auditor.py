"""Orchestration of a complete provider audit."""

from __future__ import annotations

from typing import List, Optional, Sequence, Set

from .catalog import extract_catalog
from .config import AuditConfig
from .crossref import CrossReferenceChecker
from .docs import Classifier, DocumentationIndex
from .logging import get_logger
from .models import AuditSummary, ProviderCatalog, SourceUnit, Violation
from .reporter import DiagnosticsReporter
from .rules import Rule, RuleEngine, discover_rules
from .scanner import iter_doc_fragments, iter_source_files
from .schema import SchemaExtractor, SymbolTable
from .syntax.nodes import ShapeMismatch
from .syntax.parser import GoSourceParser

_LOGGER = get_logger("auditor")


class ProviderAuditor:
    """Audits provider schemas against documentation and design rules.

    The catalog and documentation index are built once per run and are only
    read afterwards; schema extraction, rules and cross-referencing then run
    file by file.
    """

    def __init__(
        self,
        config: AuditConfig,
        *,
        reporter: Optional[DiagnosticsReporter] = None,
        rules: Optional[Sequence[Rule]] = None,
        parser: Optional[GoSourceParser] = None,
    ) -> None:
        self.config = config
        if reporter is None:
            reporter = DiagnosticsReporter(root=config.provider_path)
        self.reporter = reporter
        self.parser = parser or GoSourceParser()
        self.classifier = Classifier(config.provider_name, marker=config.docs.marker)
        self.extractor = SchemaExtractor(config.conventions, verbose=config.verbose)
        self.engine = RuleEngine(rules if rules is not None else discover_rules(config))

    def run(self) -> AuditSummary:
        config = self.config
        _LOGGER.info("Checking provider %s at %s", config.provider_name, config.provider_path)

        catalog = self.load_catalog()
        index = self.load_documentation()
        checker = CrossReferenceChecker(index, self.classifier, markup=config.docs.markup)

        summary = AuditSummary()
        matched: Set[str] = set()
        for path in iter_source_files(
            config.provider_path,
            suffix=config.conventions.source_suffix,
            test_suffix=config.conventions.test_suffix,
            exclude=config.exclude_paths,
        ):
            unit = self.parser.parse_file(path)
            violations = self.audit_unit(unit, catalog, checker, matched)
            self.reporter.emit_all(violations)
            summary.violations.extend(violations)
            summary.files_checked += 1

        summary.unmatched_entries = [
            entry
            for entry in catalog.entries
            if entry.constructor_name not in matched
            and catalog.lookup(entry.kind, entry.declared_name) is entry
        ]
        for entry in summary.unmatched_entries:
            _LOGGER.warning(
                "No constructor %s found for %s %s",
                entry.constructor_name,
                entry.kind,
                entry.declared_name,
            )
            # Without a constructor only the documentation lookup can run.
            violations = checker.check(entry, None, config.registration_path, entry.line)
            self.reporter.emit_all(violations)
            summary.violations.extend(violations)
        return summary

    def load_catalog(self) -> ProviderCatalog:
        config = self.config
        unit = self.parser.parse_file(config.registration_path)
        return extract_catalog(
            unit,
            config.conventions,
            strict=config.strict_catalog,
            verbose=config.verbose,
        )

    def load_documentation(self) -> DocumentationIndex:
        config = self.config
        fragments = iter_doc_fragments(config.docs_root, config.docs.extensions)
        index = DocumentationIndex.build(fragments, self.classifier, verbose=config.verbose)
        _LOGGER.info("Loaded %d documentation fragments from %s", len(index), config.docs_root)
        return index

    def audit_unit(
        self,
        unit: SourceUnit,
        catalog: ProviderCatalog,
        checker: CrossReferenceChecker,
        matched: Optional[Set[str]] = None,
    ) -> List[Violation]:
        """Return the violations found in one parsed file."""
        verbose = self.config.verbose
        symbols = SymbolTable.from_unit(unit)
        violations: List[Violation] = []
        seen: Set[str] = set()
        for function in self.extractor.constructors(unit):
            # First declaration wins when a name is declared twice.
            if function.name in seen:
                continue
            seen.add(function.name)

            result = self.extractor.extract(function, symbols)
            constructor = None
            if isinstance(result, ShapeMismatch):
                if verbose:
                    _LOGGER.debug(
                        "Structure of %s does not allow parsing: %s",
                        function.name,
                        result.describe(),
                    )
            else:
                constructor = result
                violations.extend(self.engine.evaluate(constructor, unit.path))

            entries = catalog.entries_for(function.name)
            if not entries:
                if verbose:
                    _LOGGER.debug(
                        "Could not find matching datasource or resource for %s", function.name
                    )
                continue
            if matched is not None:
                if function.name in matched:
                    if verbose:
                        _LOGGER.debug(
                            "%s in %s was already cross-referenced", function.name, unit.path
                        )
                    continue
                matched.add(function.name)
            for entry in entries:
                violations.extend(checker.check(entry, constructor, unit.path, function.line))
        return violations


def audit(config: AuditConfig, reporter: Optional[DiagnosticsReporter] = None) -> AuditSummary:
    """Run a complete audit with the default rules."""
    return ProviderAuditor(config, reporter=reporter).run()


__all__ = ["ProviderAuditor", "audit"]
