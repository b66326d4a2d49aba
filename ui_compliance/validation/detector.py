"""Unit validator - combines fact extraction and rule execution.

For one unit it:
1. Extracts structural facts with the FactExtractor
2. Runs every rule set over the text and facts
3. Returns the diagnostics in rule-set order
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from ui_compliance.models import (
    Category,
    Diagnostic,
    FileResult,
    Location,
    Severity,
    SourceUnit,
    StructuralFacts,
)
from ui_compliance.validation.assessments import file_result
from ui_compliance.validation.discovery import FileSystemStore, SourceStore
from ui_compliance.validation.extractor import FactExtractor
from ui_compliance.validation.rules import RuleSet, ValidationContext

logger = structlog.get_logger()

PARSE_FAILURE = "parse-failure"
READ_FAILURE = "read-failure"


@dataclass
class UnitResult:
    """Outcome of validating one unit."""

    path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    facts: StructuralFacts | None = None
    unit: SourceUnit | None = None

    @property
    def validated(self) -> bool:
        """False when the unit could not be read."""
        return self.unit is not None

    @property
    def passed(self) -> bool:
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    def to_file_result(self) -> FileResult:
        return file_result(self.path, self.diagnostics, compliant=self.passed)


class UnitValidator:
    """Validates single source units against a list of rule sets."""

    def __init__(self, rule_sets: Sequence[RuleSet], extractor: FactExtractor | None = None):
        self.rule_sets = list(rule_sets)
        self.extractor = extractor or FactExtractor()
        self._logger = logger.bind(component="UnitValidator")

    def validate(self, unit: SourceUnit, context: ValidationContext) -> UnitResult:
        """Validate one unit.

        Never raises: parse failures and crashing rules come back as
        diagnostics.
        """
        facts = self.extractor.extract(unit.text, unit.path)
        diagnostics: list[Diagnostic] = []

        if not facts.ok:
            diagnostics.append(Diagnostic(
                rule_id=PARSE_FAILURE,
                message=f"Could not parse source: {facts.parse_error}",
                severity=Severity.ERROR,
                category=Category.STYLE,
                file=unit.path,
                location=Location(line=facts.parse_error_line),
            ))

        for rule_set in self.rule_sets:
            diagnostics.extend(rule_set.validate(context, unit.text, unit.path, facts))

        self._logger.debug("Unit validated", file=unit.path, issues=len(diagnostics))
        return UnitResult(path=unit.path, diagnostics=diagnostics, facts=facts, unit=unit)

    def validate_text(
        self,
        text: str,
        path: str = "<string>.tsx",
        context: ValidationContext | None = None,
    ) -> UnitResult:
        """Validate in-memory source text."""
        return self.validate(SourceUnit.from_text(text, path), context or ValidationContext.default())

    def validate_path(
        self,
        path: str,
        context: ValidationContext,
        store: SourceStore | None = None,
    ) -> UnitResult:
        """Read a unit through ``store`` and validate it."""
        store = store or FileSystemStore()
        try:
            text = store.read(path)
        except (OSError, UnicodeDecodeError) as e:
            self._logger.warning("Failed to read unit", file=path, error=str(e))
            return UnitResult(path=path, diagnostics=[Diagnostic(
                rule_id=READ_FAILURE,
                message=f"Could not read file: {e}",
                severity=Severity.ERROR,
                category=Category.STYLE,
                file=path,
            )])

        return self.validate(SourceUnit.from_text(text, path), context)
