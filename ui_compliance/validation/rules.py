"""Rule framework.

A Rule inspects one unit (its text and extracted facts) and returns
diagnostics. Rules are stateless and never touch the file system; fixes
are described as text edits and applied later by the fixer.

A RuleSet groups the rules of one category and isolates them from each
other: a rule that raises becomes a single ``rule-crashed`` diagnostic
and the remaining rules still run.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from ui_compliance.config import ValidationConfig
from ui_compliance.models import (
    Category,
    Diagnostic,
    Fix,
    Location,
    Severity,
    StructuralFacts,
)
from ui_compliance.validation.fixer import apply_to_text

logger = structlog.get_logger()

RULE_CRASHED = "rule-crashed"


@dataclass(frozen=True)
class ValidationContext:
    """Run configuration shared by every rule. Built once per run."""

    config: ValidationConfig
    unit_paths: tuple[str, ...] = ()

    @classmethod
    def default(cls) -> "ValidationContext":
        return cls(config=ValidationConfig())

    def strictness(self) -> Severity:
        """Severity for rules that soften when strict typing is off."""
        return Severity.ERROR if self.config.strict_typing else Severity.WARNING


class Rule:
    """Base class for validation rules.

    Subclasses set the class attributes and implement ``validate``.
    """

    id: str = ""
    name: str = ""
    category: Category = Category.STYLE
    severity: Severity = Severity.ERROR
    description: str = ""
    fixable: bool = False

    def validate(
        self,
        context: ValidationContext,
        text: str,
        path: str,
        facts: StructuralFacts,
    ) -> list[Diagnostic]:
        raise NotImplementedError

    def autofix(self, text: str, diagnostics: Iterable[Diagnostic]) -> str:
        """Apply this rule's fixes to ``text`` and return the new text."""
        own = [d for d in diagnostics if d.rule_id == self.id]
        return apply_to_text(text, own).text

    def diagnostic(
        self,
        path: str,
        message: str,
        line: int = 1,
        column: int = 0,
        fix: Fix | None = None,
        severity: Severity | None = None,
    ) -> Diagnostic:
        """Build a diagnostic attributed to this rule."""
        return Diagnostic(
            rule_id=self.id,
            message=message,
            severity=severity or self.severity,
            category=self.category,
            file=path,
            location=Location(line=line, column=column),
            fix=fix,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"


class RuleSet:
    """An ordered group of rules for one category."""

    def __init__(self, name: str, category: Category, rules: Sequence[Rule]):
        self.name = name
        self.category = category
        self.rules = list(rules)
        self._logger = logger.bind(component="RuleSet", rule_set=name)

    def validate(
        self,
        context: ValidationContext,
        text: str,
        path: str,
        facts: StructuralFacts,
    ) -> list[Diagnostic]:
        """Run every rule in declaration order and concatenate the results."""
        diagnostics: list[Diagnostic] = []

        for rule in self.rules:
            try:
                diagnostics.extend(rule.validate(context, text, path, facts))
            except Exception as e:
                self._logger.error(
                    "Rule crashed",
                    rule=rule.id,
                    file=path,
                    error=str(e),
                    exc_info=True,
                )
                diagnostics.append(Diagnostic(
                    rule_id=RULE_CRASHED,
                    message=f"Rule validation failed: {rule.id} raised {type(e).__name__}: {e}",
                    severity=Severity.ERROR,
                    category=rule.category,
                    file=path,
                ))

        return diagnostics

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"RuleSet({self.name!r}, rules={len(self.rules)})"
