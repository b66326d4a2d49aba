"""Per-concern assessments derived from a run's diagnostics.

Assessments never add findings. Each one is a projection of the
diagnostics already in the Report, recomputed whenever it is built.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .diagnostics import Diagnostic


class ComplianceLevel(str, Enum):
    """NSM compliance tier of a run."""

    COMPLIANT = "compliant"
    MOSTLY_COMPLIANT = "mostly-compliant"
    NEEDS_WORK = "needs-work"
    NON_COMPLIANT = "non-compliant"


# Achieved WCAG tier; "Non-compliant" when no tier is met
NON_COMPLIANT_WCAG = "Non-compliant"


@dataclass(frozen=True)
class ClassificationAssessment:
    """NSM classification and security posture."""

    score: float
    level: ComplianceLevel
    critical_issues: tuple[Diagnostic, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level.value,
            "criticalIssues": [d.to_dict() for d in self.critical_issues],
        }


@dataclass(frozen=True)
class AccessibilityAssessment:
    """WCAG tier actually achieved, with the criteria behind it."""

    score: float
    level: str
    passed_criteria: tuple[str, ...] = ()
    failed_criteria: tuple[str, ...] = ()
    critical_issues: tuple[Diagnostic, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "wcagLevel": self.level,
            "passedCriteria": list(self.passed_criteria),
            "failedCriteria": list(self.failed_criteria),
            "criticalIssues": [d.to_dict() for d in self.critical_issues],
        }


@dataclass(frozen=True)
class DesignSystemAssessment:
    """Design-system usage sub-scores and the pattern counts they come from."""

    import_score: float
    composition_score: float
    consistency_score: float
    overall_score: float
    patterns: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "importScore": self.import_score,
            "compositionScore": self.composition_score,
            "consistencyScore": self.consistency_score,
            "overallScore": self.overall_score,
            "patterns": dict(self.patterns),
        }


@dataclass(frozen=True)
class FileResult:
    """Verdict for one validated unit."""

    path: str
    compliant: bool
    score: float
    issues: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.path,
            "compliant": self.compliant,
            "score": self.score,
            "issues": self.issues,
        }
