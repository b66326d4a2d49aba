"""Validation report and score models.

A Report is built once per run. Presenters read it; they never alter it.
Serialised keys are camelCase to match the embedding tool's report format.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .assessment import (
    AccessibilityAssessment,
    ClassificationAssessment,
    DesignSystemAssessment,
    FileResult,
)
from .diagnostics import Category, Diagnostic


@dataclass(frozen=True)
class ScoreBreakdown:
    """Cross-cutting sub-scores, each 0-100."""

    typing: float = 100.0
    component_sizing: float = 100.0
    import_usage: float = 100.0
    security: float = 100.0
    wcag: float = 100.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "typing": self.typing,
            "componentSizing": self.component_sizing,
            "importUsage": self.import_usage,
            "security": self.security,
            "wcag": self.wcag,
        }


@dataclass(frozen=True)
class Score:
    """Per-category scores and the weighted overall score, all 0-100."""

    overall: float
    categories: dict[Category, float] = field(default_factory=dict)
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    def for_category(self, category: Category) -> float:
        return self.categories.get(category, 100.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall,
            "categories": {c.value: s for c, s in self.categories.items()},
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass
class RunSummary:
    """Run statistics."""

    total_files: int = 0
    validated_files: int = 0
    total_issues: int = 0
    critical_issues: int = 0
    fixable_issues: int = 0
    fixed_issues: int = 0
    execution_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "validatedFiles": self.validated_files,
            "totalIssues": self.total_issues,
            "criticalIssues": self.critical_issues,
            "fixableIssues": self.fixable_issues,
            "fixedIssues": self.fixed_issues,
            "executionTime": round(self.execution_time_ms, 2),
        }


@dataclass
class Report:
    """Complete output of one validation run."""

    success: bool
    errors: list[Diagnostic]
    warnings: list[Diagnostic]
    infos: list[Diagnostic]
    categories: dict[Category, list[Diagnostic]]
    score: Score
    recommendations: list[str]
    fixable_issues: int
    summary: RunSummary = field(default_factory=RunSummary)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = field(default_factory=dict)
    # Assessments are None when their category did not run
    classification: ClassificationAssessment | None = None
    accessibility: AccessibilityAssessment | None = None
    design_system: DesignSystemAssessment | None = None
    file_results: list[FileResult] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return len(self.errors) + len(self.warnings) + len(self.infos)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """All diagnostics, errors first."""
        return [*self.errors, *self.warnings, *self.infos]

    def for_file(self, file: str) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.file == file]

    def files(self) -> list[str]:
        """Files with diagnostics, in first-seen order."""
        seen: dict[str, None] = {}
        for d in self.diagnostics:
            seen.setdefault(d.file, None)
        return list(seen)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
            "totalIssues": self.total_issues,
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
            "infos": [d.to_dict() for d in self.infos],
            "categories": {
                c.value: [d.to_dict() for d in diags]
                for c, diags in self.categories.items()
            },
            "score": self.score.to_dict(),
            "recommendations": list(self.recommendations),
            "fixableIssues": self.fixable_issues,
            "summary": self.summary.to_dict(),
            "nsm": self.classification.to_dict() if self.classification else None,
            "accessibility": self.accessibility.to_dict() if self.accessibility else None,
            "designSystem": self.design_system.to_dict() if self.design_system else None,
            "fileResults": [r.to_dict() for r in self.file_results],
            "metadata": self.metadata,
        }
