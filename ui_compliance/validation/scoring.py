"""Diagnostic aggregation and scoring.

Each category starts at 100 and loses ``weight x severity factor`` per
diagnostic, floored at 0. The overall score is a weighted composite of
the category scores. Pass/fail is independent of the score: a run
succeeds exactly when it has no error-severity diagnostics.
"""

from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from ui_compliance.config import AccessibilityLevel
from ui_compliance.models import (
    Category,
    Diagnostic,
    FileResult,
    Report,
    RunSummary,
    Score,
    Severity,
)
from ui_compliance.validation.assessments import (
    assess_accessibility,
    assess_classification,
    assess_design_system,
    score_breakdown,
)

# Penalty per diagnostic, before the severity factor
CATEGORY_WEIGHTS = {
    Category.CLASSIFICATION: 20.0,
    Category.ACCESSIBILITY: 15.0,
    Category.DESIGN_SYSTEM: 10.0,
    Category.STYLE: 8.0,
}

SEVERITY_FACTORS = {
    Severity.ERROR: 1.0,
    Severity.WARNING: 0.5,
    Severity.INFO: 0.1,
}

# Share of each category in the overall score
OVERALL_WEIGHTS = {
    Category.CLASSIFICATION: 0.35,
    Category.ACCESSIBILITY: 0.25,
    Category.DESIGN_SYSTEM: 0.2,
    Category.STYLE: 0.2,
}

CATEGORY_ADVICE = {
    Category.STYLE: "meet minimum touch-target sizes, keep props readonly and declare explicit types",
    Category.DESIGN_SYSTEM: "import components from the design system and use design tokens instead of literal values",
    Category.CLASSIFICATION: "add NSM classification markers and keep secrets and insecure URLs out of source",
    Category.ACCESSIBILITY: "give interactive elements accessible names, keyboard support and sufficient contrast",
}


def penalty(diagnostic: Diagnostic) -> float:
    return CATEGORY_WEIGHTS[diagnostic.category] * SEVERITY_FACTORS[diagnostic.severity]


def category_score(diagnostics: Iterable[Diagnostic]) -> float:
    return max(0.0, 100.0 - sum(penalty(d) for d in diagnostics))


def compute_score(
    by_category: dict[Category, list[Diagnostic]],
) -> Score:
    """Score the categories present in ``by_category``."""
    categories = {c: round(category_score(diags), 1) for c, diags in by_category.items()}

    total_weight = sum(OVERALL_WEIGHTS[c] for c in categories)
    if total_weight == 0:
        return Score(overall=100.0, categories=categories)

    overall = sum(OVERALL_WEIGHTS[c] * s for c, s in categories.items()) / total_weight
    overall = min(100.0, max(0.0, round(overall, 1)))
    return Score(overall=overall, categories=categories)


def build_recommendations(by_category: dict[Category, list[Diagnostic]]) -> list[str]:
    """One recommendation per category with diagnostics, worst first."""
    order = list(Category)
    ranked = []
    for category, diags in by_category.items():
        if not diags:
            continue
        errors = sum(1 for d in diags if d.severity == Severity.ERROR)
        warnings = sum(1 for d in diags if d.severity == Severity.WARNING)
        ranked.append((-errors, -warnings, order.index(category), category, errors, warnings, len(diags)))

    recommendations = []
    for *_, category, errors, warnings, count in sorted(ranked):
        recommendations.append(
            f"{category.title}: {count} issue(s) ({errors} error(s), {warnings} warning(s)) - "
            f"{CATEGORY_ADVICE[category]}."
        )
    return recommendations


def aggregate(
    diagnostics: Iterable[Diagnostic],
    categories: Sequence[Category] | None = None,
    total_files: int = 0,
    validated_files: int = 0,
    fixed_issues: int = 0,
    execution_time_ms: float = 0.0,
    metadata: dict[str, Any] | None = None,
    accessibility_level: AccessibilityLevel = AccessibilityLevel.AAA,
    file_results: Sequence[FileResult] | None = None,
) -> Report:
    """Partition diagnostics and build the run report.

    Args:
        diagnostics: All diagnostics of the run, in discovery order
        categories: Categories that ran; defaults to all of them
        total_files: Units discovered
        validated_files: Units actually validated
        fixed_issues: Fixes applied after validation
        execution_time_ms: Wall time of the run
        metadata: Extra report metadata
        accessibility_level: Target tier, used to name the contrast criterion
        file_results: Per-unit verdicts, in discovery order

    Returns:
        The Report
    """
    diagnostics = list(diagnostics)
    categories = list(categories) if categories is not None else list(Category)

    by_category: dict[Category, list[Diagnostic]] = {c: [] for c in categories}
    for d in diagnostics:
        by_category.setdefault(d.category, []).append(d)

    errors = [d for d in diagnostics if d.severity == Severity.ERROR]
    warnings = [d for d in diagnostics if d.severity == Severity.WARNING]
    infos = [d for d in diagnostics if d.severity == Severity.INFO]
    fixable = max(0, sum(1 for d in diagnostics if d.fixable) - fixed_issues)

    summary = RunSummary(
        total_files=total_files,
        validated_files=validated_files,
        total_issues=len(diagnostics),
        critical_issues=len(errors),
        fixable_issues=fixable,
        fixed_issues=fixed_issues,
        execution_time_ms=execution_time_ms,
    )

    score = compute_score(by_category)
    score = replace(score, breakdown=score_breakdown(diagnostics))

    return Report(
        success=not errors,
        errors=errors,
        warnings=warnings,
        infos=infos,
        categories=by_category,
        score=score,
        recommendations=build_recommendations(by_category),
        fixable_issues=fixable,
        summary=summary,
        metadata=dict(metadata or {}),
        classification=assess_classification(diagnostics) if Category.CLASSIFICATION in categories else None,
        accessibility=(
            assess_accessibility(diagnostics, accessibility_level)
            if Category.ACCESSIBILITY in categories else None
        ),
        design_system=assess_design_system(diagnostics) if Category.DESIGN_SYSTEM in categories else None,
        file_results=list(file_results or []),
    )
