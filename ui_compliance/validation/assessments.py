"""Per-concern assessments: NSM level, WCAG level, design-system usage.

Every function here is a pure projection of diagnostics the rule sets
already produced. Deductions are per diagnostic and floored at 0.
"""

from collections.abc import Iterable

from ui_compliance.config import AccessibilityLevel
from ui_compliance.models import (
    NON_COMPLIANT_WCAG,
    AccessibilityAssessment,
    Category,
    ClassificationAssessment,
    ComplianceLevel,
    DesignSystemAssessment,
    Diagnostic,
    FileResult,
    ScoreBreakdown,
    Severity,
)

# -- NSM classification -----------------------------------------------------

CRITICAL_CLASSIFICATION_RULES = frozenset({
    "classification-required",
    "security-no-hardcoded-secrets",
})


def _counts(diagnostics: list[Diagnostic]) -> tuple[int, int]:
    errors = sum(1 for d in diagnostics if d.severity == Severity.ERROR)
    warnings = sum(1 for d in diagnostics if d.severity == Severity.WARNING)
    return errors, warnings


def _deduct(*penalties: float) -> float:
    return max(0.0, 100.0 - sum(penalties))


def assess_classification(diagnostics: Iterable[Diagnostic]) -> ClassificationAssessment:
    """NSM compliance tier from classification and security diagnostics."""
    relevant = [d for d in diagnostics if d.category == Category.CLASSIFICATION]
    errors, warnings = _counts(relevant)
    score = _deduct(errors * 20, warnings * 5)

    if score >= 95 and errors == 0:
        level = ComplianceLevel.COMPLIANT
    elif score >= 80 and errors <= 1:
        level = ComplianceLevel.MOSTLY_COMPLIANT
    elif score >= 60:
        level = ComplianceLevel.NEEDS_WORK
    else:
        level = ComplianceLevel.NON_COMPLIANT

    critical = tuple(
        d for d in relevant
        if d.severity == Severity.ERROR and d.rule_id in CRITICAL_CLASSIFICATION_RULES
    )
    return ClassificationAssessment(score=score, level=level, critical_issues=critical)


# -- WCAG -------------------------------------------------------------------

CONTRAST_MINIMUM = "1.4.3 Contrast (Minimum)"
CONTRAST_ENHANCED = "1.4.6 Contrast (Enhanced)"

WCAG_CRITERIA = (
    "1.1.1 Non-text Content",
    "1.3.1 Info and Relationships",
    CONTRAST_MINIMUM,
    CONTRAST_ENHANCED,
    "2.1.1 Keyboard",
    "2.1.2 No Keyboard Trap",
    "2.4.3 Focus Order",
    "2.4.7 Focus Visible",
    "4.1.2 Name, Role, Value",
)

CRITERION_BY_RULE = {
    "a11y-image-alt": "1.1.1 Non-text Content",
    "a11y-heading-order": "1.3.1 Info and Relationships",
    "a11y-keyboard-handler": "2.1.1 Keyboard",
    "a11y-focus-visible": "2.4.7 Focus Visible",
    "a11y-accessible-name": "4.1.2 Name, Role, Value",
}

CRITICAL_ACCESSIBILITY_RULES = frozenset({
    "a11y-accessible-name",
    "a11y-keyboard-handler",
    "a11y-color-contrast",
})


def _criterion(rule_id: str, target: AccessibilityLevel) -> str | None:
    if rule_id == "a11y-color-contrast":
        return CONTRAST_ENHANCED if target == AccessibilityLevel.AAA else CONTRAST_MINIMUM
    return CRITERION_BY_RULE.get(rule_id)


def assess_accessibility(
    diagnostics: Iterable[Diagnostic],
    target: AccessibilityLevel = AccessibilityLevel.AAA,
) -> AccessibilityAssessment:
    """The WCAG tier the diagnostics still allow.

    Any accessibility error means no tier is achieved. Otherwise the tier
    follows the score: 95 for AAA, 85 for AA, 70 for A.
    """
    relevant = [d for d in diagnostics if d.category == Category.ACCESSIBILITY]
    errors, warnings = _counts(relevant)
    score = _deduct(errors * 20, warnings * 5)

    if errors:
        level = NON_COMPLIANT_WCAG
    elif score >= 95:
        level = AccessibilityLevel.AAA.value
    elif score >= 85:
        level = AccessibilityLevel.AA.value
    elif score >= 70:
        level = AccessibilityLevel.A.value
    else:
        level = NON_COMPLIANT_WCAG

    failed: list[str] = []
    for d in relevant:
        criterion = _criterion(d.rule_id, target)
        if criterion and criterion not in failed:
            failed.append(criterion)

    return AccessibilityAssessment(
        score=score,
        level=level,
        passed_criteria=tuple(c for c in WCAG_CRITERIA if c not in failed),
        failed_criteria=tuple(sorted(failed, key=WCAG_CRITERIA.index)),
        critical_issues=tuple(
            d for d in relevant
            if d.severity == Severity.ERROR and d.rule_id in CRITICAL_ACCESSIBILITY_RULES
        ),
    )


# -- Design system ----------------------------------------------------------

# Pattern -> rule ids counted under it
DESIGN_SYSTEM_PATTERNS = {
    "properImports": ("design-system-imports", "design-system-import-style"),
    "hardcodedValues": ("design-system-no-hardcoded-values",),
    "componentComposition": ("design-system-deprecated",),
    "themeConsistency": ("design-system-removed-options",),
}


def assess_design_system(diagnostics: Iterable[Diagnostic]) -> DesignSystemAssessment:
    relevant = [d for d in diagnostics if d.category == Category.DESIGN_SYSTEM]
    patterns = {
        name: sum(1 for d in relevant if d.rule_id in rule_ids)
        for name, rule_ids in DESIGN_SYSTEM_PATTERNS.items()
    }

    import_score = _deduct(patterns["properImports"] * 20)
    composition_score = _deduct(patterns["componentComposition"] * 15)
    consistency_score = _deduct(patterns["themeConsistency"] * 10, patterns["hardcodedValues"] * 5)
    overall = round((import_score + composition_score + consistency_score) / 3, 1)

    return DesignSystemAssessment(
        import_score=import_score,
        composition_score=composition_score,
        consistency_score=consistency_score,
        overall_score=overall,
        patterns=patterns,
    )


# -- Breakdown and per-file scores ------------------------------------------

TYPING_RULES = frozenset({
    "style-readonly-props",
    "style-no-untyped-fields",
    "style-explicit-return-type",
})


def score_breakdown(diagnostics: Iterable[Diagnostic]) -> ScoreBreakdown:
    """Sub-scores that cut across categories, by issue count."""
    diagnostics = list(diagnostics)

    def count(predicate) -> int:
        return sum(1 for d in diagnostics if predicate(d))

    return ScoreBreakdown(
        typing=_deduct(count(lambda d: d.rule_id in TYPING_RULES) * 10),
        component_sizing=_deduct(count(lambda d: d.rule_id.endswith("-min-size")) * 20),
        import_usage=_deduct(count(lambda d: "import" in d.rule_id) * 15),
        security=_deduct(count(lambda d: d.category == Category.CLASSIFICATION) * 12),
        wcag=_deduct(count(lambda d: d.category == Category.ACCESSIBILITY) * 15),
    )


def file_score(diagnostics: Iterable[Diagnostic]) -> float:
    """Per-unit score with severity-weighted deductions."""
    deductions = {Severity.ERROR: 10, Severity.WARNING: 5, Severity.INFO: 2}
    return _deduct(*(deductions[d.severity] for d in diagnostics))


def file_result(path: str, diagnostics: Iterable[Diagnostic], compliant: bool) -> FileResult:
    diagnostics = list(diagnostics)
    return FileResult(path=path, compliant=compliant, score=file_score(diagnostics), issues=len(diagnostics))
