"""Data models for the UI compliance validator."""

from .assessment import (
    AccessibilityAssessment,
    ClassificationAssessment,
    ComplianceLevel,
    DesignSystemAssessment,
    FileResult,
    NON_COMPLIANT_WCAG,
)
from .diagnostics import (
    Category,
    Diagnostic,
    Fix,
    Location,
    Severity,
)
from .facts import (
    ComponentDecl,
    ExportEdge,
    Fact,
    FactKind,
    ImportEdge,
    MarkupAttribute,
    MarkupElement,
    PropertyField,
    PropertyShape,
    StructuralFacts,
    UnrecognizedNode,
)
from .report import (
    Report,
    RunSummary,
    Score,
    ScoreBreakdown,
)
from .source import (
    SOURCE_SUFFIXES,
    SourceUnit,
    UnitKind,
)

__all__ = [
    # Assessments
    "AccessibilityAssessment",
    "ClassificationAssessment",
    "ComplianceLevel",
    "DesignSystemAssessment",
    "FileResult",
    "NON_COMPLIANT_WCAG",
    # Diagnostics
    "Category",
    "Diagnostic",
    "Fix",
    "Location",
    "Severity",
    # Facts
    "ComponentDecl",
    "ExportEdge",
    "Fact",
    "FactKind",
    "ImportEdge",
    "MarkupAttribute",
    "MarkupElement",
    "PropertyField",
    "PropertyShape",
    "StructuralFacts",
    "UnrecognizedNode",
    # Report
    "Report",
    "RunSummary",
    "Score",
    "ScoreBreakdown",
    # Source
    "SOURCE_SUFFIXES",
    "SourceUnit",
    "UnitKind",
]
