"""Validation pipeline for UI component sources.

- Fact Extractor: tree-sitter based structural facts
- Rules and Rule Sets: pluggable, crash-isolated checks
- Unit Validator: extraction plus rule sets for one unit
- Scoring: diagnostic aggregation and category scores
- Autofix Applier: line-anchored text fixes
- Report Renderer: console, JSON, HTML, Markdown and SARIF output
- Validation Runner: orchestrates a project run
"""

from .discovery import (
    DiscoveryError,
    FileSystemStore,
    SourceDiscovery,
    SourceStore,
)
from .extractor import FactExtractor
from .fixer import (
    AutofixApplier,
    FixOutcome,
    apply_to_text,
)
from .rules import (
    Rule,
    RuleSet,
    ValidationContext,
)
from .rulesets import default_rule_sets
from .detector import (
    UnitResult,
    UnitValidator,
)
from .scoring import aggregate
from .reporter import (
    ReportFormat,
    ReportRenderer,
)
from .runner import ValidationRunner

__all__ = [
    # Discovery
    "DiscoveryError",
    "FileSystemStore",
    "SourceDiscovery",
    "SourceStore",
    # Extractor
    "FactExtractor",
    # Fixer
    "AutofixApplier",
    "FixOutcome",
    "apply_to_text",
    # Rules
    "Rule",
    "RuleSet",
    "ValidationContext",
    "default_rule_sets",
    # Detector
    "UnitResult",
    "UnitValidator",
    # Scoring
    "aggregate",
    # Reporter
    "ReportFormat",
    "ReportRenderer",
    # Runner
    "ValidationRunner",
]
