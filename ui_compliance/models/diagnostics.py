"""Diagnostics produced by validation rules.

A Diagnostic is immutable once a rule has produced it. Fixes are plain
text edits: an exact old-text span and its replacement.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """How serious a diagnostic is."""

    ERROR = "error"  # Fails the run
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return {"error": 0, "warning": 1, "info": 2}[self.value]


class Category(str, Enum):
    """Compliance concern a rule belongs to."""

    STYLE = "style"
    DESIGN_SYSTEM = "design-system"
    CLASSIFICATION = "classification"
    ACCESSIBILITY = "accessibility"

    @property
    def title(self) -> str:
        return {
            "style": "Style Compliance",
            "design-system": "Design System Usage",
            "classification": "Data Classification & Security",
            "accessibility": "Accessibility",
        }[self.value]


@dataclass(frozen=True)
class Location:
    """1-indexed line, 0-indexed column."""

    line: int = 1
    column: int = 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Fix:
    """A textual edit remediating a diagnostic.

    An empty ``old_text`` means "prepend ``new_text`` to the unit".
    """

    description: str
    old_text: str
    new_text: str

    @property
    def is_insertion(self) -> bool:
        return self.old_text == ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "oldText": self.old_text,
            "newText": self.new_text,
        }


@dataclass(frozen=True)
class Diagnostic:
    """A reported rule violation."""

    rule_id: str
    message: str
    severity: Severity
    category: Category
    file: str
    location: Location = Location()
    fix: Fix | None = None

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "ruleId": self.rule_id,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "file": self.file,
            "line": self.location.line,
            "column": self.location.column,
        }
        if self.fix:
            data["fix"] = self.fix.to_dict()
        return data
