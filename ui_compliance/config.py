"""Run configuration for the UI compliance validator.

Values come from explicit options, then ``UI_COMPLIANCE_*`` environment
variables, then the defaults below. Unknown options are ignored and
invalid values fall back to their default; both are logged.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

import structlog
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ui_compliance.models import Category

logger = structlog.get_logger()


class AccessibilityLevel(str, Enum):
    """WCAG conformance tier to validate against."""

    A = "A"
    AA = "AA"
    AAA = "AAA"

    @property
    def rank(self) -> int:
        return {"A": 1, "AA": 2, "AAA": 3}[self.value]


class ClassificationLevel(str, Enum):
    """NSM data classification levels, least to most sensitive."""

    OPEN = "OPEN"
    RESTRICTED = "RESTRICTED"
    CONFIDENTIAL = "CONFIDENTIAL"
    SECRET = "SECRET"

    @property
    def rank(self) -> int:
        return list(ClassificationLevel).index(self)


DEFAULT_DESIGN_SYSTEM_PACKAGE = "@xaheen-ai/design-system"


class ValidationConfig(BaseSettings):
    """Per-run validation settings."""

    model_config = SettingsConfigDict(
        env_prefix="UI_COMPLIANCE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Minimum height utility (h-N) for buttons and form fields
    button_min_height: int = Field(default=12, ge=1)
    input_min_height: int = Field(default=14, ge=1)

    strict_typing: bool = True
    accessibility_level: AccessibilityLevel = AccessibilityLevel.AAA
    locale_compliance: bool = True
    design_system_package: str = DEFAULT_DESIGN_SYSTEM_PACKAGE

    # Rule set toggles
    style: bool = True
    design_system: bool = True
    classification: bool = True
    accessibility: bool = True

    auto_fix: bool = False
    max_workers: int = Field(default=8, ge=1)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "ValidationConfig":
        """Build a config from a loose option mapping.

        Keys may use snake_case or camelCase. Unknown keys are dropped and
        values that fail validation are replaced by the field default.
        """
        options = options or {}
        known = cls.model_fields
        accepted: dict[str, Any] = {}

        for raw_key, value in options.items():
            key = _snake_case(raw_key)
            if key not in known:
                logger.info("Ignoring unknown option", option=raw_key)
                continue

            field_info = known[key]
            try:
                cls.model_validate({key: value})
            except ValidationError as e:
                logger.warning(
                    "Invalid option value, using default",
                    option=raw_key,
                    value=value,
                    default=field_info.default,
                    error=e.errors()[0]["msg"],
                )
                continue

            accepted[key] = value

        return cls(**accepted)

    def category_enabled(self, category: Category) -> bool:
        return {
            Category.STYLE: self.style,
            Category.DESIGN_SYSTEM: self.design_system,
            Category.CLASSIFICATION: self.classification,
            Category.ACCESSIBILITY: self.accessibility,
        }[category]

    @property
    def enabled_categories(self) -> list[Category]:
        return [c for c in Category if self.category_enabled(c)]


def _snake_case(name: str) -> str:
    out = []
    for ch in name.replace("-", "_"):
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out).lstrip("_")
