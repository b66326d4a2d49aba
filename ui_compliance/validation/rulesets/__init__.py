"""Built-in rule sets."""

from ui_compliance.config import ValidationConfig
from ui_compliance.models import Category
from ui_compliance.validation.rules import RuleSet

from .accessibility import accessibility_rules
from .classification import classification_rules
from .design_system import design_system_rules
from .style import style_rules

_FACTORIES = {
    Category.STYLE: style_rules,
    Category.DESIGN_SYSTEM: design_system_rules,
    Category.CLASSIFICATION: classification_rules,
    Category.ACCESSIBILITY: accessibility_rules,
}


def default_rule_sets(config: ValidationConfig | None = None) -> list[RuleSet]:
    """Fresh rule sets for the categories enabled in ``config``."""
    config = config or ValidationConfig()
    return [_FACTORIES[category]() for category in config.enabled_categories]


__all__ = [
    "accessibility_rules",
    "classification_rules",
    "default_rule_sets",
    "design_system_rules",
    "style_rules",
]
