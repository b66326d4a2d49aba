"""Tests for run configuration."""

import pytest
from pydantic import ValidationError

from ui_compliance.config import (
    AccessibilityLevel,
    ClassificationLevel,
    ValidationConfig,
)
from ui_compliance.models import Category


class TestDefaults:
    def test_documented_defaults(self, config: ValidationConfig):
        assert config.button_min_height == 12
        assert config.input_min_height == 14
        assert config.strict_typing
        assert config.accessibility_level == AccessibilityLevel.AAA
        assert config.design_system_package == "@xaheen-ai/design-system"
        assert not config.auto_fix
        assert config.max_workers == 8
        assert config.enabled_categories == list(Category)

    def test_frozen(self, config: ValidationConfig):
        with pytest.raises(ValidationError):
            config.auto_fix = True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("UI_COMPLIANCE_ACCESSIBILITY_LEVEL", "AA")
        monkeypatch.setenv("UI_COMPLIANCE_STYLE", "false")

        config = ValidationConfig()

        assert config.accessibility_level == AccessibilityLevel.AA
        assert Category.STYLE not in config.enabled_categories


class TestFromOptions:
    def test_camel_case_keys(self):
        config = ValidationConfig.from_options({"autoFix": True, "buttonMinHeight": 10})

        assert config.auto_fix
        assert config.button_min_height == 10

    def test_unknown_keys_are_ignored(self):
        config = ValidationConfig.from_options({"theme": "dark", "strict_typing": False})
        assert not config.strict_typing

    def test_invalid_values_fall_back_to_default(self):
        config = ValidationConfig.from_options({
            "accessibility_level": "AAAA",
            "max_workers": 0,
            "input_min_height": 16,
        })

        assert config.accessibility_level == AccessibilityLevel.AAA
        assert config.max_workers == 8
        assert config.input_min_height == 16

    def test_empty(self):
        assert ValidationConfig.from_options(None) == ValidationConfig()


class TestLevels:
    def test_classification_order(self):
        ranks = [level.rank for level in ClassificationLevel]
        assert ranks == sorted(ranks)
        assert ClassificationLevel.SECRET.rank > ClassificationLevel.CONFIDENTIAL.rank

    def test_accessibility_order(self):
        assert AccessibilityLevel.A.rank < AccessibilityLevel.AA.rank < AccessibilityLevel.AAA.rank
