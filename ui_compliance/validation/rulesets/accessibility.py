"""Accessibility rules (WCAG).

The colour-contrast rule scales with the configured conformance tier;
the other rules apply at every tier.
"""

import re

from ui_compliance.config import AccessibilityLevel
from ui_compliance.models import Category, Diagnostic, Fix, Severity, StructuralFacts
from ui_compliance.validation.extractor import INTERACTIVE_TAGS
from ui_compliance.validation.patterns import (
    find_low_contrast_tokens,
    find_outline_suppression,
    higher_contrast,
    is_focus_replacement,
    low_contrast_tokens,
)
from ui_compliance.validation.rules import Rule, RuleSet, ValidationContext

_HEADING = re.compile(r"^h([1-6])$")

DEFAULT_ALT_TEXT = "Description of image"


class AccessibleNameRule(Rule):
    id = "a11y-accessible-name"
    name = "Accessible name"
    category = Category.ACCESSIBILITY
    severity = Severity.ERROR
    description = "Interactive elements need an accessible name"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        diagnostics = []
        for element in facts.elements:
            if not element.interactive or element.has_accessible_name:
                continue
            input_type = element.attribute("type")
            if element.tag == "input" and input_type is not None and input_type.value == "hidden":
                continue
            diagnostics.append(self.diagnostic(
                path,
                f"Interactive element <{element.tag}> has no accessible name "
                "(add text content, aria-label or a linked <label>)",
                line=element.line,
                column=element.column,
            ))
        return diagnostics


class KeyboardHandlerRule(Rule):
    id = "a11y-keyboard-handler"
    name = "Keyboard handler"
    category = Category.ACCESSIBILITY
    severity = Severity.WARNING
    description = "Click handlers on non-native elements need a keyboard equivalent"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        return [
            self.diagnostic(
                path,
                f"<{element.tag}> handles clicks but not the keyboard - add onKeyDown",
                line=element.line,
                column=element.column,
            )
            for element in facts.elements
            if element.has_click_handler
            and not element.has_keyboard_handler
            and element.tag not in INTERACTIVE_TAGS
        ]


class HeadingOrderRule(Rule):
    id = "a11y-heading-order"
    name = "Heading order"
    category = Category.ACCESSIBILITY
    severity = Severity.WARNING
    description = "Heading levels must not skip"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        diagnostics = []
        previous = None
        for element in facts.elements:
            m = _HEADING.match(element.tag)
            if not m:
                continue
            level = int(m.group(1))
            if previous is not None and level > previous + 1:
                diagnostics.append(self.diagnostic(
                    path,
                    f"Heading <{element.tag}> skips from h{previous} - use h{previous + 1}",
                    line=element.line,
                    column=element.column,
                ))
            previous = level
        return diagnostics


class ImageAltRule(Rule):
    id = "a11y-image-alt"
    name = "Image alt text"
    category = Category.ACCESSIBILITY
    severity = Severity.ERROR
    description = "Images need alternative text"
    fixable = True

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        diagnostics = []
        for element in facts.elements_with_tag("img"):
            if element.has_attribute("alt"):
                continue
            fixed = element.opening_text.replace("<img", f'<img alt="{DEFAULT_ALT_TEXT}"', 1)
            diagnostics.append(self.diagnostic(
                path,
                "Image is missing alt text",
                line=element.line,
                column=element.column,
                fix=Fix("Add alt attribute", element.opening_text, fixed),
            ))
        return diagnostics


class FocusVisibleRule(Rule):
    id = "a11y-focus-visible"
    name = "Visible focus"
    category = Category.ACCESSIBILITY
    severity = Severity.ERROR
    description = "Focus indicators must not be removed without a replacement"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        diagnostics = [
            self.diagnostic(
                path,
                f"Focus outline suppressed by '{match.text}'",
                line=match.line,
                column=match.column,
            )
            for match in find_outline_suppression(text)
        ]
        for element in facts.elements:
            tokens = element.class_tokens
            if "outline-none" in tokens and not any(is_focus_replacement(t) for t in tokens):
                diagnostics.append(self.diagnostic(
                    path,
                    f"<{element.tag}> removes its outline without a focus: or focus-visible: style",
                    line=element.line,
                    column=element.column,
                ))
        return diagnostics


class ColorContrastRule(Rule):
    id = "a11y-color-contrast"
    name = "Colour contrast"
    category = Category.ACCESSIBILITY
    severity = Severity.WARNING
    description = "Text colours must meet the configured contrast tier"
    fixable = True

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        level = context.config.accessibility_level
        if level == AccessibilityLevel.A:
            return []

        tokens = low_contrast_tokens(aa_only=level == AccessibilityLevel.AA)
        return [
            self.diagnostic(
                path,
                f"'{match.text}' may not meet WCAG {level.value} contrast - use {higher_contrast(match.text)}",
                line=match.line,
                column=match.column,
                fix=Fix("Use a darker shade", match.text, higher_contrast(match.text)),
            )
            for match in find_low_contrast_tokens(text, tokens)
        ]


def accessibility_rules() -> RuleSet:
    return RuleSet(
        "Accessibility",
        Category.ACCESSIBILITY,
        [
            AccessibleNameRule(),
            KeyboardHandlerRule(),
            HeadingOrderRule(),
            ImageAltRule(),
            FocusVisibleRule(),
            ColorContrastRule(),
        ],
    )
