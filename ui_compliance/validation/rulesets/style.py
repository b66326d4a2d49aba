"""Style compliance rules: touch-target sizes, immutable props, typing."""

import re

from ui_compliance.models import (
    Category,
    Diagnostic,
    Fix,
    MarkupAttribute,
    Severity,
    StructuralFacts,
    UnitKind,
)
from ui_compliance.validation.patterns import height_utility
from ui_compliance.validation.rules import Rule, RuleSet, ValidationContext

BUTTON_TAGS = frozenset({"button", "Button", "IconButton"})
FIELD_TAGS = frozenset({"input", "select", "textarea", "Input", "Select", "TextArea"})

_TOKEN_BOUNDARY = r"(?<![\w:-]){}(?![\w-])"


def _token_position(attr: MarkupAttribute, token: str) -> tuple[int, int]:
    """Line and column of a class token inside its attribute."""
    m = re.search(_TOKEN_BOUNDARY.format(re.escape(token)), attr.raw_text)
    if m is None:
        return attr.line, attr.column
    offset = m.start()
    newlines = attr.raw_text.count("\n", 0, offset)
    if newlines:
        return attr.line + newlines, offset - (attr.raw_text.rfind("\n", 0, offset) + 1)
    return attr.line, attr.column + offset


class MinimumSizeRule(Rule):
    """Interactive elements must meet a minimum height utility."""

    category = Category.STYLE
    severity = Severity.ERROR
    fixable = True

    def __init__(self, rule_id: str, name: str, tags: frozenset[str], setting: str, noun: str):
        self.id = rule_id
        self.name = name
        self.tags = tags
        self.setting = setting
        self.noun = noun
        self.description = f"{noun.capitalize()}s must be at least the configured minimum height"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        minimum = getattr(context.config, self.setting)
        diagnostics = []

        for element in facts.elements:
            if element.tag not in self.tags:
                continue
            attr = element.class_attribute
            for token in element.class_tokens:
                height = height_utility(token)
                if height is None or height >= minimum:
                    continue
                line, column = _token_position(attr, token)
                diagnostics.append(self.diagnostic(
                    path,
                    f"{self.noun.capitalize()} <{element.tag}> height {token} is below the minimum h-{minimum}",
                    line=line,
                    column=column,
                    fix=Fix(f"Raise height to h-{minimum}", token, f"h-{minimum}"),
                ))
                break

        return diagnostics


class ReadonlyPropsRule(Rule):
    id = "style-readonly-props"
    name = "Readonly props"
    category = Category.STYLE
    severity = Severity.ERROR
    description = "Fields of *Props shapes must be readonly"
    fixable = True

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        diagnostics = []
        for shape in facts.property_shapes:
            if not shape.is_props:
                continue
            for field in shape.mutable_fields:
                diagnostics.append(self.diagnostic(
                    path,
                    f"Property '{field.name}' of {shape.name} should be readonly",
                    line=field.line,
                    column=field.column,
                    fix=Fix("Mark property readonly", field.raw_text, f"readonly {field.raw_text}"),
                ))
        return diagnostics


class NoUntypedFieldsRule(Rule):
    id = "style-no-untyped-fields"
    name = "No untyped fields"
    category = Category.STYLE
    description = "Property shape fields need a concrete type"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        diagnostics = []
        for shape in facts.property_shapes:
            for field in shape.fields:
                if not field.untyped:
                    continue
                problem = "is typed 'any'" if field.type_text else "has no type annotation"
                diagnostics.append(self.diagnostic(
                    path,
                    f"Property '{field.name}' of {shape.name} {problem}",
                    line=field.line,
                    severity=context.strictness(),
                ))
        return diagnostics


class ExplicitReturnTypeRule(Rule):
    id = "style-explicit-return-type"
    name = "Explicit return type"
    category = Category.STYLE
    description = "Components rendering markup declare their return type"
    fixable = True

    RETURN_TYPE = "JSX.Element"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        if not UnitKind.from_path(path).typed:
            return []

        diagnostics = []
        for component in facts.components:
            if not component.renders_markup or component.has_result_type:
                continue
            diagnostics.append(self.diagnostic(
                path,
                f"Component '{component.name}' should declare an explicit return type ({self.RETURN_TYPE})",
                line=component.signature_line or component.line,
                column=component.signature_column,
                fix=self._fix(component.signature),
                severity=context.strictness(),
            ))
        return diagnostics

    def _fix(self, signature: str | None) -> Fix | None:
        if not signature:
            return None
        if signature.endswith("=>"):
            params = signature[:-2].rstrip()
            if not params.startswith("("):
                params = f"({params})"
            return Fix("Add return type", signature, f"{params}: {self.RETURN_TYPE} =>")
        return Fix("Add return type", signature, f"{signature}: {self.RETURN_TYPE}")


def style_rules() -> RuleSet:
    return RuleSet(
        "Style-Compliance",
        Category.STYLE,
        [
            MinimumSizeRule(
                "style-button-min-size", "Button minimum size", BUTTON_TAGS, "button_min_height", "button",
            ),
            MinimumSizeRule(
                "style-input-min-size", "Input minimum size", FIELD_TAGS, "input_min_height", "form field",
            ),
            ReadonlyPropsRule(),
            NoUntypedFieldsRule(),
            ExplicitReturnTypeRule(),
        ],
    )
