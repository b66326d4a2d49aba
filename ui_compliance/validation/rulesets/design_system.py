"""Design-system usage rules."""

from ui_compliance.models import Category, Diagnostic, Fix, Severity, StructuralFacts
from ui_compliance.validation.patterns import (
    find_hardcoded_colors,
    find_hardcoded_spacing,
    find_removed_options,
)
from ui_compliance.validation.rules import Rule, RuleSet, ValidationContext

DESIGN_SYSTEM_COMPONENTS = frozenset({
    "Alert", "Avatar", "Badge", "Button", "Card", "Checkbox", "Container",
    "Dialog", "Form", "Grid", "IconButton", "Input", "Layout", "Modal",
    "Popover", "Progress", "Radio", "Select", "Skeleton", "Spinner", "Stack",
    "Switch", "TextArea", "Tooltip", "Typography",
})

# Deprecated name -> replacement
DEPRECATED_COMPONENTS = {
    "OldButton": "Button",
    "LegacyInput": "Input",
}


class DesignSystemImportsRule(Rule):
    id = "design-system-imports"
    name = "Design system imports"
    category = Category.DESIGN_SYSTEM
    severity = Severity.ERROR
    description = "Design-system components must be imported from the design-system package"
    fixable = True

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        available = facts.imported_names() | facts.declared_names()
        missing: list[str] = []
        first_line = None

        for element in facts.elements:
            if element.tag in DESIGN_SYSTEM_COMPONENTS and element.tag not in available:
                if element.tag not in missing:
                    missing.append(element.tag)
                if first_line is None:
                    first_line = element.line

        if not missing:
            return []

        package = context.config.design_system_package
        names = ", ".join(sorted(missing))
        return [self.diagnostic(
            path,
            f"Design system component(s) {names} used without import from '{package}'",
            line=first_line,
            fix=Fix("Add design system import", "", f"import {{ {names} }} from '{package}';\n"),
        )]


class NoHardcodedValuesRule(Rule):
    id = "design-system-no-hardcoded-values"
    name = "No hardcoded values"
    category = Category.DESIGN_SYSTEM
    severity = Severity.WARNING
    description = "Use design tokens instead of literal colours and pixel spacing"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        diagnostics = []
        for match, kind in find_hardcoded_colors(text):
            diagnostics.append(self.diagnostic(
                path,
                f"Hardcoded {kind} '{match.text}' - use a design token",
                line=match.line,
                column=match.column,
            ))
        for match in find_hardcoded_spacing(text):
            diagnostics.append(self.diagnostic(
                path,
                f"Hardcoded spacing '{match.text}' - use a spacing token",
                line=match.line,
                column=match.column,
            ))
        return diagnostics


class DeprecatedComponentsRule(Rule):
    id = "design-system-deprecated"
    name = "Deprecated components"
    category = Category.DESIGN_SYSTEM
    severity = Severity.WARNING
    description = "Deprecated design-system components should be replaced"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        diagnostics = []
        for edge in facts.imports:
            for name in edge.bound_names:
                if name in DEPRECATED_COMPONENTS:
                    diagnostics.append(self.diagnostic(
                        path,
                        f"Deprecated component '{name}' imported - use {DEPRECATED_COMPONENTS[name]}",
                        line=edge.line,
                    ))
        for element in facts.elements:
            if element.tag in DEPRECATED_COMPONENTS:
                diagnostics.append(self.diagnostic(
                    path,
                    f"Deprecated component <{element.tag}> - use {DEPRECATED_COMPONENTS[element.tag]}",
                    line=element.line,
                    column=element.column,
                ))
        return diagnostics


class RemovedOptionsRule(Rule):
    id = "design-system-removed-options"
    name = "Removed options"
    category = Category.DESIGN_SYSTEM
    severity = Severity.ERROR
    description = "Component options removed from the design system"
    fixable = True

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        return [
            self.diagnostic(
                path,
                f"Removed option {match.text}: {message}",
                line=match.line,
                column=match.column,
                fix=Fix(f"Replace with {replacement}", match.text, replacement),
            )
            for match, replacement, message in find_removed_options(text)
        ]


class ImportStyleRule(Rule):
    id = "design-system-import-style"
    name = "Import style"
    category = Category.DESIGN_SYSTEM
    severity = Severity.INFO
    description = "Import design-system components by name from the package entry point"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        package = context.config.design_system_package
        diagnostics = []
        for edge in facts.imports:
            if edge.source == package and edge.namespace:
                diagnostics.append(self.diagnostic(
                    path,
                    f"Namespace import '* as {edge.namespace}' from '{package}' - prefer named imports",
                    line=edge.line,
                ))
            elif edge.source.startswith(f"{package}/dist"):
                diagnostics.append(self.diagnostic(
                    path,
                    f"Deep import from '{edge.source}' - import from '{package}' instead",
                    line=edge.line,
                ))
        return diagnostics


def design_system_rules() -> RuleSet:
    return RuleSet(
        "Design-System-Usage",
        Category.DESIGN_SYSTEM,
        [
            DesignSystemImportsRule(),
            NoHardcodedValuesRule(),
            DeprecatedComponentsRule(),
            RemovedOptionsRule(),
            ImportStyleRule(),
        ],
    )
