"""Data classification and security rules.

Units that mention sensitive data (identity numbers, contact details,
health information, credentials) must carry an NSM classification
marker comment at or above the level the data requires.
"""

from ui_compliance.config import ClassificationLevel
from ui_compliance.models import Category, Diagnostic, Fix, Severity, StructuralFacts
from ui_compliance.validation.patterns import (
    classification_marker,
    find_classification_marker,
    find_insecure_urls,
    find_literal_secrets,
    find_norwegian_text,
    find_sensitive_terms,
    find_unescaped_markup,
    has_i18n_usage,
)
from ui_compliance.validation.rules import Rule, RuleSet, ValidationContext


class ClassificationRequiredRule(Rule):
    id = "classification-required"
    name = "Classification marker"
    category = Category.CLASSIFICATION
    severity = Severity.ERROR
    description = "Units with sensitive data carry a sufficient NSM classification marker"
    fixable = True

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        found = find_sensitive_terms(text)
        if not found:
            return []

        required = max((family.required_level for family, _ in found.values()), key=lambda lvl: lvl.rank)
        families = list(found)
        # Report at the first match of the most sensitive family
        _, first = min(
            (hit for hit in found.values() if hit[0].required_level == required),
            key=lambda hit: hit[1].start,
        )
        severity = Severity.WARNING if required == ClassificationLevel.RESTRICTED else Severity.ERROR
        marker_text = classification_marker(required, families)

        current = find_classification_marker(text)
        if current is None:
            return [self.diagnostic(
                path,
                f"Contains {', '.join(families).lower()} but has no classification marker; "
                f"classify as {required.value} or above",
                line=first.line,
                column=first.column,
                severity=severity,
                fix=Fix(f"Add {required.value} classification marker", "", f"{marker_text}\n"),
            )]

        level, marker = current
        if level.rank >= required.rank:
            return []

        return [self.diagnostic(
            path,
            f"Classified {level.value} but contains {', '.join(families).lower()}; "
            f"classify as {required.value} or above",
            line=marker.line,
            column=marker.column,
            severity=severity,
            fix=Fix(f"Raise classification to {required.value}", marker.text, marker_text),
        )]


class NoHardcodedSecretsRule(Rule):
    id = "security-no-hardcoded-secrets"
    name = "No hardcoded secrets"
    category = Category.CLASSIFICATION
    severity = Severity.ERROR
    description = "Secrets must come from configuration, not source literals"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        return [
            self.diagnostic(
                path,
                f"Hardcoded {match.groups[0]} literal - load it from secure configuration",
                line=match.line,
                column=match.column,
            )
            for match in find_literal_secrets(text)
        ]


class InsecureTransportRule(Rule):
    id = "security-insecure-transport"
    name = "Insecure transport"
    category = Category.CLASSIFICATION
    severity = Severity.WARNING
    description = "Remote URLs must use HTTPS"
    fixable = True

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        return [
            self.diagnostic(
                path,
                f"Insecure URL '{match.text}' - use HTTPS",
                line=match.line,
                column=match.column,
                fix=Fix("Switch to HTTPS", match.text, "https://" + match.text[len("http://"):]),
            )
            for match in find_insecure_urls(text)
        ]


class UnescapedMarkupRule(Rule):
    id = "security-unescaped-markup"
    name = "Unescaped markup"
    category = Category.CLASSIFICATION
    severity = Severity.ERROR
    description = "Raw HTML injection bypasses escaping"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        return [
            self.diagnostic(
                path,
                f"Unescaped markup via '{match.text.rstrip(' =')}' - render sanitized content instead",
                line=match.line,
                column=match.column,
            )
            for match in find_unescaped_markup(text)
        ]


class LocaleSupportRule(Rule):
    id = "locale-i18n-support"
    name = "Locale support"
    category = Category.CLASSIFICATION
    severity = Severity.WARNING
    description = "Norwegian text goes through the i18n layer"

    def validate(self, context: ValidationContext, text: str, path: str, facts: StructuralFacts) -> list[Diagnostic]:
        if not context.config.locale_compliance:
            return []
        hits = find_norwegian_text(text)
        if not hits or has_i18n_usage(text):
            return []
        return [self.diagnostic(
            path,
            "Norwegian text without i18n support - use translation keys (useTranslation / t())",
            line=hits[0].line,
            column=hits[0].column,
        )]


def classification_rules() -> RuleSet:
    return RuleSet(
        "Data-Classification",
        Category.CLASSIFICATION,
        [
            ClassificationRequiredRule(),
            NoHardcodedSecretsRule(),
            InsecureTransportRule(),
            UnescapedMarkupRule(),
            LocaleSupportRule(),
        ],
    )
