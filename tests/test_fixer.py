"""Tests for autofix application."""

from ui_compliance.models import Category, Diagnostic, Fix, Location, Severity, SourceUnit
from ui_compliance.validation.extractor import FactExtractor
from ui_compliance.validation.fixer import AutofixApplier, apply_to_text
from ui_compliance.validation.rulesets.accessibility import ColorContrastRule, ImageAltRule
from ui_compliance.validation.rulesets.style import ReadonlyPropsRule, style_rules
from ui_compliance.validation.rules import ValidationContext


class MemoryStore:
    """In-memory SourceStore that records writes."""

    def __init__(self, files: dict[str, str] | None = None, fail_on: set[str] | None = None):
        self.files = dict(files or {})
        self.fail_on = fail_on or set()
        self.writes: list[str] = []

    def read(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def write(self, path: str, text: str) -> None:
        if path in self.fail_on:
            raise PermissionError(path)
        self.writes.append(path)
        self.files[path] = text


def fixable(old: str, new: str, line: int = 1, column: int = 0, file: str = "A.tsx") -> Diagnostic:
    return Diagnostic(
        rule_id="test-fix",
        message="fix me",
        severity=Severity.ERROR,
        category=Category.STYLE,
        file=file,
        location=Location(line=line, column=column),
        fix=Fix("test", old, new),
    )


class TestApplyToText:
    """Text-level fix application."""

    def test_search_starts_at_diagnostic_line(self):
        text = "a = 1\na = 1\n"
        outcome = apply_to_text(text, [fixable("a = 1", "b = 2", line=2)])

        assert outcome.text == "a = 1\nb = 2\n"
        assert outcome.changed

    def test_search_starts_at_diagnostic_column(self):
        text = "type P = { sublabel: string; label: string };\n"
        outcome = apply_to_text(text, [fixable("label: string", "readonly label: string", column=29)])

        assert outcome.text == "type P = { sublabel: string; readonly label: string };\n"

    def test_prefix_of_an_earlier_match_on_the_line(self):
        text = 'const a = "http://a.example/x"; const b = "http://a.example";\n'
        diagnostics = [
            fixable("http://a.example/x", "https://a.example/x", column=11),
            fixable("http://a.example", "https://a.example", column=43),
        ]

        outcome = apply_to_text(text, diagnostics)

        assert outcome.text == 'const a = "https://a.example/x"; const b = "https://a.example";\n'
        assert outcome.skipped == []

    def test_text_on_a_later_line_is_not_matched(self):
        outcome = apply_to_text("a = 1\nb = 2\n", [fixable("b = 2", "b = 3", line=1)])

        assert outcome.text == "a = 1\nb = 2\n"
        assert len(outcome.skipped) == 1

    def test_bottom_up_edits_keep_offsets(self):
        text = "<Button className=\"h-8\">\n<Input className=\"h-8\">\n"
        diagnostics = [
            fixable('className="h-8"', 'className="h-12"', line=1),
            fixable('className="h-8"', 'className="h-14"', line=2),
        ]

        outcome = apply_to_text(text, diagnostics)

        assert outcome.text == "<Button className=\"h-12\">\n<Input className=\"h-14\">\n"
        assert len(outcome.applied) == 2

    def test_insertions_apply_after_in_place_edits(self):
        text = "x = 1\ny = 2\n"
        diagnostics = [
            fixable("", "// header\n", line=2),
            fixable("y = 2", "y = 3", line=2),
        ]

        outcome = apply_to_text(text, diagnostics)
        assert outcome.text == "// header\nx = 1\ny = 3\n"

    def test_missing_text_is_skipped(self):
        text = "x = 1\n"
        diagnostics = [fixable("nope", "yes"), fixable("x = 1", "x = 2")]

        outcome = apply_to_text(text, diagnostics)

        assert outcome.text == "x = 2\n"
        assert [d.fix.old_text for d in outcome.skipped] == ["nope"]

    def test_diagnostics_without_fix_are_ignored(self):
        plain = Diagnostic(
            rule_id="test", message="m", severity=Severity.INFO, category=Category.STYLE, file="A.tsx",
        )
        outcome = apply_to_text("x\n", [plain])

        assert outcome.text == "x\n"
        assert not outcome.changed
        assert outcome.skipped == []


class TestAutofixApplier:
    """Writing fixed units back through a store."""

    def test_writes_each_file_once(self):
        store = MemoryStore({"A.tsx": "a\nb\n", "B.tsx": "c\n"})
        units = [SourceUnit.from_text(text, path) for path, text in store.files.items()]
        diagnostics = [
            fixable("a", "A", line=1, file="A.tsx"),
            fixable("b", "B", line=2, file="A.tsx"),
            fixable("c", "C", line=1, file="B.tsx"),
        ]

        applied = AutofixApplier(store).apply(units, diagnostics)

        assert applied == 3
        assert store.writes == ["A.tsx", "B.tsx"]
        assert store.files == {"A.tsx": "A\nB\n", "B.tsx": "C\n"}

    def test_unchanged_file_is_not_written(self):
        store = MemoryStore({"A.tsx": "a\n"})
        units = [SourceUnit.from_text("a\n", "A.tsx")]

        applied = AutofixApplier(store).apply(units, [fixable("zzz", "y")])

        assert applied == 0
        assert store.writes == []

    def test_write_failure_is_not_counted(self):
        store = MemoryStore({"A.tsx": "a\n", "B.tsx": "b\n"}, fail_on={"A.tsx"})
        units = [SourceUnit.from_text(text, path) for path, text in store.files.items()]
        diagnostics = [fixable("a", "A", file="A.tsx"), fixable("b", "B", file="B.tsx")]

        applied = AutofixApplier(store).apply(units, diagnostics)

        assert applied == 1
        assert store.files["A.tsx"] == "a\n"
        assert store.files["B.tsx"] == "B\n"

    def test_fixes_for_unknown_units_are_dropped(self):
        store = MemoryStore()
        applied = AutofixApplier(store).apply([], [fixable("a", "b", file="Gone.tsx")])

        assert applied == 0
        assert store.writes == []


class TestRuleAutofix:
    """Rule.autofix only applies the rule's own fixes."""

    def test_applies_own_fixes(self, extractor: FactExtractor, context: ValidationContext):
        code = 'const P = (): JSX.Element => <img className="text-gray-300" src="/a.png" />;\n'
        facts = extractor.extract(code, "P.tsx")
        image_rule = ImageAltRule()
        diagnostics = image_rule.validate(context, code, "P.tsx", facts)
        diagnostics += ColorContrastRule().validate(context, code, "P.tsx", facts)

        fixed = image_rule.autofix(code, diagnostics)

        assert 'alt="Description of image"' in fixed
        assert "text-gray-300" in fixed


class TestRuleFixesTogether:
    """Fixes from several rules on one line all land where they were found."""

    def test_readonly_fixes_on_a_single_line(self, extractor: FactExtractor, context: ValidationContext):
        code = "type CardProps = { readonly id: string; sublabel: string; label: string };\n"
        facts = extractor.extract(code, "card.ts")
        diagnostics = ReadonlyPropsRule().validate(context, code, "card.ts", facts)

        outcome = apply_to_text(code, diagnostics)

        assert len(diagnostics) == 2
        assert outcome.skipped == []
        assert outcome.text == (
            "type CardProps = { readonly id: string; readonly sublabel: string; readonly label: string };\n"
        )

    def test_size_and_contrast_in_one_class_attribute(self, extractor: FactExtractor, context: ValidationContext):
        code = 'const P = (): JSX.Element => <Button className="h-8 text-gray-300">Go</Button>;\n'
        facts = extractor.extract(code, "P.tsx")
        diagnostics = style_rules().validate(context, code, "P.tsx", facts)
        diagnostics += ColorContrastRule().validate(context, code, "P.tsx", facts)

        outcome = apply_to_text(code, diagnostics)

        assert [d.rule_id for d in outcome.applied] == ["a11y-color-contrast", "style-button-min-size"]
        assert outcome.skipped == []
        assert 'className="h-12 text-gray-600"' in outcome.text
