"""End-to-end tests for the validation runner."""

from pathlib import Path

import pytest

from ui_compliance.config import ValidationConfig
from ui_compliance.models import Category, Severity
from ui_compliance.validation.detector import PARSE_FAILURE, READ_FAILURE
from ui_compliance.validation.runner import DISCOVERY_FAILURE, ValidationRunner


def rule_ids(report) -> list[str]:
    return [d.rule_id for d in report.diagnostics]


class TestValidateText:
    """Single-unit validation through the runner."""

    def test_clean_component_passes(self, runner: ValidationRunner, clean_component: str):
        report = runner.validate_text(clean_component, "ProductCard.tsx")

        assert report.success
        assert report.total_issues == 0
        assert report.score.overall == 100.0
        assert report.recommendations == []

    def test_undersized_button(self, runner: ValidationRunner, undersized_button_component: str):
        report = runner.validate_text(undersized_button_component, "ActionBar.tsx")

        assert not report.success
        assert rule_ids(report) == ["style-button-min-size", "style-readonly-props"]
        assert report.score.for_category(Category.STYLE) == 84.0
        assert report.fixable_issues == 2

    def test_unmarked_sensitive_data(self, runner: ValidationRunner, unmarked_sensitive_component: str):
        report = runner.validate_text(unmarked_sensitive_component, "PasswordHint.tsx")

        assert not report.success
        assert rule_ids(report) == ["classification-required"]
        assert "CONFIDENTIAL" in report.errors[0].message
        assert report.recommendations[0].startswith("Data Classification & Security")
        assert report.classification.level.value == "mostly-compliant"
        assert report.classification.critical_issues == (report.errors[0],)

    def test_click_without_keyboard_is_a_warning(self, runner: ValidationRunner, click_only_component: str):
        report = runner.validate_text(click_only_component, "Disclosure.tsx")

        assert report.success
        assert report.errors == []
        assert [d.rule_id for d in report.warnings] == ["a11y-keyboard-handler"]

    def test_fixable_component(self, runner: ValidationRunner, fixable_component: str):
        report = runner.validate_text(fixable_component, "Banner.tsx")

        assert report.fixable_issues == 8
        assert all(d.fixable for d in report.diagnostics)

    def test_parse_failure_still_runs_text_rules(self, runner: ValidationRunner, malformed_component: str):
        report = runner.validate_text(malformed_component, "Broken.tsx")

        assert rule_ids(report) == [PARSE_FAILURE, "a11y-color-contrast"]
        assert report.errors[0].line == 3

    def test_disabled_categories_are_not_reported(self, runner: ValidationRunner, undersized_button_component: str):
        config = ValidationConfig(style=False)
        report = runner.validate_text(undersized_button_component, "ActionBar.tsx", config)

        assert report.success
        assert Category.STYLE not in report.categories


class TestValidateProject:
    """Project runs through the validation graph."""

    @pytest.mark.asyncio
    async def test_sample_project(self, runner: ValidationRunner, sample_project: Path):
        report = await runner.validate_project(sample_project)

        assert report.summary.total_files == 3
        assert report.summary.validated_files == 2
        assert not report.success
        assert rule_ids(report) == ["style-button-min-size", "style-readonly-props"]
        assert report.files() == [str(sample_project / "src" / "components" / "ActionBar.tsx")]

    @pytest.mark.asyncio
    async def test_file_results(self, runner: ValidationRunner, sample_project: Path):
        report = await runner.validate_project(sample_project)

        components = sample_project / "src" / "components"
        verdicts = {r.path: (r.compliant, r.score, r.issues) for r in report.file_results}
        assert verdicts == {
            str(components / "ActionBar.tsx"): (False, 80.0, 2),
            str(components / "ProductCard.tsx"): (True, 100.0, 0),
        }

    @pytest.mark.asyncio
    async def test_metadata(self, runner: ValidationRunner, sample_project: Path):
        report = await runner.validate_project(sample_project, ValidationConfig(design_system=False))

        assert report.metadata["root"] == str(sample_project)
        assert report.metadata["ruleSets"] == ["Style-Compliance", "Data-Classification", "Accessibility"]
        assert report.metadata["accessibilityLevel"] == "AAA"
        assert report.metadata["autoFix"] is False
        assert report.summary.execution_time_ms > 0

    @pytest.mark.asyncio
    async def test_runs_are_deterministic(self, sample_project: Path):
        first = await ValidationRunner().validate_project(sample_project, ValidationConfig(max_workers=1))
        second = await ValidationRunner().validate_project(sample_project, ValidationConfig(max_workers=4))

        assert [d.to_dict() for d in first.diagnostics] == [d.to_dict() for d in second.diagnostics]
        assert first.score == second.score

    @pytest.mark.asyncio
    async def test_missing_root(self, runner: ValidationRunner, tmp_path: Path):
        report = await runner.validate_project(tmp_path / "missing")

        assert not report.success
        assert rule_ids(report) == [DISCOVERY_FAILURE]
        assert report.summary.total_files == 0
        assert report.score.overall == 0.0
        assert report.recommendations == ["Fix the project root and retry validation."]

    @pytest.mark.asyncio
    async def test_blank_root(self, runner: ValidationRunner):
        report = await runner.validate_project("")

        assert not report.success
        assert rule_ids(report) == [DISCOVERY_FAILURE]
        assert report.summary.total_files == 0

    @pytest.mark.asyncio
    async def test_empty_root(self, runner: ValidationRunner, tmp_path: Path):
        report = await runner.validate_project(tmp_path)

        assert report.success
        assert report.summary.total_files == 0
        assert report.score.overall == 100.0

    @pytest.mark.asyncio
    async def test_unreadable_unit(self, runner: ValidationRunner, tmp_path: Path, clean_component: str):
        (tmp_path / "Good.tsx").write_text(clean_component)
        (tmp_path / "Latin1.tsx").write_bytes(b"const s = '\xe6\xf8\xe5';\n")

        report = await runner.validate_project(tmp_path)

        assert report.summary.total_files == 2
        assert report.summary.validated_files == 1
        assert rule_ids(report) == [READ_FAILURE]
        assert report.errors[0].severity == Severity.ERROR

    def test_sync_wrapper(self, runner: ValidationRunner, sample_project: Path):
        report = runner.validate_project_sync(sample_project)
        assert report.summary.validated_files == 2


class TestAutoFix:
    """The fix branch of the graph."""

    @pytest.mark.asyncio
    async def test_fixes_are_written_and_revalidate_clean(
        self, runner: ValidationRunner, tmp_path: Path, fixable_component: str
    ):
        unit = tmp_path / "Banner.tsx"
        unit.write_text(fixable_component)

        fixed = await runner.validate_project(tmp_path, ValidationConfig(auto_fix=True))

        assert fixed.summary.fixed_issues == 8
        assert fixed.fixable_issues == 0
        assert fixed.metadata["autoFix"] is True

        text = unit.read_text()
        assert text.startswith("import { Button } from '@xaheen-ai/design-system';\n")
        assert "readonly title: string;" in text
        assert "({ title }: BannerProps): JSX.Element =>" in text
        assert '<img alt="Description of image"' in text
        assert "https://example.com/docs" in text

        again = await runner.validate_project(tmp_path)
        assert again.success
        assert again.total_issues == 0

    @pytest.mark.asyncio
    async def test_no_fix_without_auto_fix(self, runner: ValidationRunner, tmp_path: Path, fixable_component: str):
        unit = tmp_path / "Banner.tsx"
        unit.write_text(fixable_component)

        report = await runner.validate_project(tmp_path)

        assert report.summary.fixed_issues == 0
        assert unit.read_text() == fixable_component
