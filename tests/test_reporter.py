"""Tests for report presenters."""

import json
from pathlib import Path

import pytest

from ui_compliance import __version__
from ui_compliance.models import Report
from ui_compliance.validation.reporter import ReportFormat, ReportRenderer
from ui_compliance.validation.runner import ValidationRunner


@pytest.fixture
def failing_report(runner: ValidationRunner, fixable_component: str) -> Report:
    return runner.validate_text(fixable_component, "Banner.tsx")


@pytest.fixture
def passing_report(runner: ValidationRunner, clean_component: str) -> Report:
    return runner.validate_text(clean_component, "ProductCard.tsx")


@pytest.fixture
def renderer() -> ReportRenderer:
    return ReportRenderer(width=200)


class TestConsole:
    def test_failing_report(self, renderer: ReportRenderer, failing_report: Report):
        output = renderer.render(failing_report, ReportFormat.CONSOLE)

        assert "FAILED" in output
        assert "UI Compliance Report" in output
        assert "style-button-min-size" in output
        assert "(fixable)" in output
        assert "Recommendations" in output
        assert "WCAG level achieved" in output

    def test_passing_report(self, renderer: ReportRenderer, passing_report: Report):
        output = renderer.render(passing_report)

        assert "PASSED" in output
        assert "100.0/100" in output
        assert "Issues" in output


class TestJson:
    def test_camel_case_document(self, renderer: ReportRenderer, failing_report: Report):
        data = json.loads(renderer.render(failing_report, ReportFormat.JSON))

        assert data["success"] is False
        assert data["fixableIssues"] == 8
        assert data["summary"]["totalFiles"] == 1
        assert data["errors"][0]["fix"]["newText"]
        assert "style" in data["score"]["categories"]

    def test_assessments(self, renderer: ReportRenderer, failing_report: Report):
        data = json.loads(renderer.render(failing_report, ReportFormat.JSON))

        assert data["accessibility"]["wcagLevel"] == "Non-compliant"
        assert data["accessibility"]["failedCriteria"] == ["1.1.1 Non-text Content", "1.4.6 Contrast (Enhanced)"]
        assert data["designSystem"]["patterns"]["properImports"] == 1
        assert data["score"]["breakdown"]["componentSizing"] == 80.0
        assert data["fileResults"] == [{"filePath": "Banner.tsx", "compliant": False, "score": 30.0, "issues": 8}]


class TestHtml:
    def test_self_contained_and_escaped(self, renderer: ReportRenderer, failing_report: Report):
        output = renderer.render(failing_report, ReportFormat.HTML)

        assert output.startswith("<!DOCTYPE html>")
        assert "<script" not in output
        assert "Button &lt;Button&gt;" in output
        assert "<h2>Assessments</h2>" in output
        assert "FAILED" in output


class TestMarkdown:
    def test_issues_grouped_by_file(self, renderer: ReportRenderer, failing_report: Report):
        output = renderer.render(failing_report, ReportFormat.MARKDOWN)

        assert output.startswith("# UI Compliance Report")
        assert "### `Banner.tsx`" in output
        assert "| Category | Score | Issues |" in output
        assert "## Recommendations" in output
        assert "| NSM compliance | compliant (95/100) |" in output
        assert "| `Banner.tsx` | no | 30 |" in output

    def test_no_issues(self, renderer: ReportRenderer, passing_report: Report):
        output = renderer.render(passing_report, ReportFormat.MARKDOWN)

        assert "No issues found." in output
        assert "## Recommendations" not in output


class TestSarif:
    def test_structure(self, renderer: ReportRenderer, failing_report: Report):
        sarif = json.loads(renderer.render(failing_report, ReportFormat.SARIF))

        run = sarif["runs"][0]
        assert sarif["version"] == "2.1.0"
        assert run["tool"]["driver"]["version"] == __version__
        assert len(run["results"]) == failing_report.total_issues

        rule_ids = [r["id"] for r in run["tool"]["driver"]["rules"]]
        assert len(rule_ids) == len(set(rule_ids))

        first = run["results"][0]
        region = first["locations"][0]["physicalLocation"]["region"]
        assert region["startColumn"] == failing_report.diagnostics[0].column + 1
        assert first["fixes"]

    def test_fix_replacements(self, renderer: ReportRenderer, failing_report: Report, fixable_component: str):
        sarif = json.loads(renderer.render(failing_report, ReportFormat.SARIF))
        results = {r["ruleId"]: r for r in sarif["runs"][0]["results"]}

        change = results["style-button-min-size"]["fixes"][0]["artifactChanges"][0]
        replacement = change["replacements"][0]
        region = replacement["deletedRegion"]
        assert change["artifactLocation"]["uri"] == "Banner.tsx"
        assert region["startLine"] == region["endLine"] == 9
        source_line = fixable_component.splitlines()[region["startLine"] - 1]
        assert source_line[region["startColumn"] - 1:region["endColumn"] - 1] == "h-8"
        assert replacement["insertedContent"]["text"] == "h-12"

        prepend = results["design-system-imports"]["fixes"][0]["artifactChanges"][0]["replacements"][0]
        assert prepend["deletedRegion"] == {"startLine": 1, "startColumn": 1, "endLine": 1, "endColumn": 1}
        assert prepend["insertedContent"]["text"].startswith("import { Button }")


class TestSave:
    @pytest.mark.parametrize(
        "name, marker",
        [
            ("report.json", '"success"'),
            ("report.html", "<!DOCTYPE html>"),
            ("report.md", "# UI Compliance Report"),
            ("report.sarif", '"2.1.0"'),
            ("report.txt", "UI Compliance Report"),
        ],
    )
    def test_format_from_extension(
        self, renderer: ReportRenderer, failing_report: Report, tmp_path: Path, name: str, marker: str
    ):
        path = renderer.save(failing_report, tmp_path / "out" / name)

        assert path.exists()
        assert marker in path.read_text(encoding="utf-8")

    def test_explicit_format_wins(self, renderer: ReportRenderer, failing_report: Report, tmp_path: Path):
        path = renderer.save(failing_report, tmp_path / "report.txt", ReportFormat.JSON)
        assert json.loads(path.read_text(encoding="utf-8"))["success"] is False
