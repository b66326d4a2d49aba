"""Report presenters.

Renders a validation Report as rich console text, JSON, a standalone
HTML page, Markdown or SARIF. Presenters only read the report.
"""

import html
import json
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ui_compliance import __version__
from ui_compliance.models import Diagnostic, Report, Severity

logger = structlog.get_logger()


class ReportFormat(str, Enum):
    """Output format for reports."""

    CONSOLE = "console"
    JSON = "json"
    HTML = "html"
    MARKDOWN = "markdown"
    SARIF = "sarif"  # Static Analysis Results Interchange Format


_SEVERITY_STYLE = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}

_SEVERITY_ICON = {
    Severity.ERROR: "🔴",
    Severity.WARNING: "🟡",
    Severity.INFO: "🔵",
}

_SARIF_LEVEL = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
}


def _assessment_rows(report: Report) -> list[tuple[str, str]]:
    """Label/value pairs for the per-concern assessments that ran."""
    rows = []
    if report.classification is not None:
        nsm = report.classification
        rows.append(("NSM compliance", f"{nsm.level.value} ({nsm.score:.0f}/100)"))
    if report.accessibility is not None:
        wcag = report.accessibility
        rows.append(("WCAG level achieved", f"{wcag.level} ({wcag.score:.0f}/100)"))
        if wcag.failed_criteria:
            rows.append(("Failed WCAG criteria", "; ".join(wcag.failed_criteria)))
    if report.design_system is not None:
        ds = report.design_system
        rows.append((
            "Design system usage",
            f"{ds.overall_score:.1f} (imports {ds.import_score:.0f}, composition {ds.composition_score:.0f}, "
            f"consistency {ds.consistency_score:.0f})",
        ))
    b = report.score.breakdown
    rows.append((
        "Breakdown",
        f"typing {b.typing:.0f}, sizing {b.component_sizing:.0f}, imports {b.import_usage:.0f}, "
        f"security {b.security:.0f}, WCAG {b.wcag:.0f}",
    ))
    return rows


class ReportRenderer:
    """Renders reports in various formats."""

    def __init__(self, width: int = 100):
        self.width = width
        self._logger = logger.bind(component="ReportRenderer")

    def render(self, report: Report, format: ReportFormat = ReportFormat.CONSOLE) -> str:
        """Render a report to a string.

        Args:
            report: The validation report
            format: Output format

        Returns:
            Formatted report string
        """
        match format:
            case ReportFormat.CONSOLE:
                return self._format_console(report)
            case ReportFormat.JSON:
                return self._format_json(report)
            case ReportFormat.HTML:
                return self._format_html(report)
            case ReportFormat.MARKDOWN:
                return self._format_markdown(report)
            case ReportFormat.SARIF:
                return self._format_sarif(report)
            case _:
                return self._format_console(report)

    # -- Console -------------------------------------------------------------

    def console_renderable(self, report: Report) -> Group:
        """Rich renderable for printing straight to a terminal."""
        s = report.summary
        status = Text("PASSED", style="bold green") if report.success else Text("FAILED", style="bold red")

        header = Table.grid(padding=(0, 2))
        header.add_row("Status", status)
        header.add_row("Overall score", f"{report.score.overall:.1f}/100")
        header.add_row("Files", f"{s.validated_files} validated of {s.total_files}")
        header.add_row(
            "Issues",
            f"{report.total_issues} ({len(report.errors)} errors, "
            f"{len(report.warnings)} warnings, {len(report.infos)} info)",
        )
        header.add_row("Fixable", str(report.fixable_issues))
        if s.fixed_issues:
            header.add_row("Fixed", str(s.fixed_issues))
        header.add_row("Time", f"{s.execution_time_ms:.0f} ms")

        scores = Table(title="Category Scores")
        scores.add_column("Category")
        scores.add_column("Score", justify="right")
        scores.add_column("Issues", justify="right")
        for category, diags in report.categories.items():
            scores.add_row(category.title, f"{report.score.for_category(category):.1f}", str(len(diags)))

        parts: list[Any] = [Panel(header, title="UI Compliance Report"), scores]

        assessments = Table(title="Assessments")
        assessments.add_column("Assessment")
        assessments.add_column("Result")
        for label, value in _assessment_rows(report):
            assessments.add_row(label, value)
        parts.append(assessments)

        if report.file_results:
            files = Table(title="Files")
            files.add_column("File")
            files.add_column("Compliant")
            files.add_column("Score", justify="right")
            for r in report.file_results:
                files.add_row(r.path, "yes" if r.compliant else "no", f"{r.score:.0f}")
            parts.append(files)

        if report.diagnostics:
            issues = Table(title="Issues", show_lines=False)
            issues.add_column("Severity")
            issues.add_column("Location")
            issues.add_column("Rule")
            issues.add_column("Message")
            for d in report.diagnostics:
                issues.add_row(
                    Text(d.severity.value.upper(), style=_SEVERITY_STYLE[d.severity]),
                    Text(f"{d.file}:{d.location}"),
                    Text(d.rule_id),
                    Text(d.message + (" (fixable)" if d.fixable else "")),
                )
            parts.append(issues)

        if report.recommendations:
            parts.append(Panel(
                Text("\n".join(f"• {r}" for r in report.recommendations)),
                title="Recommendations",
            ))

        return Group(*parts)

    def print_console(self, report: Report, console: Console | None = None) -> None:
        (console or Console()).print(self.console_renderable(report))

    def _format_console(self, report: Report) -> str:
        console = Console(width=self.width, record=True, force_terminal=False, color_system=None)
        with console.capture():
            console.print(self.console_renderable(report))
        return console.export_text()

    # -- JSON ---------------------------------------------------------------

    def _format_json(self, report: Report) -> str:
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)

    # -- HTML ---------------------------------------------------------------

    def _format_html(self, report: Report) -> str:
        """Format as a self-contained HTML page."""
        s = report.summary
        esc = html.escape
        status = "PASSED" if report.success else "FAILED"
        status_class = "pass" if report.success else "fail"

        category_rows = "\n".join(
            f"<tr><td>{esc(c.title)}</td><td>{report.score.for_category(c):.1f}</td>"
            f"<td>{len(diags)}</td></tr>"
            for c, diags in report.categories.items()
        )

        issue_rows = "\n".join(
            f'<tr class="{d.severity.value}"><td>{d.severity.value}</td>'
            f"<td>{esc(d.file)}:{d.location}</td><td>{esc(d.rule_id)}</td>"
            f"<td>{esc(d.message)}</td><td>{'yes' if d.fixable else ''}</td></tr>"
            for d in report.diagnostics
        ) or '<tr><td colspan="5">No issues found.</td></tr>'

        assessment_rows = "\n".join(
            f"<tr><th>{esc(label)}</th><td>{esc(value)}</td></tr>" for label, value in _assessment_rows(report)
        )
        file_rows = "\n".join(
            f"<tr><td>{esc(r.path)}</td><td>{'yes' if r.compliant else 'no'}</td><td>{r.score:.0f}</td></tr>"
            for r in report.file_results
        )
        recommendations = "\n".join(f"<li>{esc(r)}</li>" for r in report.recommendations)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>UI Compliance Report</title>
<style>
body {{ font-family: system-ui, sans-serif; margin: 2rem; color: #1f2937; }}
table {{ border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }}
th, td {{ border: 1px solid #d1d5db; padding: 0.4rem 0.6rem; text-align: left; }}
th {{ background: #f3f4f6; }}
.pass {{ color: #047857; }}
.fail {{ color: #b91c1c; }}
tr.error td:first-child {{ color: #b91c1c; font-weight: bold; }}
tr.warning td:first-child {{ color: #92400e; }}
tr.info td:first-child {{ color: #1e40af; }}
</style>
</head>
<body>
<h1>UI Compliance Report</h1>
<p>Generated {esc(report.timestamp.isoformat())}</p>
<h2 class="{status_class}">{status} - score {report.score.overall:.1f}/100</h2>
<table>
<tr><th>Total files</th><td>{s.total_files}</td></tr>
<tr><th>Validated files</th><td>{s.validated_files}</td></tr>
<tr><th>Total issues</th><td>{s.total_issues}</td></tr>
<tr><th>Critical issues</th><td>{s.critical_issues}</td></tr>
<tr><th>Fixable issues</th><td>{s.fixable_issues}</td></tr>
<tr><th>Execution time</th><td>{s.execution_time_ms:.0f} ms</td></tr>
</table>
<h2>Categories</h2>
<table>
<tr><th>Category</th><th>Score</th><th>Issues</th></tr>
{category_rows}
</table>
<h2>Assessments</h2>
<table>
{assessment_rows}
</table>
<h2>Files</h2>
<table>
<tr><th>File</th><th>Compliant</th><th>Score</th></tr>
{file_rows}
</table>
<h2>Issues</h2>
<table>
<tr><th>Severity</th><th>Location</th><th>Rule</th><th>Message</th><th>Fixable</th></tr>
{issue_rows}
</table>
<h2>Recommendations</h2>
<ul>
{recommendations}
</ul>
</body>
</html>
"""

    # -- Markdown -----------------------------------------------------------

    def _format_markdown(self, report: Report) -> str:
        """Format as Markdown."""
        lines = []
        s = report.summary

        lines.append("# UI Compliance Report")
        lines.append("")
        lines.append(f"**Generated:** {report.timestamp.isoformat()}")
        lines.append(f"**Status:** {'✅ PASSED' if report.success else '❌ FAILED'}")
        lines.append(f"**Overall score:** {report.score.overall:.1f}/100")
        lines.append("")

        lines.append("## Summary")
        lines.append("")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| Total Files | {s.total_files} |")
        lines.append(f"| Validated Files | {s.validated_files} |")
        lines.append(f"| Total Issues | {s.total_issues} |")
        lines.append(f"| Critical Issues | {s.critical_issues} |")
        lines.append(f"| Fixable Issues | {s.fixable_issues} |")
        lines.append("")

        lines.append("## Categories")
        lines.append("")
        lines.append("| Category | Score | Issues |")
        lines.append("|----------|-------|--------|")
        for category, diags in report.categories.items():
            lines.append(f"| {category.title} | {report.score.for_category(category):.1f} | {len(diags)} |")
        lines.append("")

        lines.append("## Assessments")
        lines.append("")
        lines.append("| Assessment | Result |")
        lines.append("|------------|--------|")
        for label, value in _assessment_rows(report):
            lines.append(f"| {label} | {value} |")
        lines.append("")

        if report.file_results:
            lines.append("## Files")
            lines.append("")
            lines.append("| File | Compliant | Score |")
            lines.append("|------|-----------|-------|")
            for r in report.file_results:
                lines.append(f"| `{r.path}` | {'yes' if r.compliant else 'no'} | {r.score:.0f} |")
            lines.append("")

        lines.append("## Issues")
        lines.append("")
        files = report.files()
        if not files:
            lines.append("No issues found.")
            lines.append("")
        for file in files:
            lines.append(f"### `{file}`")
            lines.append("")
            lines.append("| Severity | Rule | Line | Message |")
            lines.append("|----------|------|------|---------|")
            for d in report.for_file(file):
                message = d.message.replace("|", "\\|")
                lines.append(
                    f"| {_SEVERITY_ICON[d.severity]} {d.severity.value.upper()} | {d.rule_id} | {d.line} | {message} |"
                )
            lines.append("")

        if report.recommendations:
            lines.append("## Recommendations")
            lines.append("")
            for r in report.recommendations:
                lines.append(f"- {r}")
            lines.append("")

        return "\n".join(lines)

    # -- SARIF --------------------------------------------------------------

    def _format_sarif(self, report: Report) -> str:
        """Format as SARIF 2.1.0, as read by GitHub code scanning."""
        sarif = {
            "$schema": "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json",
            "version": "2.1.0",
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "name": "ui-compliance",
                            "version": __version__,
                            "rules": self._sarif_rules(report),
                        }
                    },
                    "results": [self._sarif_result(d) for d in report.diagnostics],
                }
            ],
        }
        return json.dumps(sarif, indent=2, ensure_ascii=False)

    def _sarif_rules(self, report: Report) -> list[dict[str, Any]]:
        rules: dict[str, dict[str, Any]] = {}
        for d in report.diagnostics:
            if d.rule_id not in rules:
                rules[d.rule_id] = {
                    "id": d.rule_id,
                    "name": d.rule_id,
                    "shortDescription": {"text": d.category.title},
                    "defaultConfiguration": {"level": _SARIF_LEVEL[d.severity]},
                    "properties": {"category": d.category.value},
                }
        return list(rules.values())

    def _sarif_result(self, d: Diagnostic) -> dict[str, Any]:
        result: dict[str, Any] = {
            "ruleId": d.rule_id,
            "level": _SARIF_LEVEL[d.severity],
            "message": {"text": d.message},
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": d.file},
                        "region": {
                            "startLine": d.line,
                            "startColumn": d.column + 1,  # SARIF columns are 1-indexed
                        },
                    }
                }
            ],
        }
        if d.fix:
            result["fixes"] = [self._sarif_fix(d)]
        return result

    def _sarif_fix(self, d: Diagnostic) -> dict[str, Any]:
        """A fix as one replacement; prepends replace an empty region at 1:1."""
        fix = d.fix
        if fix.is_insertion:
            start_line, start_column = 1, 1
        else:
            start_line, start_column = d.line, d.column + 1
        old_lines = fix.old_text.split("\n")
        if len(old_lines) == 1:
            end_line, end_column = start_line, start_column + len(fix.old_text)
        else:
            end_line, end_column = start_line + len(old_lines) - 1, len(old_lines[-1]) + 1

        return {
            "description": {"text": fix.description},
            "artifactChanges": [
                {
                    "artifactLocation": {"uri": d.file},
                    "replacements": [
                        {
                            "deletedRegion": {
                                "startLine": start_line,
                                "startColumn": start_column,
                                "endLine": end_line,
                                "endColumn": end_column,
                            },
                            "insertedContent": {"text": fix.new_text},
                        }
                    ],
                }
            ],
        }

    # -- Save ---------------------------------------------------------------

    def save(
        self,
        report: Report,
        output_path: str | Path,
        format: ReportFormat | None = None,
    ) -> Path:
        """Render and save a report.

        Args:
            report: The validation report
            output_path: Where to save
            format: Output format (inferred from extension if None)

        Returns:
            The written path
        """
        path = Path(output_path)

        if format is None:
            format = {
                ".json": ReportFormat.JSON,
                ".html": ReportFormat.HTML,
                ".htm": ReportFormat.HTML,
                ".md": ReportFormat.MARKDOWN,
                ".sarif": ReportFormat.SARIF,
            }.get(path.suffix.lower(), ReportFormat.CONSOLE)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(report, format), encoding="utf-8")

        self._logger.info("Report saved", path=str(path), format=format.value)
        return path

