"""Demo script for the UI compliance validator.

This demonstrates:
1. Fact Extractor - tree-sitter facts for a TSX component
2. Rule Sets - diagnostics per category
3. Scoring - category and overall scores
4. Autofix - applying fixes to a copy of a project
5. Report Renderer - console, Markdown and SARIF output

Usage:
    python examples/demo_validation.py
"""

import asyncio
import tempfile
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ui_compliance.config import AccessibilityLevel, ValidationConfig
from ui_compliance.models import Category
from ui_compliance.validation import (
    FactExtractor,
    ReportFormat,
    ReportRenderer,
    ValidationRunner,
)

console = Console()


SAMPLE_COMPONENT = """\
interface ProfileCardProps {
  name: string;
  email: string;
}

export const ProfileCard = ({ name, email }: ProfileCardProps) => {
  return (
    <div style={{ padding: '16px', color: '#333333' }}>
      <h1>{name}</h1>
      <h3>Kontaktinformasjon</h3>
      <img src="/avatar.png" />
      <span className="text-gray-400">{email}</span>
      <div onClick={() => open(email)}>Send e-post</div>
      <Button size="xs" className="h-8">Lagre</Button>
      <a href="http://example.com/profile">Profil</a>
    </div>
  );
};
"""

CLEAN_COMPONENT = """\
import { Button } from '@xaheen-ai/design-system';

interface SaveBarProps {
  readonly onSave: () => void;
}

export const SaveBar = ({ onSave }: SaveBarProps): JSX.Element => (
  <footer>
    <Button className="h-12" onClick={onSave}>Save</Button>
  </footer>
);
"""


def demo_fact_extractor():
    """Demonstrate the Fact Extractor."""
    console.print("\n[bold cyan]═══ Fact Extractor Demo ═══[/bold cyan]\n")

    facts = FactExtractor().extract(SAMPLE_COMPONENT, "ProfileCard.tsx")

    table = Table(title="Structural Facts")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", style="green")
    table.add_column("Details", style="yellow")

    table.add_row(
        "Property shapes",
        str(len(facts.property_shapes)),
        ", ".join(s.name for s in facts.property_shapes),
    )
    table.add_row(
        "Components",
        str(len(facts.components)),
        ", ".join(c.name for c in facts.components),
    )
    table.add_row(
        "Elements",
        str(len(facts.elements)),
        ", ".join(e.tag for e in facts.elements),
    )
    table.add_row("Imports", str(len(facts.imports)), "")

    console.print(table)

    interactive = [e for e in facts.elements if e.interactive]
    if interactive:
        console.print("\n[bold]Interactive elements:[/bold]")
        for element in interactive:
            named = "named" if element.has_accessible_name else "unnamed"
            keyboard = "keyboard" if element.has_keyboard_handler else "no keyboard"
            console.print(f"  • <{element.tag}> line {element.line}: {named}, {keyboard}")


def demo_rule_sets():
    """Demonstrate the built-in rule sets on one component."""
    console.print("\n[bold cyan]═══ Rule Sets Demo ═══[/bold cyan]\n")

    report = ValidationRunner().validate_text(SAMPLE_COMPONENT, "ProfileCard.tsx")

    status = "[green]PASSED[/green]" if report.success else "[red]FAILED[/red]"
    console.print(f"Validation Status: {status}")
    console.print(f"Total Issues: {report.total_issues}")
    console.print(f"  Errors: {len(report.errors)}")
    console.print(f"  Warnings: {len(report.warnings)}")
    console.print(f"  Fixable: {report.fixable_issues}")

    for category, diagnostics in report.categories.items():
        if not diagnostics:
            continue
        console.print(f"\n[bold]{category.title}[/bold]")
        for d in diagnostics:
            icon = {"error": "🔴", "warning": "🟡", "info": "🔵"}[d.severity.value]
            console.print(f"  {icon} {escape(f'[{d.rule_id}]')} line {d.line}: {escape(d.message)}")

    return report


def demo_scoring():
    """Demonstrate scoring across accessibility tiers."""
    console.print("\n[bold cyan]═══ Scoring Demo ═══[/bold cyan]\n")

    runner = ValidationRunner()
    table = Table(title="Scores by WCAG tier")
    table.add_column("Tier", style="cyan")
    table.add_column("Overall", style="green", justify="right")
    table.add_column("Accessibility", style="yellow", justify="right")
    table.add_column("Issues", justify="right")

    for level in AccessibilityLevel:
        report = runner.validate_text(
            SAMPLE_COMPONENT,
            "ProfileCard.tsx",
            ValidationConfig(accessibility_level=level),
        )
        table.add_row(
            level.value,
            f"{report.score.overall:.1f}",
            f"{report.score.for_category(Category.ACCESSIBILITY):.1f}",
            str(report.total_issues),
        )

    console.print(table)


async def demo_autofix():
    """Demonstrate a project run with fixes applied."""
    console.print("\n[bold cyan]═══ Autofix Demo ═══[/bold cyan]\n")

    runner = ValidationRunner()
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "components").mkdir()
        unit = root / "components" / "ProfileCard.tsx"
        unit.write_text(SAMPLE_COMPONENT, encoding="utf-8")
        (root / "components" / "SaveBar.tsx").write_text(CLEAN_COMPONENT, encoding="utf-8")

        console.print("[bold]Validating with auto_fix enabled...[/bold]")
        fixed = await runner.validate_project(root, ValidationConfig(auto_fix=True))
        console.print(f"  Issues found: {fixed.total_issues}")
        console.print(f"  Fixes applied: {fixed.summary.fixed_issues}")

        console.print("\n[bold]Fixed source:[/bold]")
        console.print(Syntax(unit.read_text(encoding="utf-8"), "tsx", line_numbers=True))

        console.print("\n[bold]Re-validating...[/bold]")
        again = await runner.validate_project(root)
        console.print(f"  Status: {'[green]PASS[/green]' if again.success else '[red]FAIL[/red]'}")
        console.print(f"  Remaining issues: {again.total_issues}")

        return again


def demo_reports(report):
    """Demonstrate the report formats."""
    console.print("\n[bold cyan]═══ Report Renderer Demo ═══[/bold cyan]\n")

    renderer = ReportRenderer()
    renderer.print_console(report, console)

    console.print("\n[bold]Markdown Report (excerpt):[/bold]")
    markdown = renderer.render(report, ReportFormat.MARKDOWN)
    console.print(Panel(escape(markdown[:800]) + "...", title="Markdown Report"))

    console.print("\n[bold]SARIF Report (excerpt):[/bold]")
    sarif = renderer.render(report, ReportFormat.SARIF)
    console.print(Panel(escape(sarif[:600]) + "...", title="SARIF Report"))


async def run_demo():
    """Run the complete demo."""
    console.print(Panel.fit(
        "[bold magenta]UI Compliance Validator[/bold magenta]\n"
        "[cyan]Style, design system, classification and accessibility checks[/cyan]",
        border_style="bright_blue",
    ))

    demo_fact_extractor()
    report = demo_rule_sets()
    demo_scoring()
    await demo_autofix()
    demo_reports(report)

    console.print(Panel.fit(
        "[bold green]✓ Demo Complete![/bold green]\n\n"
        "Components demonstrated:\n"
        "• Fact Extractor - tree-sitter TSX facts\n"
        "• Rule Sets - four compliance categories\n"
        "• Scoring - weighted category scores\n"
        "• Autofix - text edits written back\n"
        "• Report Renderer - console, Markdown, SARIF",
        border_style="green",
    ))


if __name__ == "__main__":
    asyncio.run(run_demo())
