"""Command line interface for the UI compliance validator."""

import logging
import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.table import Table

from ui_compliance.config import AccessibilityLevel, ValidationConfig
from ui_compliance.validation.reporter import ReportFormat, ReportRenderer
from ui_compliance.validation.rulesets import default_rule_sets
from ui_compliance.validation.runner import ValidationRunner

app = typer.Typer(
    name="ui-compliance",
    help="Validate UI component sources for style, design-system, classification and accessibility compliance.",
    add_completion=False,
)


def configure_logging(verbose: bool) -> None:
    """Route structlog to stderr, keeping stdout for the report."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@app.command()
def validate(
    root: str = typer.Argument(..., help="Project root to validate"),
    fix: bool = typer.Option(False, "--fix", help="Apply automatic fixes"),
    format: ReportFormat = typer.Option(ReportFormat.CONSOLE, "--format", "-f", help="Report format"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the report to a file"),
    style: bool = typer.Option(True, "--style/--no-style", help="Run style rules"),
    design_system: bool = typer.Option(True, "--design-system/--no-design-system", help="Run design-system rules"),
    classification: bool = typer.Option(
        True, "--classification/--no-classification", help="Run classification and security rules",
    ),
    accessibility: bool = typer.Option(True, "--accessibility/--no-accessibility", help="Run accessibility rules"),
    accessibility_level: AccessibilityLevel = typer.Option(
        AccessibilityLevel.AAA, "--accessibility-level", help="WCAG conformance tier",
    ),
    strict_typing: bool = typer.Option(True, "--strict-typing/--no-strict-typing", help="Treat typing issues as errors"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """Validate every component source under ROOT."""
    configure_logging(verbose)

    config = ValidationConfig.from_options({
        "auto_fix": fix,
        "style": style,
        "design_system": design_system,
        "classification": classification,
        "accessibility": accessibility,
        "accessibility_level": accessibility_level,
        "strict_typing": strict_typing,
    })

    report = ValidationRunner().validate_project_sync(root, config)
    renderer = ReportRenderer()

    if output is not None:
        renderer.save(report, output, format if format != ReportFormat.CONSOLE else None)
        typer.echo(f"Report written to {output}", err=True)
    elif format == ReportFormat.CONSOLE:
        renderer.print_console(report, Console())
    else:
        typer.echo(renderer.render(report, format))

    raise typer.Exit(code=0 if report.success else 1)


@app.command("rules")
def list_rules() -> None:
    """List the built-in rules."""
    table = Table(title="Built-in Rules")
    table.add_column("Rule")
    table.add_column("Category")
    table.add_column("Severity")
    table.add_column("Fixable")
    table.add_column("Description")

    for rule_set in default_rule_sets(ValidationConfig()):
        for rule in rule_set:
            table.add_row(
                rule.id,
                rule.category.value,
                rule.severity.value,
                "yes" if rule.fixable else "",
                rule.description,
            )

    Console().print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
