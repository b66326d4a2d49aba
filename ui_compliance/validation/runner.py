"""Validation runner - orchestrates a complete validation run.

The runner is a LangGraph workflow:
1. discover: enumerate source units under the project root
2. validate: run the rule sets over each unit, concurrently
3. aggregate: build the report and score
4. fix: apply fixable diagnostics (only with auto_fix)
5. report: stamp timing and metadata
"""

import asyncio
import time
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any, TypedDict

import structlog
from langgraph.graph import END, StateGraph

from ui_compliance.config import ValidationConfig
from ui_compliance.models import Category, Diagnostic, Report, Severity
from ui_compliance.validation.detector import UnitResult, UnitValidator
from ui_compliance.validation.discovery import (
    DiscoveryError,
    FileSystemStore,
    SourceDiscovery,
    SourceStore,
    is_test_file,
)
from ui_compliance.validation.extractor import FactExtractor
from ui_compliance.validation.fixer import AutofixApplier
from ui_compliance.validation.rules import RuleSet, ValidationContext
from ui_compliance.validation.rulesets import default_rule_sets
from ui_compliance.validation.scoring import aggregate

logger = structlog.get_logger()

DISCOVERY_FAILURE = "discovery-failure"


class ValidationState(TypedDict, total=False):
    """State carried through the validation graph."""

    root: str
    options: ValidationConfig
    context: ValidationContext
    paths: list[str]  # Every discovered unit
    results: list[UnitResult]
    diagnostics: list[Diagnostic]
    report: Report
    fixed: int
    errors: list[str]
    started_at: float


class ValidationRunner:
    """Runs rule sets over a project and produces a Report.

    Rule sets, discovery and file access are injectable; by default the
    built-in rule sets run against the local file system.
    """

    def __init__(
        self,
        rule_sets: Sequence[RuleSet] | None = None,
        discovery: SourceDiscovery | None = None,
        store: SourceStore | None = None,
        extractor: FactExtractor | None = None,
    ):
        self.rule_sets = list(rule_sets) if rule_sets is not None else None
        self.discovery = discovery or SourceDiscovery()
        self.store = store or FileSystemStore()
        self.extractor = extractor or FactExtractor()
        self._logger = logger.bind(component="ValidationRunner")

    def _rule_sets_for(self, config: ValidationConfig) -> list[RuleSet]:
        if self.rule_sets is not None:
            return self.rule_sets
        return default_rule_sets(config)

    def _validator_for(self, config: ValidationConfig) -> UnitValidator:
        return UnitValidator(self._rule_sets_for(config), self.extractor)

    # -- Public API ---------------------------------------------------------

    async def validate_project(
        self,
        root: str | Path,
        config: ValidationConfig | None = None,
    ) -> Report:
        """Validate every source unit under ``root``.

        Never raises for problems with the project itself; a missing
        root yields a failed report.
        """
        app = self.create_graph().compile()
        state: ValidationState = {
            "root": str(root),
            "options": config or ValidationConfig(),
            "errors": [],
            "started_at": time.perf_counter(),
        }

        await self._logger.ainfo("Starting validation", root=str(root))
        result = await app.ainvoke(state)
        report = result["report"]
        await self._logger.ainfo(
            "Validation complete",
            root=str(root),
            success=report.success,
            issues=report.total_issues,
            score=report.score.overall,
        )
        return report

    def validate_project_sync(
        self,
        root: str | Path,
        config: ValidationConfig | None = None,
    ) -> Report:
        """Blocking wrapper around ``validate_project``."""
        return asyncio.run(self.validate_project(root, config))

    def validate_text(
        self,
        text: str,
        path: str = "<string>.tsx",
        config: ValidationConfig | None = None,
    ) -> Report:
        """Validate one in-memory unit. Fixes are never applied."""
        config = config or ValidationConfig()
        started = time.perf_counter()
        context = ValidationContext(config=config, unit_paths=(path,))
        result = self._validator_for(config).validate_text(text, path, context)
        return aggregate(
            result.diagnostics,
            categories=config.enabled_categories,
            total_files=1,
            validated_files=1,
            execution_time_ms=(time.perf_counter() - started) * 1000,
            accessibility_level=config.accessibility_level,
            file_results=[result.to_file_result()],
        )

    # -- Graph --------------------------------------------------------------

    def create_graph(self) -> StateGraph:
        """Create the LangGraph workflow for a validation run."""
        workflow = StateGraph(ValidationState)

        workflow.add_node("discover", self._discover_node)
        workflow.add_node("validate", self._validate_node)
        workflow.add_node("aggregate", self._aggregate_node)
        workflow.add_node("fix", self._fix_node)
        workflow.add_node("report", self._report_node)

        workflow.set_entry_point("discover")

        workflow.add_edge("discover", "validate")
        workflow.add_edge("validate", "aggregate")
        workflow.add_conditional_edges(
            "aggregate",
            self._should_fix,
            {
                "fix": "fix",
                "report": "report",
            },
        )
        workflow.add_edge("fix", "report")
        workflow.add_edge("report", END)

        return workflow

    async def _discover_node(self, state: ValidationState) -> ValidationState:
        """Enumerate candidate units."""
        try:
            paths = self.discovery.discover(state["root"])
        except DiscoveryError as e:
            await self._logger.aerror("Discovery failed", root=state["root"], error=str(e))
            return {
                **state,
                "paths": [],
                "diagnostics": [Diagnostic(
                    rule_id=DISCOVERY_FAILURE,
                    message=f"Validation failed: {e}",
                    severity=Severity.ERROR,
                    category=Category.STYLE,
                    file=state["root"],
                )],
                "errors": [*state.get("errors", []), str(e)],
            }

        return {**state, "paths": paths, "diagnostics": []}

    async def _validate_node(self, state: ValidationState) -> ValidationState:
        """Validate non-test units concurrently, keeping discovery order."""
        config = state["options"]
        to_validate = [p for p in state["paths"] if not is_test_file(p)]
        context = ValidationContext(config=config, unit_paths=tuple(to_validate))
        validator = self._validator_for(config)
        semaphore = asyncio.Semaphore(config.max_workers)

        async def validate_one(path: str) -> UnitResult:
            async with semaphore:
                return await asyncio.to_thread(validator.validate_path, path, context, self.store)

        results = await asyncio.gather(*(validate_one(p) for p in to_validate))

        diagnostics = list(state.get("diagnostics", []))
        for result in results:
            diagnostics.extend(result.diagnostics)

        await self._logger.ainfo(
            "Units validated",
            units=len(results),
            issues=len(diagnostics),
        )
        return {**state, "context": context, "results": list(results), "diagnostics": diagnostics}

    async def _aggregate_node(self, state: ValidationState) -> ValidationState:
        return {**state, "report": self._aggregate(state, fixed=0)}

    def _should_fix(self, state: ValidationState) -> str:
        if state.get("errors"):
            return "report"
        if state["options"].auto_fix and state["report"].fixable_issues > 0:
            return "fix"
        return "report"

    async def _fix_node(self, state: ValidationState) -> ValidationState:
        """Apply fixes, then recount what is still fixable."""
        units = [r.unit for r in state.get("results", []) if r.unit is not None]
        applier = AutofixApplier(self.store)
        fixed = await asyncio.to_thread(applier.apply, units, state["diagnostics"])

        await self._logger.ainfo("Fixes applied", fixed=fixed)
        return {**state, "fixed": fixed, "report": self._aggregate(state, fixed=fixed)}

    async def _report_node(self, state: ValidationState) -> ValidationState:
        """Stamp timing and metadata on the final report."""
        report = state["report"]
        report.summary.execution_time_ms = (time.perf_counter() - state["started_at"]) * 1000
        report.metadata.update(self._metadata(state))
        return {**state, "report": report}

    # -- Helpers ------------------------------------------------------------

    def _aggregate(self, state: ValidationState, fixed: int) -> Report:
        config = state["options"]
        results = state.get("results", [])
        report = aggregate(
            state.get("diagnostics", []),
            categories=config.enabled_categories,
            total_files=len(state.get("paths", [])),
            validated_files=sum(1 for r in results if r.validated),
            fixed_issues=fixed,
            accessibility_level=config.accessibility_level,
            file_results=[r.to_file_result() for r in results],
        )
        if state.get("errors"):
            report = replace(
                report,
                success=False,
                score=replace(report.score, overall=0.0, categories={c: 0.0 for c in report.categories}),
                recommendations=["Fix the project root and retry validation."],
            )
        return report

    def _metadata(self, state: ValidationState) -> dict[str, Any]:
        config = state["options"]
        return {
            "root": state["root"],
            "ruleSets": [rs.name for rs in self._rule_sets_for(config)],
            "accessibilityLevel": config.accessibility_level.value,
            "strictTyping": config.strict_typing,
            "autoFix": config.auto_fix,
        }
