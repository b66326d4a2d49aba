"""Autofix application.

Fixes are exact-substring edits. Within a unit they are applied from the
bottom up (descending line, then column) so earlier spans keep their
offsets. Each ``old_text`` must start on its diagnostic's line, at or
after the diagnostic's column. Prepends are applied after all in-place
edits. A fix whose text is no longer there is skipped.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import structlog

from ui_compliance.models import Diagnostic, SourceUnit
from ui_compliance.validation.discovery import FileSystemStore, SourceStore
from ui_compliance.validation.patterns import line_start_offset

logger = structlog.get_logger()


@dataclass
class FixOutcome:
    """Result of applying fixes to one text."""

    text: str
    applied: list[Diagnostic] = field(default_factory=list)
    skipped: list[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def _fix_order(diagnostic: Diagnostic) -> tuple[bool, int, int]:
    # Prepends go last so they do not shift the lines other fixes anchor to
    return (not diagnostic.fix.is_insertion, diagnostic.line, diagnostic.column)


def _locate(text: str, old_text: str, line: int, column: int) -> int:
    """Offset of ``old_text`` starting on ``line`` at or after ``column``, or -1."""
    line_start = line_start_offset(text, line)
    line_end = text.find("\n", line_start)
    if line_end == -1:
        line_end = len(text)
    index = text.find(old_text, min(line_start + column, line_end))
    if index > line_end:
        return -1
    return index


def apply_to_text(text: str, diagnostics: Iterable[Diagnostic]) -> FixOutcome:
    """Apply the fixes carried by ``diagnostics`` to ``text``.

    Diagnostics without a fix are ignored. Never raises on a mismatch;
    the diagnostic is reported in ``skipped`` instead.
    """
    fixable = sorted((d for d in diagnostics if d.fix is not None), key=_fix_order, reverse=True)
    outcome = FixOutcome(text=text)

    for diagnostic in fixable:
        fix = diagnostic.fix
        if fix.is_insertion:
            outcome.text = fix.new_text + outcome.text
            outcome.applied.append(diagnostic)
            continue

        index = _locate(outcome.text, fix.old_text, diagnostic.line, diagnostic.column)
        if index == -1:
            logger.debug(
                "Fix text not found, skipping",
                rule=diagnostic.rule_id,
                file=diagnostic.file,
                line=diagnostic.line,
            )
            outcome.skipped.append(diagnostic)
            continue

        outcome.text = outcome.text[:index] + fix.new_text + outcome.text[index + len(fix.old_text):]
        outcome.applied.append(diagnostic)

    return outcome


class AutofixApplier:
    """Applies fixable diagnostics to their units and writes them back."""

    def __init__(self, store: SourceStore | None = None):
        self.store = store or FileSystemStore()
        self._logger = logger.bind(component="AutofixApplier")

    def apply(self, units: Sequence[SourceUnit], diagnostics: Iterable[Diagnostic]) -> int:
        """Apply fixes to each unit and write changed units once.

        Args:
            units: Current snapshots of the units the diagnostics refer to
            diagnostics: Diagnostics from the run; those without a fix are ignored

        Returns:
            Number of fixes applied
        """
        by_file: dict[str, list[Diagnostic]] = {}
        for diagnostic in diagnostics:
            if diagnostic.fix is not None:
                by_file.setdefault(diagnostic.file, []).append(diagnostic)

        texts = {unit.path: unit.text for unit in units}
        applied = 0

        for file_path, file_diagnostics in by_file.items():
            if file_path not in texts:
                self._logger.warning("No source for fixes", file=file_path, fixes=len(file_diagnostics))
                continue

            outcome = apply_to_text(texts[file_path], file_diagnostics)
            if outcome.skipped:
                self._logger.debug("Some fixes skipped", file=file_path, skipped=len(outcome.skipped))

            if outcome.text == texts[file_path]:
                continue

            try:
                self.store.write(file_path, outcome.text)
            except OSError as e:
                self._logger.error("Failed to write fixes", file=file_path, error=str(e))
                continue

            applied += len(outcome.applied)
            self._logger.info("Applied fixes", file=file_path, fixes=len(outcome.applied))

        return applied
