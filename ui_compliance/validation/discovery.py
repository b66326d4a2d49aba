"""Source discovery and file access.

Discovery lists candidate units under a project root in a stable order.
Reading and writing go through a SourceStore so the runner and the
fixer can be pointed at something other than the local file system.
"""

from pathlib import Path
from typing import Protocol

import structlog

from ui_compliance.models import SOURCE_SUFFIXES, SourceUnit, UnitKind

logger = structlog.get_logger()


EXCLUDED_DIRECTORIES = frozenset({"node_modules", ".next", "dist", "build", "coverage", ".git"})
TEST_MARKERS = (".test.", ".spec.")
TEST_DIRECTORIES = frozenset({"__tests__"})


class DiscoveryError(Exception):
    """Raised when a project root cannot be enumerated."""


class SourceStore(Protocol):
    """Read/write access to unit text."""

    def read(self, path: str) -> str:
        ...

    def write(self, path: str, text: str) -> None:
        ...


class FileSystemStore:
    """SourceStore backed by the local file system (UTF-8)."""

    def read(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write(self, path: str, text: str) -> None:
        Path(path).write_text(text, encoding="utf-8")

    def load(self, path: str) -> SourceUnit:
        return SourceUnit(path=path, text=self.read(path), kind=UnitKind.from_path(path))


def is_test_file(path: str | Path) -> bool:
    """Test files are discovered but not validated."""
    p = Path(path)
    if any(marker in p.name for marker in TEST_MARKERS):
        return True
    return any(part in TEST_DIRECTORIES for part in p.parts)


class SourceDiscovery:
    """Enumerates source units under a root directory."""

    def __init__(
        self,
        suffixes: tuple[str, ...] = SOURCE_SUFFIXES,
        excluded_directories: frozenset[str] = EXCLUDED_DIRECTORIES,
    ):
        self.suffixes = suffixes
        self.excluded_directories = excluded_directories
        self._logger = logger.bind(component="SourceDiscovery")

    def discover(self, root: str | Path) -> list[str]:
        """List candidate source files under ``root`` in sorted order.

        Raises:
            DiscoveryError: If the root is blank, missing, not a directory,
                or cannot be listed
        """
        if not str(root).strip():
            raise DiscoveryError("Project root is empty")
        root_path = Path(root)
        if not root_path.exists():
            raise DiscoveryError(f"Project root does not exist: {root_path}")
        if not root_path.is_dir():
            raise DiscoveryError(f"Project root is not a directory: {root_path}")

        try:
            candidates = [
                p for p in root_path.rglob("*")
                if p.suffix in self.suffixes
                and p.is_file()
                and not self._excluded(p.relative_to(root_path))
            ]
        except OSError as e:
            raise DiscoveryError(f"Cannot list project root {root_path}: {e}") from e

        paths = sorted(str(p) for p in candidates)
        self._logger.info("Discovered source files", root=str(root_path), count=len(paths))
        return paths

    def _excluded(self, relative: Path) -> bool:
        return any(part in self.excluded_directories for part in relative.parts[:-1])
