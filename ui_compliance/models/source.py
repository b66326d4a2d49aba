"""Source units under analysis."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class UnitKind(str, Enum):
    """File kind of a source unit."""

    TSX = "tsx"
    JSX = "jsx"
    TS = "ts"
    JS = "js"

    @classmethod
    def from_path(cls, path: str | Path) -> "UnitKind":
        suffix = Path(path).suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            return cls.TSX

    @property
    def typed(self) -> bool:
        """True for TypeScript units."""
        return self in (UnitKind.TSX, UnitKind.TS)


SOURCE_SUFFIXES = (".tsx", ".jsx", ".ts", ".js")


@dataclass(frozen=True)
class SourceUnit:
    """Immutable snapshot of one file's text."""

    path: str
    text: str
    kind: UnitKind

    @classmethod
    def from_text(cls, text: str, path: str = "<string>.tsx") -> "SourceUnit":
        return cls(path=path, text=text, kind=UnitKind.from_path(path))
