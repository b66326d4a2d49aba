"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from ui_compliance.config import ValidationConfig
from ui_compliance.validation.extractor import FactExtractor
from ui_compliance.validation.rules import ValidationContext
from ui_compliance.validation.runner import ValidationRunner


CLEAN_COMPONENT = """\
import { Button } from '@xaheen-ai/design-system';

interface CardProps {
  readonly title: string;
  readonly onSelect: () => void;
}

export const ProductCard = ({ title, onSelect }: CardProps): JSX.Element => {
  return (
    <section>
      <h2>{title}</h2>
      <Button className="h-12 px-4" onClick={onSelect}>
        Select
      </Button>
    </section>
  );
};
"""

# Under-sized button plus one mutable props field
UNDERSIZED_BUTTON_COMPONENT = """\
interface ActionProps {
  readonly label: string;
  onAction: () => void;
}

export function ActionBar({ label, onAction }: ActionProps): JSX.Element {
  return (
    <div>
      <button className="h-8 px-4" onClick={onAction}>
        {label}
      </button>
    </div>
  );
}
"""

# Sensitive term without a classification marker
UNMARKED_SENSITIVE_COMPONENT = """\
export const PasswordHint = (): JSX.Element => {
  const label = "Enter your password";
  return <p>{label}</p>;
};
"""

# Click handler without a keyboard handler
CLICK_ONLY_COMPONENT = """\
export function Disclosure(): JSX.Element {
  const open = (): void => {};
  return <div onClick={open}>Open</div>;
}
"""

# Every fix here applies cleanly and leaves a compliant unit
FIXABLE_COMPONENT = """\
interface BannerProps {
  title: string;
}

export const Banner = ({ title }: BannerProps) => {
  return (
    <div>
      <img src="https://cdn.example.com/banner.png" />
      <Button size="xs" className="h-8">{title}</Button>
      <span className="text-gray-300">{title}</span>
      <a href="http://example.com/docs">Docs</a>
    </div>
  );
};
"""

MALFORMED_COMPONENT = """\
export const Broken = (): JSX.Element => {
  return <div className="text-gray-300">
};
"""


@pytest.fixture
def clean_component() -> str:
    return CLEAN_COMPONENT


@pytest.fixture
def undersized_button_component() -> str:
    return UNDERSIZED_BUTTON_COMPONENT


@pytest.fixture
def unmarked_sensitive_component() -> str:
    return UNMARKED_SENSITIVE_COMPONENT


@pytest.fixture
def click_only_component() -> str:
    return CLICK_ONLY_COMPONENT


@pytest.fixture
def fixable_component() -> str:
    return FIXABLE_COMPONENT


@pytest.fixture
def malformed_component() -> str:
    return MALFORMED_COMPONENT


@pytest.fixture
def config() -> ValidationConfig:
    return ValidationConfig()


@pytest.fixture
def context(config: ValidationConfig) -> ValidationContext:
    return ValidationContext(config=config)


@pytest.fixture
def extractor() -> FactExtractor:
    return FactExtractor()


@pytest.fixture
def runner() -> ValidationRunner:
    return ValidationRunner()


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """A small project tree with components, a test file and excluded dirs."""
    (tmp_path / "src" / "components").mkdir(parents=True)
    (tmp_path / "src" / "components" / "ProductCard.tsx").write_text(CLEAN_COMPONENT)
    (tmp_path / "src" / "components" / "ActionBar.tsx").write_text(UNDERSIZED_BUTTON_COMPONENT)
    (tmp_path / "src" / "components" / "ActionBar.test.tsx").write_text(UNDERSIZED_BUTTON_COMPONENT)
    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "index.tsx").write_text(UNDERSIZED_BUTTON_COMPONENT)
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "bundle.js").write_text("var x = 1;\n")
    (tmp_path / "README.md").write_text("# Sample\n")
    return tmp_path
