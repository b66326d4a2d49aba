"""Tests for source discovery."""

from pathlib import Path

import pytest

from ui_compliance.validation.discovery import (
    DiscoveryError,
    FileSystemStore,
    SourceDiscovery,
    is_test_file,
)


class TestSourceDiscovery:
    def test_sorted_and_excluded(self, sample_project: Path):
        paths = SourceDiscovery().discover(sample_project)

        components = sample_project / "src" / "components"
        assert paths == [
            str(components / "ActionBar.test.tsx"),
            str(components / "ActionBar.tsx"),
            str(components / "ProductCard.tsx"),
        ]

    def test_all_source_suffixes(self, tmp_path: Path):
        for name in ("a.tsx", "b.jsx", "c.ts", "d.js", "e.css", "f.d"):
            (tmp_path / name).write_text("")

        names = [Path(p).name for p in SourceDiscovery().discover(tmp_path)]
        assert names == ["a.tsx", "b.jsx", "c.ts", "d.js"]

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(DiscoveryError):
            SourceDiscovery().discover(tmp_path / "missing")

    @pytest.mark.parametrize("root", ["", "   "])
    def test_blank_root(self, root: str):
        with pytest.raises(DiscoveryError, match="empty"):
            SourceDiscovery().discover(root)

    def test_file_root(self, tmp_path: Path):
        target = tmp_path / "App.tsx"
        target.write_text("")

        with pytest.raises(DiscoveryError):
            SourceDiscovery().discover(target)


class TestTestFiles:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/Button.test.tsx", True),
            ("src/Button.spec.ts", True),
            ("src/__tests__/Button.tsx", True),
            ("src/Button.tsx", False),
            ("src/testing/Button.tsx", False),
        ],
    )
    def test_is_test_file(self, path: str, expected: bool):
        assert is_test_file(path) is expected


class TestFileSystemStore:
    def test_round_trip(self, tmp_path: Path):
        store = FileSystemStore()
        path = str(tmp_path / "Hei.tsx")

        store.write(path, "const s = 'blåbær';\n")
        unit = store.load(path)

        assert unit.text == "const s = 'blåbær';\n"
        assert unit.kind.value == "tsx"
