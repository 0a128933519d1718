"""Source tree traversal: Python files to analyze, in a stable order."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    ".tox",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    "build",
    "dist",
}

_SOURCE_SUFFIX = ".py"


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .specgen.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def load_ignore_rules(root: Path, extra_patterns: Sequence[str] = ()) -> List[IgnoreRule]:
    """Return .gitignore rules followed by rules for ``extra_patterns``."""
    rules: List[IgnoreRule] = []
    gitignore = root / ".gitignore"
    if gitignore.exists():
        for raw_line in gitignore.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            negate = line.startswith("!")
            rule = build_ignore_rule(line[1:] if negate else line, negate=negate)
            if rule is not None:
                rules.append(rule)
    for pattern in extra_patterns:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def is_test_file(name: str) -> bool:
    """Return True for pytest-style test modules."""
    return name.startswith("test_") or name.endswith("_test.py") or name == "conftest.py"


def iter_source_files(root: Path, exclude_paths: Sequence[str] = ()) -> Iterator[Path]:
    """Yield non-test Python files below ``root`` sorted by directory then name."""
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Source path not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Source path is not a directory: {root}")

    rules = load_ignore_rules(root, exclude_paths)

    def _raise(error: OSError) -> None:
        raise error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            if not filename.endswith(_SOURCE_SUFFIX) or is_test_file(filename):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


__all__ = ["IgnoreRule", "build_ignore_rule", "is_test_file", "iter_source_files", "load_ignore_rules"]
