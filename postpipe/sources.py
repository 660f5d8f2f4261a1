"""Discovery and loading of raw content files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .errors import SourceReadError
from .models import RawSource

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".idea",
}


@dataclass
class IgnoreRule:
    """Represents an exclusion pattern from .postpipe.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
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


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
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
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


class ContentScanner:
    """Walks a content directory and yields the files to ingest."""

    def __init__(
        self,
        include: Sequence[str] = ("*.md", "*.markdown"),
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.include = list(include)
        self.rules: List[IgnoreRule] = []
        for pattern in exclude_paths:
            rule = build_ignore_rule(pattern)
            if rule is not None:
                self.rules.append(rule)

    def scan(self, root: str | Path) -> List[Path]:
        """Return matching files under ``root`` sorted by relative path."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Content path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Content path is not a directory: {root}")

        files = list(self._iter_files(root_path))
        return sorted(files, key=lambda path: path.relative_to(root_path).as_posix())

    def _iter_files(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in dirnames:
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, self.rules):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in filenames:
                if not any(fnmatchcase(filename, pattern) for pattern in self.include):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, self.rules):
                    continue
                yield current_dir / filename


def load_source(root: Path, path: Path) -> RawSource:
    """Read ``path`` as UTF-8 text identified by its path relative to ``root``."""
    try:
        source_id = path.relative_to(root).as_posix()
    except ValueError:
        source_id = path.as_posix()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(source_id, str(exc)) from exc
    return RawSource(source_id=source_id, text=text)


__all__ = ["ContentScanner", "IgnoreRule", "build_ignore_rule", "load_source"]
