"""Recursive directory scanner with layered ignore files.

Each directory sees the rules inherited from its ancestors plus the rules of
its own ``.gitignore`` and ``.agentsignore``. Rule sets are immutable
snapshots handed down the recursion, so sibling subtrees never see each
other's rules.
"""

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from agentsmd.core.logging_setup import get_logger
from agentsmd.core.patterns import IncludeFilter, RuleSet, translate_patterns
from agentsmd.core.policy import root_policy_lines

logger = get_logger(__name__)

IGNORE_FILES: tuple[str, ...] = (".gitignore", ".agentsignore")

# Presence of this file marks a Python virtual environment
VENV_MARKER = "pyvenv.cfg"


@dataclass
class ScanState:
    """Mutable context shared by one scan invocation."""

    follow_symlinks: bool = False
    include: IncludeFilter = field(default_factory=IncludeFilter)
    files: list[Path] = field(default_factory=list)
    visited: set[str] = field(default_factory=set)


def read_ignore_lines(directory: Path) -> list[str]:
    """Concatenate the lines of every ignore file present in ``directory``.

    Missing or unreadable files contribute nothing.
    """
    lines: list[str] = []
    for name in IGNORE_FILES:
        try:
            text = (directory / name).read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.debug("Skipping unreadable ignore file %s: %s", directory / name, e)
            continue
        lines.extend(text.splitlines())
    return lines


def _entry_kind(entry: os.DirEntry[str], follow_symlinks: bool) -> str | None:
    """Classify a directory entry as "dir", "file" or None (skip)."""
    try:
        if entry.is_symlink():
            if not follow_symlinks:
                return None
            # Broken links report neither dir nor file
            if entry.is_dir(follow_symlinks=True):
                return "dir"
            if entry.is_file(follow_symlinks=True):
                return "file"
            return None
        if entry.is_dir(follow_symlinks=False):
            return "dir"
        if entry.is_file(follow_symlinks=False):
            return "file"
    except OSError as e:
        logger.debug("Cannot stat %s: %s", entry.path, e)
    return None


def _visit(directory: Path, rel: str, inherited: RuleSet, state: ScanState) -> None:
    if state.follow_symlinks:
        real = os.path.realpath(directory)
        if real in state.visited:
            logger.debug("Symlink cycle at %s, not descending", directory)
            return
        state.visited.add(real)

    if os.path.exists(directory / VENV_MARKER):
        logger.debug("Skipping virtual environment %s", directory)
        return

    rules = inherited.extend(translate_patterns(read_ignore_lines(directory), rel))

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug("Skipping unreadable directory %s: %s", directory, e)
        return

    for entry in entries:
        kind = _entry_kind(entry, state.follow_symlinks)
        if kind is None:
            continue

        entry_rel = posixpath.join(rel, entry.name)
        candidate = entry_rel + "/" if kind == "dir" else entry_rel
        if rules.is_ignored(candidate):
            continue

        entry_path = directory / entry.name
        if kind == "dir":
            _visit(entry_path, entry_rel, rules, state)
        elif state.include.accepts(entry.name):
            state.files.append(entry_path)


def scan_directory(
    root: Path | str,
    follow_symlinks: bool = False,
    include_patterns: Iterable[str] | None = None,
    exclude_docs: bool = False,
    exclude_tests: bool = False,
    exclude_styles: bool = False,
) -> list[Path]:
    """Collect the files under ``root`` that survive all ignore layers.

    Args:
        root: Directory to scan.
        follow_symlinks: Descend into symlinked directories and include
            symlinked files. Cycles are detected by canonical path.
        include_patterns: Optional basename globs; when given, only files
            matching at least one are kept. Ignore rules are applied first.
        exclude_docs: Also apply the bundled documentation policy.
        exclude_tests: Also apply the bundled test-file policy.
        exclude_styles: Also apply the bundled stylesheet policy.

    Returns:
        Absolute file paths in traversal order (children sorted by name).
    """
    root_path = Path(root).absolute()
    base_rules = RuleSet.from_lines(
        root_policy_lines(
            exclude_docs=exclude_docs,
            exclude_tests=exclude_tests,
            exclude_styles=exclude_styles,
        )
    )
    state = ScanState(
        follow_symlinks=follow_symlinks,
        include=IncludeFilter(include_patterns),
    )
    _visit(root_path, "", base_rules, state)
    logger.debug("Scan of %s found %d files", root_path, len(state.files))
    return state.files
