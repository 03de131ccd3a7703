"""Gitignore-style rule translation and matching.

Ignore files are scoped to the directory that declares them. Each raw line is
rewritten into an ``IgnoreRule`` anchored to that directory (posix path
relative to the scan root), so a rule's reach never changes as the scanner
descends. Rule sets only grow by appending deeper rules.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from functools import cached_property

import pathspec

# Glob metacharacters that must be literal when a directory name is used as a base
_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


@dataclass(frozen=True)
class IgnoreRule:
    """A single anchored ignore rule.

    Attributes:
        pattern: Anchored pattern body, relative to the scan root, without the
            negation prefix or directory-only suffix.
        negated: True for ``!`` rules, which re-include matching paths.
        directory_only: True when the source line ended with ``/``.
    """

    pattern: str
    negated: bool = False
    directory_only: bool = False

    @cached_property
    def _spec(self) -> pathspec.PathSpec:
        # Leading slash pins the pattern to the scan root
        return pathspec.PathSpec.from_lines("gitignore", ["/" + self.pattern])

    def matches(self, candidate: str) -> bool:
        """Check a candidate path against this rule.

        Args:
            candidate: Path relative to the scan root. Directories carry a
                trailing slash.

        Returns:
            True if the rule applies to the candidate.
        """
        if self.directory_only and not candidate.endswith("/"):
            return False
        return self._spec.match_file(candidate)

    def __str__(self) -> str:
        text = self.pattern + ("/" if self.directory_only else "")
        return ("!" + text) if self.negated else text


def translate_patterns(lines: Iterable[str], base: str = "") -> list[IgnoreRule]:
    """Rewrite raw ignore-file lines into rules anchored at ``base``.

    Args:
        lines: Raw lines of one or more ignore files.
        base: Posix path of the declaring directory relative to the scan
            root ("" for the root itself).

    Returns:
        Anchored rules in source order.
    """
    base = _GLOB_SPECIAL.sub(r"\\\1", base)
    rules: list[IgnoreRule] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        negated = line.startswith("!")
        core = line[1:] if negated else line
        if not core:
            continue

        directory_only = False
        if len(core) > 1 and core.endswith("/") and not core.endswith("\\/"):
            core = core[:-1]
            directory_only = True

        if core.startswith("/"):
            body = core[1:]
            if not body:
                continue
            anchored = posixpath.join(base, body)
        elif "/" in core:
            anchored = posixpath.join(base, core)
        else:
            anchored = posixpath.join(base, "**", core)

        rules.append(IgnoreRule(anchored, negated=negated, directory_only=directory_only))
    return rules


class RuleSet:
    """Ordered, immutable collection of anchored rules.

    Later rules override earlier ones: the last rule that matches a candidate
    decides whether it is ignored.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[IgnoreRule] = ()) -> None:
        self._rules: tuple[IgnoreRule, ...] = tuple(rules)

    @classmethod
    def from_lines(cls, lines: Iterable[str], base: str = "") -> RuleSet:
        """Build a rule set from raw lines declared in ``base``."""
        return cls(translate_patterns(lines, base))

    def extend(self, rules: Sequence[IgnoreRule]) -> RuleSet:
        """Return a new snapshot with ``rules`` appended.

        Returns ``self`` unchanged when there is nothing to add.
        """
        if not rules:
            return self
        return RuleSet(self._rules + tuple(rules))

    def is_ignored(self, candidate: str) -> bool:
        """Return True if the last matching rule excludes ``candidate``."""
        for rule in reversed(self._rules):
            if rule.matches(candidate):
                return not rule.negated
        return False

    @property
    def rules(self) -> tuple[IgnoreRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[IgnoreRule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({len(self._rules)} rules)"


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile an include glob into a case-insensitive full-match regex.

    ``**`` matches anything including ``/``, ``*`` any run without ``/``,
    ``?`` one character other than ``/``. Everything else is literal.
    """
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if pattern.startswith("**", i):
            parts.append(".*")
            i += 2
            continue
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts), re.IGNORECASE)


class IncludeFilter:
    """Basename allow-list built from include globs.

    An empty filter accepts everything.
    """

    def __init__(self, patterns: Iterable[str] | None = None) -> None:
        self.patterns = [p.strip() for p in (patterns or ()) if p and p.strip()]
        self._compiled = [glob_to_regex(p) for p in self.patterns]

    def __bool__(self) -> bool:
        return bool(self._compiled)

    def accepts(self, name: str) -> bool:
        """Return True if ``name`` matches any include glob."""
        if not self._compiled:
            return True
        return any(regex.fullmatch(name) for regex in self._compiled)


def parse_include_patterns(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated include list, e.g. ``"*.py, *.toml"``."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]
