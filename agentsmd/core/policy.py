"""Built-in ignore policies shipped as data files.

The default policy is what gets written to a fresh ``.agentsignore`` and is
always applied at the scan root. The optional policies are switched on by the
``--docs``, ``--no-tests`` and ``--no-styles`` flags.
"""

from __future__ import annotations

from functools import cache
from importlib.resources import files
from typing import Literal

PolicyName = Literal["default", "docs", "tests", "styles"]


@cache
def load_policy_text(name: PolicyName) -> str:
    """Return the raw text of a bundled policy file."""
    resource = files("agentsmd") / "data" / f"{name}.agentsignore"
    return resource.read_text(encoding="utf-8")


def load_policy_lines(name: PolicyName) -> list[str]:
    """Return a bundled policy as a list of raw ignore-file lines."""
    return load_policy_text(name).splitlines()


def root_policy_lines(
    exclude_docs: bool = False,
    exclude_tests: bool = False,
    exclude_styles: bool = False,
) -> list[str]:
    """Compose the root-level policy for a scan.

    The default policy always comes first so the optional blocks can
    override its negations.
    """
    lines = load_policy_lines("default")
    if exclude_docs:
        lines.extend(load_policy_lines("docs"))
    if exclude_tests:
        lines.extend(load_policy_lines("tests"))
    if exclude_styles:
        lines.extend(load_policy_lines("styles"))
    return lines
