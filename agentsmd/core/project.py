"""Project name detection from manifest files."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from agentsmd.core.logging_setup import get_logger

logger = get_logger(__name__)


def _name_from_pyproject(path: Path) -> str | None:
    with open(path, "rb") as f:
        data = tomllib.load(f)
    for table in (data.get("project", {}), data.get("tool", {}).get("poetry", {})):
        name = table.get("name") if isinstance(table, dict) else None
        if isinstance(name, str) and name.strip():
            return name.strip()
    return None


def _name_from_package_json(path: Path) -> str | None:
    with open(path, encoding="utf-8") as f:
        data: Any = json.load(f)
    name = data.get("name") if isinstance(data, dict) else None
    if isinstance(name, str) and name.strip():
        return name.strip()
    return None


_MANIFESTS = (
    ("pyproject.toml", _name_from_pyproject),
    ("package.json", _name_from_package_json),
)


def detect_project_name(root: Path) -> str | None:
    """Return the name declared by the first readable manifest in ``root``.

    ``pyproject.toml`` (``[project]`` then ``[tool.poetry]``) is consulted
    before ``package.json``. Broken manifests are skipped.
    """
    for filename, reader in _MANIFESTS:
        path = root / filename
        if not path.is_file():
            continue
        try:
            name = reader(path)
        except (OSError, ValueError) as e:
            # tomllib.TOMLDecodeError and json.JSONDecodeError are ValueErrors
            logger.debug("Ignoring unreadable manifest %s: %s", path, e)
            continue
        if name:
            return name
    return None


def resolve_project_name(root: Path, override: str | None = None) -> str | None:
    """Explicit ``override`` wins over any detected name."""
    if override and override.strip():
        return override.strip()
    return detect_project_name(root)
