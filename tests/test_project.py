from __future__ import annotations

import json
from pathlib import Path

from agentsmd.core.project import detect_project_name, resolve_project_name


def test_name_from_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo-lib"\n', encoding="utf-8")
    assert detect_project_name(tmp_path) == "demo-lib"


def test_name_from_poetry_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.poetry]\nname = "poetry-app"\n', encoding="utf-8"
    )
    assert detect_project_name(tmp_path) == "poetry-app"


def test_name_from_package_json(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "auto-detected-project", "version": "1.0.0"}), encoding="utf-8"
    )
    assert detect_project_name(tmp_path) == "auto-detected-project"


def test_pyproject_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "py"\n', encoding="utf-8")
    (tmp_path / "package.json").write_text('{"name": "js"}', encoding="utf-8")
    assert detect_project_name(tmp_path) == "py"


def test_broken_manifest_falls_through(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[project\n", encoding="utf-8")
    (tmp_path / "package.json").write_text('{"name": "js"}', encoding="utf-8")
    assert detect_project_name(tmp_path) == "js"


def test_no_manifest(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("[1, 2]", encoding="utf-8")
    assert detect_project_name(tmp_path) is None


def test_override_wins(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text('{"name": "js"}', encoding="utf-8")
    assert resolve_project_name(tmp_path, "override-project") == "override-project"
    assert resolve_project_name(tmp_path, "  ") == "js"
