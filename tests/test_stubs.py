from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from agentsmd.core import stubs
from agentsmd.core.stubs import generate_declarations, generate_stub, stubgen_command


def fake_stubgen(returncode: int = 0, write: bool = True):
    calls: list[list[str]] = []

    def run(cmd: list[str], **kwargs) -> subprocess.CompletedProcess[str]:
        calls.append(cmd)
        out_dir = Path(cmd[cmd.index("-o") + 1])
        source = Path(cmd[-1])
        if write and returncode == 0:
            (out_dir / "pkg").mkdir(exist_ok=True)
            (out_dir / "pkg" / f"{source.stem}.pyi").write_text(
                f"# stub for {source.name}\n", encoding="utf-8"
            )
        return subprocess.CompletedProcess(cmd, returncode, "", "boom" if returncode else "")

    return run, calls


def test_stubgen_command_targets_output_dir(tmp_path: Path) -> None:
    cmd = stubgen_command(tmp_path / "mod.py", tmp_path / "out")
    assert cmd[1:3] == ["-m", "mypy.stubgen"]
    assert cmd[-1] == str(tmp_path / "mod.py")
    assert cmd[cmd.index("-o") + 1] == str(tmp_path / "out")


def test_generate_declarations_only_for_python(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    run, calls = fake_stubgen()
    monkeypatch.setattr(stubs.subprocess, "run", run)
    files = [tmp_path / "a.py", tmp_path / "b.pyi", tmp_path / "c.ts", tmp_path / "d.py"]

    result = generate_declarations(files, concurrency=1)

    assert result == {
        tmp_path / "a.py": "# stub for a.py\n",
        tmp_path / "d.py": "# stub for d.py\n",
    }
    assert len(calls) == 2


def test_failures_are_omitted(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    run, _ = fake_stubgen(returncode=1)
    monkeypatch.setattr(stubs.subprocess, "run", run)

    result = generate_stub(tmp_path / "a.py")

    assert result.content is None
    assert "code 1" in (result.error or "")
    assert generate_declarations([tmp_path / "a.py"]) == {}


def test_missing_output_is_a_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    run, _ = fake_stubgen(write=False)
    monkeypatch.setattr(stubs.subprocess, "run", run)
    assert generate_stub(tmp_path / "a.py").error == "stubgen produced no output"


def test_launch_errors_are_omitted(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(cmd, **kwargs):
        raise FileNotFoundError("no interpreter")

    monkeypatch.setattr(stubs.subprocess, "run", broken)
    assert generate_declarations([tmp_path / "a.py"]) == {}


def test_no_python_sources_runs_nothing(monkeypatch: pytest.MonkeyPatch) -> None:
    run, calls = fake_stubgen()
    monkeypatch.setattr(stubs.subprocess, "run", run)
    assert generate_declarations([Path("x.ts")]) == {}
    assert calls == []
