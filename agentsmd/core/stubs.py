"""Type-stub generation for Python sources via mypy's ``stubgen``.

This is an optional collaborator of the aggregation step: it turns a list of
source files into a mapping of source path to generated ``.pyi`` text, which
the aggregator appends next to each source entry. Files that fail are logged
and left out of the mapping.
"""

from __future__ import annotations

import subprocess
import sys
import tempfile
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from agentsmd.core.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_CONCURRENCY = 5
STUBGEN_TIMEOUT_S = 120.0


@dataclass(frozen=True)
class StubResult:
    """Outcome of generating a stub for one source file."""

    path: Path
    content: str | None = None
    error: str | None = None


def stubgen_command(source: Path, output_dir: Path) -> list[str]:
    return [sys.executable, "-m", "mypy.stubgen", "--quiet", "-o", str(output_dir), str(source)]


def generate_stub(source: Path) -> StubResult:
    """Run stubgen on ``source`` in a scratch directory and return the stub."""
    with tempfile.TemporaryDirectory(prefix="agentsmd-stubgen-") as tmp:
        output_dir = Path(tmp)
        try:
            completed = subprocess.run(
                stubgen_command(source, output_dir),
                capture_output=True,
                text=True,
                timeout=STUBGEN_TIMEOUT_S,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            return StubResult(source, error=str(e))

        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout).strip()
            return StubResult(
                source, error=f"stubgen exited with code {completed.returncode}: {detail}"
            )

        # stubgen mirrors the package layout, so search for the module stub
        produced = next(output_dir.rglob(f"{source.stem}.pyi"), None)
        if produced is None:
            return StubResult(source, error="stubgen produced no output")
        try:
            return StubResult(source, content=produced.read_text(encoding="utf-8"))
        except OSError as e:
            return StubResult(source, error=str(e))


def generate_declarations(
    files: Iterable[Path], concurrency: int = DEFAULT_CONCURRENCY
) -> dict[Path, str]:
    """Generate stubs for the Python sources among ``files``.

    Args:
        files: Candidate files; only ``.py`` sources are processed.
        concurrency: Number of stubgen processes per batch.

    Returns:
        Mapping from source path to stub text, for the files that succeeded.
    """
    sources = [path for path in files if path.suffix == ".py"]
    results: dict[Path, str] = {}
    if not sources:
        return results

    logger.info("Generating type stubs for %d Python file(s)", len(sources))
    concurrency = max(1, concurrency)
    with ThreadPoolExecutor(max_workers=concurrency) as executor:
        for start in range(0, len(sources), concurrency):
            batch = sources[start : start + concurrency]
            for result in executor.map(generate_stub, batch):
                if result.content is not None:
                    results[result.path] = result.content
                else:
                    logger.warning(
                        "Could not generate stub for %s: %s", result.path.name, result.error
                    )

    logger.info("Generated %d type stub(s)", len(results))
    return results
