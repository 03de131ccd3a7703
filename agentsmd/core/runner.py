"""End-to-end run: bootstrap, scan, aggregate, merge, write."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from agentsmd.core.aggregate import aggregate_files
from agentsmd.core.config import OUTPUT_FILENAME, RunOptions
from agentsmd.core.errors import OutputError, TargetDirectoryError
from agentsmd.core.logging_setup import get_logger
from agentsmd.core.policy import load_policy_text
from agentsmd.core.project import resolve_project_name
from agentsmd.core.scan import scan_directory
from agentsmd.core.stubs import generate_declarations
from agentsmd.core.tags import replace_or_append_block

logger = get_logger(__name__)

AGENTS_IGNORE = ".agentsignore"

DeclarationGenerator = Callable[[Iterable[Path]], Mapping[Path, str]]


@dataclass(frozen=True)
class RunResult:
    """Summary of a completed run."""

    output_path: Path
    file_count: int
    project_name: str | None
    created_ignore_file: bool


def resolve_root(target: Path | str) -> Path:
    """Resolve the directory to scan.

    Raises:
        TargetDirectoryError: If it does not exist or is not a directory.
    """
    try:
        root = Path(target).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise TargetDirectoryError(target, str(e)) from e
    if not root.is_dir():
        raise TargetDirectoryError(target, "not a directory")
    return root


def ensure_default_ignore(root: Path) -> bool:
    """Write the default ``.agentsignore`` into ``root`` if none exists.

    Returns:
        True if a file was created. Write failures are logged, not raised.
    """
    path = root / AGENTS_IGNORE
    if path.exists():
        return False
    try:
        path.write_text(load_policy_text("default"), encoding="utf-8")
    except OSError as e:
        logger.warning("Could not create default %s: %s", path, e)
        return False
    logger.info("Created default %s", path)
    return True


def read_existing(path: Path) -> str:
    """Existing document text, or "" if it does not exist yet.

    Undecodable bytes are replaced rather than treated as a failure.
    """
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return ""
    except OSError as e:
        raise OutputError(path, e) from e


def run(
    options: RunOptions,
    declaration_generator: DeclarationGenerator = generate_declarations,
) -> RunResult:
    """Regenerate the tagged block of ``agents.md`` under ``options.root``.

    Args:
        options: Validated run options.
        declaration_generator: Collaborator producing stub text per source
            file; only called when ``options.stubs`` is set.

    Returns:
        Summary of the run.

    Raises:
        TargetDirectoryError: If the root cannot be resolved.
        OutputError: If the document cannot be read back or written.
    """
    root = resolve_root(options.root)
    created = ensure_default_ignore(root)

    files = scan_directory(
        root,
        follow_symlinks=options.follow_symlinks,
        include_patterns=options.include_patterns,
        exclude_docs=options.exclude_docs,
        exclude_tests=options.exclude_tests,
        exclude_styles=options.exclude_styles,
    )
    # Never embed the output document in itself, even if un-ignored
    files = [path for path in files if path.name != OUTPUT_FILENAME]

    declarations = declaration_generator(files) if options.stubs else None

    content = aggregate_files(
        files,
        root,
        line_limit=options.line_limit,
        char_limit=options.char_limit,
        declarations=declarations,
    )

    project_name = resolve_project_name(root, options.project_name)
    attributes = {"project-name": project_name} if project_name else None

    output_path = root / OUTPUT_FILENAME
    updated = replace_or_append_block(
        read_existing(output_path), content, tag_name=options.tag_name, attributes=attributes
    )
    try:
        output_path.write_text(updated, encoding="utf-8")
    except OSError as e:
        raise OutputError(output_path, e) from e

    logger.debug("Wrote %d characters to %s", len(updated), output_path)
    return RunResult(
        output_path=output_path,
        file_count=len(files),
        project_name=project_name,
        created_ignore_file=created,
    )
