"""Command-line interface for agentsmd using Typer.

Usage:
    agentsmd [TARGET_DIR] [options]

Scans TARGET_DIR (default: current directory), honoring .gitignore and
.agentsignore files at every level, and writes the aggregated sources into
the tagged block of TARGET_DIR/agents.md.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from agentsmd.core.config import (
    CONFIG_FILENAME,
    build_options,
    create_default_config,
    load_config,
    load_config_or_default,
)
from agentsmd.core.errors import AgentsMdError, ConfigError
from agentsmd.core.logging_setup import setup_logging
from agentsmd.core.runner import resolve_root, run

console = Console()

app = typer.Typer(
    name="agentsmd",
    help="Aggregate a project's text files into agents.md for AI coding assistants.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Typer option metadata constants to avoid function calls in annotations/defaults
TARGET_ARGUMENT = typer.Argument(
    help="Directory to scan",
    show_default=True,
)
FOLLOW_OPTION = typer.Option(
    "--follow",
    "-f",
    help="Follow symlinks (guards against cycles)",
)
DOCS_OPTION = typer.Option(
    "--docs",
    "-d",
    help="Exclude documentation files (README, LICENSE, *.md, ...)",
)
INCLUDE_OPTION = typer.Option(
    "--include",
    "-i",
    help='Only include files matching these comma-separated globs, e.g. "*.py, *.toml"',
)
LINES_OPTION = typer.Option(
    "--lines",
    "-l",
    help="Limit each file to N lines",
)
CHARS_OPTION = typer.Option(
    "--chars",
    "-c",
    help="Limit total output to N characters",
)
NO_TESTS_OPTION = typer.Option(
    "--no-tests",
    help="Exclude test files (test_*.py, *.test.*, tests/, ...)",
)
NO_STYLES_OPTION = typer.Option(
    "--no-styles",
    help="Exclude stylesheets (*.css, *.scss, ...)",
)
PROJECT_OPTION = typer.Option(
    "--project",
    "-p",
    help="Project name for the tag attribute (default: from pyproject.toml/package.json)",
)
TAG_OPTION = typer.Option(
    "--tag",
    "-t",
    help="Custom tag name for the generated block",
)
STUBS_OPTION = typer.Option(
    "--stubs",
    help="Append generated .pyi stubs for Python files (requires mypy)",
)
CONFIG_OPTION = typer.Option(
    "--config",
    "-C",
    help=f"Options file (default: TARGET_DIR/{CONFIG_FILENAME} if present)",
)
INIT_CONFIG_OPTION = typer.Option(
    "--init-config",
    help=f"Write a default {CONFIG_FILENAME} into TARGET_DIR and exit",
)
VERBOSE_OPTION = typer.Option(
    "--verbose",
    "-v",
    help="Show debug diagnostics on stderr",
)


def _cli_overrides(
    follow: bool,
    docs: bool,
    include: str | None,
    lines: int | None,
    chars: int | None,
    no_tests: bool,
    no_styles: bool,
    project: str | None,
    tag: str | None,
    stubs: bool,
) -> dict[str, Any]:
    """Option values explicitly set on the command line."""
    overrides: dict[str, Any] = {}
    if follow:
        overrides["follow_symlinks"] = True
    if docs:
        overrides["exclude_docs"] = True
    if no_tests:
        overrides["exclude_tests"] = True
    if no_styles:
        overrides["exclude_styles"] = True
    if stubs:
        overrides["stubs"] = True
    if include is not None:
        overrides["include_patterns"] = include
    if lines is not None:
        overrides["line_limit"] = lines
    if chars is not None:
        overrides["char_limit"] = chars
    if project is not None:
        overrides["project_name"] = project
    if tag is not None:
        overrides["tag_name"] = tag
    return overrides


@app.command()
def main(
    target_dir: Annotated[Path, TARGET_ARGUMENT] = Path("."),
    follow: Annotated[bool, FOLLOW_OPTION] = False,
    docs: Annotated[bool, DOCS_OPTION] = False,
    include: Annotated[str | None, INCLUDE_OPTION] = None,
    lines: Annotated[int | None, LINES_OPTION] = None,
    chars: Annotated[int | None, CHARS_OPTION] = None,
    no_tests: Annotated[bool, NO_TESTS_OPTION] = False,
    no_styles: Annotated[bool, NO_STYLES_OPTION] = False,
    project: Annotated[str | None, PROJECT_OPTION] = None,
    tag: Annotated[str | None, TAG_OPTION] = None,
    stubs: Annotated[bool, STUBS_OPTION] = False,
    config_path: Annotated[Path | None, CONFIG_OPTION] = None,
    init_config: Annotated[bool, INIT_CONFIG_OPTION] = False,
    verbose: Annotated[bool, VERBOSE_OPTION] = False,
) -> None:
    """Update the tagged source dump in TARGET_DIR/agents.md."""
    setup_logging(verbosity="debug" if verbose else "warning")

    try:
        root = resolve_root(target_dir)

        if init_config:
            path = root / CONFIG_FILENAME
            create_default_config(path)
            console.print(f"[green]Created {escape(str(path))}[/green]")
            return

        if config_path is not None:
            file_values = load_config(config_path)
        else:
            file_values = load_config_or_default(root / CONFIG_FILENAME)

        overrides = _cli_overrides(
            follow, docs, include, lines, chars, no_tests, no_styles, project, tag, stubs
        )
        options = build_options(**{**file_values, **overrides, "root": root})

        result = run(options)

        if result.created_ignore_file:
            console.print(f"[dim]Created default .agentsignore in {escape(str(root))}[/dim]")
        console.print(
            f"[green]Successfully updated {escape(str(result.output_path))} "
            f"with {result.file_count} files.[/green]"
        )

    except ConfigError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(2)
    except AgentsMdError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        import traceback

        traceback.print_exc()
        sys.exit(1)


def entrypoint() -> None:
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    entrypoint()
