"""Content aggregation into a single Markdown blob.

Files are read in bounded batches on a thread pool, then emitted strictly in
natural-sort order as::

    ./relative/path:
    ```
    <contents>
    ```

An optional per-file line limit truncates long files, and an optional total
character budget cuts the output short. Unreadable and binary files are
silently left out.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from agentsmd.core.binary import is_binary_file
from agentsmd.core.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 20

_DIGITS = re.compile(r"(\d+)")
_LINE_BREAK = re.compile(r"\r?\n")


def natural_sort_key(value: str | Path) -> tuple[list[int | str], str]:
    """Sort key comparing digit runs by value and text case-insensitively."""
    text = str(value)
    parts: list[int | str] = [
        int(chunk) if chunk.isdecimal() else chunk.casefold() for chunk in _DIGITS.split(text)
    ]
    return parts, text


def natural_sorted(paths: Iterable[Path]) -> list[Path]:
    return sorted(paths, key=natural_sort_key)


def display_path(path: Path, root: Path) -> str:
    """Header path for ``path``: ``./rel/path``, or ``../x`` outside root."""
    rel = Path(os.path.relpath(path, root)).as_posix()
    if rel.startswith(".."):
        return rel
    return f"./{rel}"


def truncate_lines(content: str, line_limit: int | None) -> str:
    """Keep the first ``line_limit`` lines and note the truncation."""
    if not line_limit or line_limit <= 0:
        return content
    lines = _LINE_BREAK.split(content)
    if len(lines) <= line_limit:
        return content
    kept = "\n".join(lines[:line_limit])
    return f"{kept}\n... (truncated to {line_limit} lines)"


def read_and_maybe_trim(path: Path, line_limit: int | None = None) -> str | None:
    """Read a text file, or return None for binary content.

    Raises:
        OSError: If the file cannot be read.
    """
    if is_binary_file(path):
        return None
    content = path.read_text(encoding="utf-8", errors="replace")
    return truncate_lines(content, line_limit)


def format_entry(header: str, content: str) -> str:
    return f"{header}:\n```\n{content}\n```\n\n"


@dataclass
class AggregatedDocument:
    """Ordered display-path -> content mapping with a character budget.

    Entries render in insertion order; ``char_limit`` of None or <= 0 means
    unlimited.
    """

    entries: dict[str, str] = field(default_factory=dict)
    char_limit: int | None = None

    def add(self, header: str, content: str) -> None:
        self.entries[header] = content

    def render(self) -> str:
        """Concatenate entries, stopping once the budget is spent.

        The entry that would overflow the budget is cut to fill it exactly;
        everything after it is dropped.
        """
        limit = self.char_limit if self.char_limit and self.char_limit > 0 else None
        chunks: list[str] = []
        used = 0
        for header, content in self.entries.items():
            entry = format_entry(header, content)
            if limit is not None and used + len(entry) > limit:
                remaining = limit - used
                if remaining > 0:
                    chunks.append(entry[:remaining])
                break
            chunks.append(entry)
            used += len(entry)
        return "".join(chunks)


def _load(path: Path, line_limit: int | None) -> str | None:
    try:
        return read_and_maybe_trim(path, line_limit)
    except OSError as e:
        logger.debug("Skipping unreadable file %s: %s", path, e)
        return None


def read_files(
    files: list[Path],
    line_limit: int | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> dict[Path, str]:
    """Read ``files`` concurrently in batches of ``batch_size``.

    Each batch completes before the next one starts, bounding the number of
    open file handles. Binary and unreadable files are absent from the result.
    """
    results: dict[Path, str] = {}
    batch_size = max(1, batch_size)
    with ThreadPoolExecutor(max_workers=batch_size) as executor:
        for start in range(0, len(files), batch_size):
            batch = files[start : start + batch_size]
            contents = list(executor.map(lambda p: _load(p, line_limit), batch))
            for path, content in zip(batch, contents, strict=True):
                if content is not None:
                    results[path] = content
    return results


def build_document(
    files: Iterable[Path],
    root: Path,
    line_limit: int | None = None,
    char_limit: int | None = None,
    declarations: Mapping[Path, str] | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> AggregatedDocument:
    """Read ``files`` and assemble them into an ``AggregatedDocument``.

    Args:
        files: Files to aggregate, in any order.
        root: Scan root used for display paths.
        line_limit: Optional per-file line limit.
        char_limit: Optional total character budget.
        declarations: Optional mapping of source file to generated stub text;
            each stub is emitted right after its source file.
        batch_size: Number of concurrent reads per batch.

    Returns:
        The assembled document.
    """
    ordered = natural_sorted(files)
    contents = read_files(ordered, line_limit=line_limit, batch_size=batch_size)

    document = AggregatedDocument(char_limit=char_limit)
    for path in ordered:
        content = contents.get(path)
        if content is None:
            continue
        document.add(display_path(path, root), content)

        if declarations and path in declarations:
            stub_header = display_path(path.with_suffix(".pyi"), root)
            document.add(f"{stub_header} (generated)", declarations[path])
    return document


def aggregate_files(
    files: Iterable[Path],
    root: Path,
    line_limit: int | None = None,
    char_limit: int | None = None,
    declarations: Mapping[Path, str] | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> str:
    """Aggregate ``files`` into the Markdown blob placed inside the tag block."""
    return build_document(
        files,
        root,
        line_limit=line_limit,
        char_limit=char_limit,
        declarations=declarations,
        batch_size=batch_size,
    ).render()
