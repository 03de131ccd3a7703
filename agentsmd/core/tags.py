"""Idempotent replacement of a tagged block inside a host document.

The generated content lives between ``<tag ...>`` and ``</tag>``. Merging
replaces everything from the first opening tag to the last closing tag, so
leftovers from interrupted earlier runs (duplicate or unbalanced blocks) are
collapsed into a single fresh block. Blocks with other tag names are never
touched.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping

DEFAULT_TAG_NAME = "full-context-dump"


def make_open_tag(
    tag_name: str = DEFAULT_TAG_NAME, attributes: Mapping[str, str] | None = None
) -> str:
    """Build an opening tag, e.g. ``<full-context-dump project-name="x">``."""
    if not attributes:
        return f"<{tag_name}>"
    attrs = " ".join(
        f'{key}="{html.escape(str(value), quote=True)}"' for key, value in attributes.items()
    )
    return f"<{tag_name} {attrs}>"


def make_close_tag(tag_name: str = DEFAULT_TAG_NAME) -> str:
    return f"</{tag_name}>"


def make_block(
    content: str,
    tag_name: str = DEFAULT_TAG_NAME,
    attributes: Mapping[str, str] | None = None,
) -> str:
    return f"{make_open_tag(tag_name, attributes)}\n{content}\n{make_close_tag(tag_name)}"


def _open_tag_regex(tag_name: str) -> re.Pattern[str]:
    # Name must be followed by whitespace, "/" or ">" so "<tag-other>" does not match
    return re.compile(rf"<{re.escape(tag_name)}(?=[\s/>])[^>]*>")


def replace_or_append_block(
    document: str,
    content: str,
    tag_name: str = DEFAULT_TAG_NAME,
    attributes: Mapping[str, str] | None = None,
) -> str:
    """Insert ``content`` as the single tagged block of ``document``.

    Args:
        document: Existing document text (may be empty).
        content: New content for the block.
        tag_name: Tag name identifying the block.
        attributes: Attributes for the opening tag. Existing attributes are
            ignored when locating the block.

    Returns:
        The updated document.
    """
    block = make_block(content, tag_name, attributes)

    match = _open_tag_regex(tag_name).search(document)
    if match is None:
        if not document:
            return f"{block}\n"
        separator = "" if document.endswith("\n") else "\n"
        return f"{document}{separator}{block}\n"

    close_tag = make_close_tag(tag_name)
    end = document.rfind(close_tag, match.end())
    if end == -1:
        return document[: match.start()] + block

    return document[: match.start()] + block + document[end + len(close_tag) :]
