"""Tests for tagged-block merging."""

from agentsmd.core.tags import (
    DEFAULT_TAG_NAME,
    make_close_tag,
    make_open_tag,
    replace_or_append_block,
)

OPEN_TAG = make_open_tag()
CLOSE_TAG = make_close_tag()


def test_default_tags():
    assert OPEN_TAG == "<full-context-dump>"
    assert CLOSE_TAG == "</full-context-dump>"
    assert DEFAULT_TAG_NAME == "full-context-dump"


def test_open_tag_with_attributes():
    assert make_open_tag("ctx", {"project-name": "demo"}) == '<ctx project-name="demo">'
    assert make_open_tag("ctx", {"a": "1", "b": "2"}) == '<ctx a="1" b="2">'
    assert make_open_tag("ctx", {}) == "<ctx>"


def test_attribute_values_are_escaped():
    assert make_open_tag("ctx", {"project-name": 'a"b&c'}) == (
        '<ctx project-name="a&quot;b&amp;c">'
    )


def test_appends_when_no_tags_exist():
    out = replace_or_append_block("Header\nBody\n", "SRC")
    assert out == f"Header\nBody\n{OPEN_TAG}\nSRC\n{CLOSE_TAG}\n"


def test_append_adds_single_newline_separator():
    out = replace_or_append_block("Header", "SRC")
    assert out == f"Header\n{OPEN_TAG}\nSRC\n{CLOSE_TAG}\n"


def test_empty_document_becomes_block():
    assert replace_or_append_block("", "SRC") == f"{OPEN_TAG}\nSRC\n{CLOSE_TAG}\n"


def test_replaces_single_well_formed_block():
    document = f"Header\n{OPEN_TAG}\nold\n{CLOSE_TAG}\nFooter"

    out = replace_or_append_block(document, "SRC")

    assert out == f"Header\n{OPEN_TAG}\nSRC\n{CLOSE_TAG}\nFooter"


def test_collapses_multiple_blocks():
    document = "Header\n<tag>\nBlock1\n</tag>\nGarbage\n<tag>\nBlock2\n</tag>\nFooter"

    out = replace_or_append_block(document, "X", tag_name="tag")

    assert out == "Header\n<tag>\nX\n</tag>\nFooter"
    assert out.count("<tag>") == 1
    assert out.count("</tag>") == 1
    for residue in ("Block1", "Block2", "Garbage"):
        assert residue not in out


def test_missing_close_tag_replaces_to_end():
    document = f"Intro\n{OPEN_TAG}\nhalf-written dump without end"

    out = replace_or_append_block(document, "SRC")

    assert out == f"Intro\n{OPEN_TAG}\nSRC\n{CLOSE_TAG}"


def test_existing_attributes_are_ignored_when_matching():
    document = f'A\n<{DEFAULT_TAG_NAME} project-name="old">\nold\n{CLOSE_TAG}\nB'

    out = replace_or_append_block(document, "new", attributes={"project-name": "fresh"})

    assert out == f'A\n<{DEFAULT_TAG_NAME} project-name="fresh">\nnew\n{CLOSE_TAG}\nB'


def test_merge_is_idempotent():
    for document in (
        "",
        "Header",
        "Header\n",
        f"Header\n{OPEN_TAG}\nold\n{CLOSE_TAG}\n{OPEN_TAG}\nolder\n{CLOSE_TAG}\nFooter",
        f"Header\n{OPEN_TAG}\nunterminated",
    ):
        once = replace_or_append_block(document, "SRC", attributes={"project-name": "p"})
        twice = replace_or_append_block(once, "SRC", attributes={"project-name": "p"})
        assert once == twice


def test_unrelated_tags_are_preserved():
    other = "<other-dump>\nkeep me\n</other-dump>"
    document = (
        f"Header\n{other}\n"
        f"{OPEN_TAG}\nfirst\n{CLOSE_TAG}\nmiddle\n{OPEN_TAG}\nsecond\n{CLOSE_TAG}\nFooter"
    )

    out = replace_or_append_block(document, "SRC")

    assert out == f"Header\n{other}\n{OPEN_TAG}\nSRC\n{CLOSE_TAG}\nFooter"


def test_tag_name_prefix_does_not_match():
    document = f"<{DEFAULT_TAG_NAME}-v2>\nold format\n</{DEFAULT_TAG_NAME}-v2>\n"

    out = replace_or_append_block(document, "SRC")

    assert out.startswith(f"<{DEFAULT_TAG_NAME}-v2>\nold format\n</{DEFAULT_TAG_NAME}-v2>\n")
    assert out.endswith(f"{OPEN_TAG}\nSRC\n{CLOSE_TAG}\n")


def test_custom_tag_leaves_default_block_alone():
    document = f"{OPEN_TAG}\ndefault dump\n{CLOSE_TAG}\n"

    out = replace_or_append_block(document, "SRC", tag_name="codebase-snapshot")

    assert out == f"{document}<codebase-snapshot>\nSRC\n</codebase-snapshot>\n"
