"""Tests for text/binary sniffing."""

from pathlib import Path

from agentsmd.core.binary import SAMPLE_SIZE, is_binary, is_binary_file


def test_empty_sample_is_text():
    assert not is_binary(b"")


def test_plain_text_is_text():
    assert not is_binary(b"def main():\n\treturn 0\r\n")


def test_nul_byte_is_binary_anywhere_in_window():
    assert is_binary(b"\x00" + b"a" * 100)
    assert is_binary(b"a" * (SAMPLE_SIZE - 1) + b"\x00")


def test_nul_byte_beyond_window_is_ignored():
    assert not is_binary(b"a" * SAMPLE_SIZE + b"\x00")


def test_control_ratio_threshold():
    # Exactly 10% control bytes is still text, anything above is binary
    assert not is_binary(b"\x01" * 10 + b"a" * 90)
    assert is_binary(b"\x01" * 11 + b"a" * 89)


def test_tab_lf_cr_are_not_suspicious():
    assert not is_binary(b"\t\n\r" * 50)


def test_delete_char_counts_as_control():
    assert is_binary(b"\x7f" * 20 + b"a" * 80)


def test_is_binary_file(tmp_path: Path):
    text = tmp_path / "a.txt"
    text.write_text("hello\n", encoding="utf-8")
    blob = tmp_path / "a.bin"
    blob.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")
    empty = tmp_path / "empty"
    empty.write_bytes(b"")

    assert not is_binary_file(text)
    assert is_binary_file(blob)
    assert not is_binary_file(empty)


def test_unreadable_file_counts_as_binary(tmp_path: Path):
    assert is_binary_file(tmp_path / "missing.txt")
