"""Text/binary classification from a leading content sample."""

from __future__ import annotations

from pathlib import Path

SAMPLE_SIZE = 512

# Share of control bytes above which a sample is treated as binary
SUSPICIOUS_RATIO = 0.1

_ALLOWED_CONTROL = frozenset({0x09, 0x0A, 0x0D})


def is_binary(sample: bytes) -> bool:
    """Return True if ``sample`` looks like binary data.

    Only the first ``SAMPLE_SIZE`` bytes are inspected. A NUL byte anywhere in
    that window is decisive; otherwise the sample is binary when more than 10%
    of its bytes are control characters other than tab, LF and CR.
    """
    window = sample[:SAMPLE_SIZE]
    if not window:
        return False
    if b"\x00" in window:
        return True

    suspicious = sum(
        1 for byte in window if (byte < 0x20 and byte not in _ALLOWED_CONTROL) or byte == 0x7F
    )
    return suspicious / len(window) > SUSPICIOUS_RATIO


def is_binary_file(path: Path) -> bool:
    """Sniff the head of ``path``.

    An empty file is text. A file whose head cannot be read is reported as
    binary so that callers skip it.
    """
    try:
        with open(path, "rb") as f:
            sample = f.read(SAMPLE_SIZE)
    except OSError:
        return True
    return is_binary(sample)
