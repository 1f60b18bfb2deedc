"""Transcript tokenization.

Turns a raw OCR transcript into the two views every extractor works on:
a LineSequence (trimmed, non-empty lines in original order) and a
digits-only variant used for ID number matching.
"""

import re
from typing import List

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
_NON_DIGIT_RE = re.compile(r"[^0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def to_lines(text: str) -> List[str]:
    """Split a transcript into trimmed, non-empty lines.

    Args:
        text: Raw OCR transcript

    Returns:
        LineSequence preserving original order; duplicates are kept.

    Example:
        >>> to_lines("  Government of India \\n\\n Rahul Kumar ")
        ['Government of India', 'Rahul Kumar']
    """
    if not text:
        return []
    lines = (line.strip() for line in _LINE_BREAK_RE.split(text))
    return [line for line in lines if line]


def to_digit_text(text: str) -> str:
    """Replace non-digits with spaces and collapse whitespace runs.

    Args:
        text: Raw OCR transcript

    Returns:
        Digit groups separated by single spaces.

    Example:
        >>> to_digit_text("No: 1234-5678 9012\\nDOB")
        '1234 5678 9012'
    """
    if not text:
        return ""
    cleaned = _NON_DIGIT_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def contains_any(line: str, keywords) -> bool:
    """Check whether a lowercased line contains any keyword substring."""
    lower = line.lower()
    return any(keyword in lower for keyword in keywords)
