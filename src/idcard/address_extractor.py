"""Address extraction.

The address block follows the relation line ("S/O: Ramesh Kumar") and runs
until a "Mobile" line or until enough lines have been collected.
"""

import logging
from typing import List

from .constants import (
    ADDRESS_EXCLUDE_KEYWORDS,
    ADDRESS_MAX_LINES,
    ADDRESS_MIN_LINE_LENGTH,
    ADDRESS_SEPARATOR,
    ADDRESS_STOP_KEYWORD,
    GROUPED_ID_LINE_RE,
    PARENT_NAME_MARKER,
    RELATION_MARKERS,
)
from .tokenizer import contains_any, to_lines
from .types import NOT_FOUND

logger = logging.getLogger(__name__)


def is_address_line(line: str) -> bool:
    return (
        len(line) >= ADDRESS_MIN_LINE_LENGTH
        and not contains_any(line, ADDRESS_EXCLUDE_KEYWORDS)
        and not GROUPED_ID_LINE_RE.match(line)
    )


def collect_address_lines(lines: List[str], max_lines: int = ADDRESS_MAX_LINES) -> List[str]:
    """Collect address lines following the first relation marker line.

    Args:
        lines: LineSequence of the transcript
        max_lines: Stop after this many lines have been collected

    Returns:
        Collected lines in transcript order (possibly empty).
    """
    parts: List[str] = []
    in_section = False

    for i, line in enumerate(lines):
        if contains_any(line, RELATION_MARKERS):
            in_section = True
            continue

        if not in_section:
            continue

        # Parent name printed right below a "D/O" line
        if i > 0 and PARENT_NAME_MARKER in lines[i - 1].lower():
            continue

        if is_address_line(line):
            parts.append(line)

        # The "Mobile" line itself is never part of the address
        if len(parts) >= max_lines or ADDRESS_STOP_KEYWORD in line.lower():
            break

    return parts


def extract_address(text: str, max_lines: int = ADDRESS_MAX_LINES) -> str:
    """Extract the address block from a transcript.

    Args:
        text: Raw OCR transcript
        max_lines: Maximum number of lines joined into the address

    Returns:
        Address lines joined with ", ", or ``"Not found"``.
    """
    parts = collect_address_lines(to_lines(text), max_lines=max_lines)
    if not parts:
        logger.debug("No address found in transcript")
        return NOT_FOUND

    address = ADDRESS_SEPARATOR.join(parts).strip()
    logger.debug(f"Found address with {len(parts)} line(s)")
    return address
