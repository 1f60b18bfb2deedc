"""Date of birth extraction."""

import logging
from typing import List, Optional

from .constants import (
    DATE_RE,
    DOB_COMPACT_PATTERN,
    DOB_LABELLED_PATTERNS,
    GENDER_KEYWORDS,
    GENDER_LOOKBACK_LINES,
)
from .tokenizer import contains_any
from .types import NOT_FOUND

logger = logging.getLogger(__name__)


def find_labelled_dob(text: str) -> Optional[str]:
    """Match "DOB:", "Date of Birth:" or "Birth:" followed by a date.

    The compact form "DOB: DDMMYYYY" is reassembled as DD/MM/YYYY.
    """
    for pattern in DOB_LABELLED_PATTERNS:
        match = pattern.search(text)
        if match:
            logger.debug(f"Found DOB: {match.group(1)}")
            return match.group(1)

    match = DOB_COMPACT_PATTERN.search(text)
    if match:
        day, month, year = match.groups()
        logger.debug(f"Found DOB (DDMMYYYY): {day}/{month}/{year}")
        return f"{day}/{month}/{year}"

    return None


def find_date_near_gender(lines: List[str]) -> Optional[str]:
    """Look for a date on a gender line or on the two lines above it.

    Lines are scanned from the earliest candidate down to the gender line.
    """
    for i, line in enumerate(lines):
        if not contains_any(line, GENDER_KEYWORDS):
            continue
        for j in range(max(0, i - GENDER_LOOKBACK_LINES), i + 1):
            match = DATE_RE.search(lines[j])
            if match:
                logger.debug(f"Found DOB near gender: {match.group(1)}")
                return match.group(1)
    return None


def extract_date_of_birth(text: str) -> str:
    """Extract the date of birth from a front-side transcript.

    Args:
        text: Raw OCR transcript

    Returns:
        The date as printed (DD/MM/YYYY or DD-MM-YYYY), or ``"Not found"``.

    Example:
        >>> extract_date_of_birth("DOB: 15081995")
        '15/08/1995'
    """
    if not text:
        return NOT_FOUND

    dob = find_labelled_dob(text)
    if dob is None:
        # Raw lines: positions must match the transcript, blanks included
        dob = find_date_near_gender(text.split("\n"))

    return dob if dob is not None else NOT_FOUND
