"""12-digit ID number extraction.

The transcript is reduced to digits and single spaces first, so separators
misread by OCR ("1234-5678 9012", "1234.5678.9012") do not matter. Three
grouping patterns are then tried in order: 4-4-4, contiguous 12 and 3-3-3-3.
"""

import logging
from typing import List

from .constants import ID_NUMBER_LENGTH, ID_NUMBER_PATTERNS
from .tokenizer import to_digit_text
from .types import NOT_FOUND

logger = logging.getLogger(__name__)


def extract_id_number_candidates(text: str) -> List[str]:
    """Return every 12-digit reconstruction in pattern, then match order.

    Args:
        text: Raw OCR transcript (or several transcripts joined by a space)

    Returns:
        List of 12-digit strings; may contain duplicates.
    """
    digit_text = to_digit_text(text)
    candidates = []

    for pattern in ID_NUMBER_PATTERNS:
        for match in pattern.finditer(digit_text):
            number = "".join(match.groups())
            if len(number) == ID_NUMBER_LENGTH:
                candidates.append(number)

    return candidates


def extract_id_number(text: str) -> str:
    """Extract the first 12-digit ID number from a transcript.

    Args:
        text: Raw OCR transcript

    Returns:
        Exactly 12 ASCII digits, or ``"Not found"``.

    Example:
        >>> extract_id_number("Aadhaar No: 2360 1234 5677")
        '236012345677'
    """
    candidates = extract_id_number_candidates(text)
    if not candidates:
        logger.debug("No 12-digit ID number found in transcript")
        return NOT_FOUND

    logger.debug(f"Found ID number candidate(s): {len(candidates)}")
    return candidates[0]
