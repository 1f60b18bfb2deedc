"""ID number checksum and field format validation.

This module implements the Verhoeff checksum used by 12-digit Aadhaar
numbers and the format checks applied to extracted fields.

References:
    - J. Verhoeff, "Error Detecting Decimal Codes", Mathematical Centre
      Tracts 29, 1969
    - https://uidai.gov.in/ (Aadhaar numbering scheme)
"""

import re
from datetime import datetime
from typing import Optional

from .constants import ID_NUMBER_LENGTH

# Dihedral group D5 multiplication table
_MULTIPLICATION = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    (1, 2, 3, 4, 0, 6, 7, 8, 9, 5),
    (2, 3, 4, 0, 1, 7, 8, 9, 5, 6),
    (3, 4, 0, 1, 2, 8, 9, 5, 6, 7),
    (4, 0, 1, 2, 3, 9, 5, 6, 7, 8),
    (5, 9, 8, 7, 6, 0, 4, 3, 2, 1),
    (6, 5, 9, 8, 7, 1, 0, 4, 3, 2),
    (7, 6, 5, 9, 8, 2, 1, 0, 4, 3),
    (8, 7, 6, 5, 9, 3, 2, 1, 0, 4),
    (9, 8, 7, 6, 5, 4, 3, 2, 1, 0),
)

# Position-dependent permutation table
_PERMUTATION = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    (1, 5, 7, 6, 2, 8, 3, 0, 9, 4),
    (5, 8, 0, 3, 7, 9, 6, 1, 4, 2),
    (8, 9, 1, 6, 0, 4, 3, 5, 2, 7),
    (9, 4, 5, 3, 1, 2, 6, 8, 7, 0),
    (4, 2, 8, 6, 5, 7, 3, 9, 0, 1),
    (2, 7, 9, 3, 8, 0, 6, 4, 1, 5),
    (7, 0, 4, 6, 9, 1, 3, 2, 5, 8),
)

_INVERSE = (0, 4, 3, 2, 1, 5, 6, 7, 8, 9)

_DATE_FORMAT_RE = re.compile(r"^(\d{2})[/\-](\d{2})[/\-](\d{4})$")


def calculate_check_digit(number_prefix: str) -> int:
    """Calculate the Verhoeff check digit for a digit string.

    Args:
        number_prefix: Digits without the check digit (11 for an ID number)

    Returns:
        Check digit (0-9)

    Raises:
        ValueError: If input is empty or contains non-digit characters

    Example:
        >>> calculate_check_digit("23601234567")
        7
    """
    if not number_prefix:
        raise ValueError("Expected at least one digit, got empty string")
    if not number_prefix.isdigit() or not number_prefix.isascii():
        raise ValueError(f"Invalid character in number: {number_prefix!r}")

    c = 0
    # Digits are processed right to left, shifted by one for the missing check digit
    for i, char in enumerate(reversed(number_prefix)):
        c = _MULTIPLICATION[c][_PERMUTATION[(i + 1) % 8][int(char)]]
    return _INVERSE[c]


def validate_check_digit(number: str) -> bool:
    """Validate a digit string whose last digit is a Verhoeff check digit.

    Args:
        number: Full digit string including the check digit

    Returns:
        True if the checksum is valid, False otherwise (including non-digit input)

    Example:
        >>> validate_check_digit("236012345677")
        True
        >>> validate_check_digit("236012345674")
        False
    """
    if not number or not number.isdigit() or not number.isascii():
        return False

    c = 0
    for i, char in enumerate(reversed(number)):
        c = _MULTIPLICATION[c][_PERMUTATION[i % 8][int(char)]]
    return c == 0


def validate_id_number_format(number: str) -> bool:
    """Check an ID number is exactly 12 ASCII digits not starting with 0 or 1.

    Args:
        number: Candidate ID number without separators

    Returns:
        True if format is valid, False otherwise

    Example:
        >>> validate_id_number_format("236012345677")
        True
        >>> validate_id_number_format("036012345677")
        False
    """
    if len(number) != ID_NUMBER_LENGTH:
        return False
    if not number.isdigit() or not number.isascii():
        return False
    return number[0] not in ("0", "1")


def is_valid_id_number(number: str) -> bool:
    """Format and checksum validation combined."""
    return validate_id_number_format(number) and validate_check_digit(number)


def parse_date(text: str) -> Optional[datetime]:
    """Parse a DD/MM/YYYY or DD-MM-YYYY date.

    Args:
        text: Date string

    Returns:
        Parsed datetime, or None if the format or calendar date is invalid.
    """
    match = _DATE_FORMAT_RE.match(text.strip()) if text else None
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def validate_date_format(text: str) -> bool:
    """Check a date is DD/MM/YYYY (or DD-MM-YYYY) and a real calendar date.

    Example:
        >>> validate_date_format("15/08/1995")
        True
        >>> validate_date_format("31/02/1995")
        False
    """
    return parse_date(text) is not None
