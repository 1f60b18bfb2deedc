"""
Shared Constants for ID Card Extraction and Validation

This module holds every keyword list and weight table consumed by the
extractors, the side classifier and the pair validator. All tables are
tuples or frozensets of frozen records so they cannot be mutated at runtime.

Changing any of these lists shifts extraction and classification outcomes.
Bump RULES_VERSION whenever an entry is added, removed or re-weighted.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

RULES_VERSION = "1.1"

# ============================================================================
# ID Number Constants
# ============================================================================
ID_NUMBER_LENGTH = 12  # 12 digits, printed as three groups of four

# Bare grouped number line, e.g. "1234 5678 9012" or "123456789012"
GROUPED_ID_LINE_RE = re.compile(r"^\d{4}\s?\d{4}\s?\d{4}$")
# Grouped or contiguous 12 digit number anywhere in the text
ID_NUMBER_ANYWHERE_RE = re.compile(r"\d{4}\s?\d{4}\s?\d{4}")
# Strictly space-grouped number ("1234 5678 9012") as printed on the front
GROUPED_ID_RE = re.compile(r"\b\d{4}\s\d{4}\s\d{4}\b")

ID_NUMBER_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\b(\d{4})\s+(\d{4})\s+(\d{4})\b"),  # 1234 5678 9012
    re.compile(r"\b(\d{4})(\d{4})(\d{4})\b"),  # 123456789012
    re.compile(r"\b(\d{3})\s+(\d{3})\s+(\d{3})\s+(\d{3})\b"),  # 123 456 789 012
)

# ============================================================================
# Relation Markers
# ============================================================================
# "Daughter of", "Son of", "Wife of" abbreviations that anchor names/addresses
RELATION_MARKERS: Tuple[str, ...] = ("d/o", "s/o", "w/o")
RELATION_MARKER_NAME_RE = re.compile(r"([A-Za-z\s]+)\s+(?:D/O|S/O|W/O)", re.IGNORECASE)
# Only a "D/O" line is followed by a separate parent name line
PARENT_NAME_MARKER = "d/o"

# ============================================================================
# Name Extraction Keywords
# ============================================================================
ENROLMENT_MARKERS: Tuple[str, ...] = ("enrolment", "enrollment")

# Lines skipped while looking for the name after the enrolment header
HEADER_SKIP_KEYWORDS: Tuple[str, ...] = (
    "government",
    "authority",
    "india",
    "unique identification",
    "enrolment",
    "enrollment",
    "no.",
    "mobile",
    "phone",
    "aadhaar",
    "dob",
    "date",
    "birth",
    "female",
    "male",
)

# Lines skipped by the proper-case fallback
BOILERPLATE_KEYWORDS: Tuple[str, ...] = (
    "government",
    "authority",
    "india",
    "unique identification",
    "enrolment",
    "aadhaar",
)

# A following line containing one of these disqualifies a proper-case name
NAME_TRAILER_KEYWORDS: Tuple[str, ...] = ("government", "authority")

# Substrings that disqualify a line from being a name
NAME_EXCLUDE_WORDS: Tuple[str, ...] = (
    "government",
    "authority",
    "india",
    "unique",
    "identification",
    "enrolment",
    "enrollment",
    "aadhaar",
    "mobile",
    "phone",
    "address",
    "dob",
    "date",
    "birth",
    "male",
    "female",
    "pin",
    "code",
    "state",
    "district",
    # Locale boilerplate seen on Kerala-issued cards
    "kerala",
    "kannur",
    # Back-side instructions ("Your Aadhaar card helps you avail various...")
    "your",
    "no",
    "card",
    "helps",
    "valid",
    "throughout",
    "country",
    "avail",
    "various",
    "services",
    "carry",
    "smart",
    "keep",
    "updated",
    "email",
)

NAME_ALLOWED_CHARS_RE = re.compile(r"^[A-Za-z\s.'-]+$")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
NAME_MAX_WORDS = 4
NAME_MAX_UPPERCASE_LENGTH = 10

# ============================================================================
# Date of Birth Patterns
# ============================================================================
DOB_LABELLED_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"DOB\s*:?\s*(\d{2}[/\-]\d{2}[/\-]\d{4})", re.IGNORECASE),
    re.compile(r"Date\s+of\s+Birth\s*:?\s*(\d{2}[/\-]\d{2}[/\-]\d{4})", re.IGNORECASE),
    re.compile(r"Birth\s*:?\s*(\d{2}[/\-]\d{2}[/\-]\d{4})", re.IGNORECASE),
)
DOB_COMPACT_PATTERN = re.compile(r"DOB\s*:?\s*(\d{2})(\d{2})(\d{4})", re.IGNORECASE)
DATE_RE = re.compile(r"(\d{2}[/\-]\d{2}[/\-]\d{4})")
GENDER_KEYWORDS: Tuple[str, ...] = ("female", "male")
GENDER_LOOKBACK_LINES = 2

# ============================================================================
# Address Extraction Keywords
# ============================================================================
ADDRESS_EXCLUDE_KEYWORDS: Tuple[str, ...] = (
    "government",
    "authority",
    "mobile",
    "aadhaar",
    "dob",
    "female",
    "male",
)
ADDRESS_STOP_KEYWORD = "mobile"
ADDRESS_MIN_LINE_LENGTH = 3  # lines must be longer than 2 characters
ADDRESS_MAX_LINES = 5
ADDRESS_SEPARATOR = ", "

# ============================================================================
# Content Validation Keywords
# ============================================================================
INSTITUTIONAL_KEYWORDS: Tuple[str, ...] = (
    "government of india",
    "govt of india",
    "govt. of india",
    "unique identification",
    "authority of india",
    "uidai",
    "aadhaar",
    "aadhar",
    "enrolment",
    "enrollment",
)
PERSONAL_INFO_KEYWORDS: Tuple[str, ...] = ("dob", "date", "birth", "male", "female")
ADDRESS_CONTEXT_KEYWORDS: Tuple[str, ...] = (
    "address",
    "c/o",
    "s/o",
    "d/o",
    "w/o",
    "house",
    "street",
    "road",
    "nagar",
    "village",
    "vtc",
    "post",
    "district",
    "dist",
    "state",
    "pin code",
)
PIN_CODE_RE = re.compile(r"\b\d{6}\b")
# 1947 is the helpline only after a call label; a bare 1947 may be a birth year
CONTACT_RE = re.compile(
    r"uidai\.gov\.in|www\.|help@"
    r"|(?:call|helpline|toll\s*free|phone|tel)\D{0,12}\b1947\b"
    r"|1800\s?\d{3}\s?\d{4}"
)
DOB_OR_GENDER_RE = re.compile(r"\b(dob|date of birth|year of birth|birth|male|female)\b")


# ============================================================================
# Side Indicator Tables
# ============================================================================
@dataclass(frozen=True)
class IndicatorRule:
    """A weighted pattern that votes for one card side.

    Attributes:
        name: Short identifier used in logs and score breakdowns
        pattern: Compiled pattern matched against the lowercased transcript
        weight: Score added when the pattern matches
        match_digits: Also match against the digits-only transcript
    """

    name: str
    pattern: Pattern[str]
    weight: int
    match_digits: bool = False


FRONT_INDICATORS: Tuple[IndicatorRule, ...] = (
    IndicatorRule("government_header", re.compile(r"government of india|govt\.? of india"), 2),
    IndicatorRule("grouped_id_number", GROUPED_ID_RE, 3, match_digits=True),
    IndicatorRule("dob_label", re.compile(r"\b(dob|date of birth|year of birth)\b"), 2),
    IndicatorRule("gender", re.compile(r"\b(male|female|transgender)\b"), 2),
    IndicatorRule("vid", re.compile(r"\bvid\s*:"), 1),
    IndicatorRule("identity_tagline", re.compile(r"aadhaar.{0,20}(common man|adhikar)|mera aadhaar"), 1),
)

BACK_INDICATORS: Tuple[IndicatorRule, ...] = (
    IndicatorRule("uidai_header", re.compile(r"unique identification authority"), 3),
    IndicatorRule("address_label", re.compile(r"\baddress\b"), 3),
    IndicatorRule("contact", CONTACT_RE, 2),
    IndicatorRule("relation_marker", re.compile(r"\b(c/o|s/o|d/o|w/o)\b"), 1),
    IndicatorRule("pin_code", re.compile(r"\b[1-9]\d{5}\b"), 1),
    IndicatorRule("locality", re.compile(r"\b(district|dist|vtc|po|state|pin code)\b"), 1),
)

SIDE_MIN_SCORE = 3
