"""Card holder name extraction.

Names are the noisiest field on the card: the front carries bilingual
headers, taglines and the relation line ("D/O: ..."), and OCR often splits
or garbles them. Extraction therefore runs four heuristics in a fixed
priority order and returns the first hit:

1. **After enrolment header**: first name-like line after the
   "Enrolment No." header, or the name-like line right before a relation
   marker line.
2. **Proper-case line**: first name-like line written in proper case that
   is not followed by institutional boilerplate.
3. **Before relation marker**: the letters immediately preceding
   "D/O", "S/O" or "W/O" anywhere in the transcript.
4. **Repeated word**: the most frequent word across name-like lines
   (names are printed in two scripts and often repeat).

Example:
    >>> from src.idcard.name_extractor import extract_name
    >>> extract_name("Government of India\\nRahul Kumar\\nDOB: 01/01/1990")
    'Rahul Kumar'
"""

import logging
from collections import Counter
from typing import Callable, List, Optional, Sequence, Tuple

from .constants import (
    BOILERPLATE_KEYWORDS,
    ENROLMENT_MARKERS,
    GROUPED_ID_LINE_RE,
    HEADER_SKIP_KEYWORDS,
    NAME_ALLOWED_CHARS_RE,
    NAME_EXCLUDE_WORDS,
    NAME_MAX_LENGTH,
    NAME_MAX_UPPERCASE_LENGTH,
    NAME_MAX_WORDS,
    NAME_MIN_LENGTH,
    NAME_TRAILER_KEYWORDS,
    RELATION_MARKER_NAME_RE,
    RELATION_MARKERS,
)
from .tokenizer import contains_any, to_lines
from .types import NOT_FOUND

logger = logging.getLogger(__name__)

# A strategy receives the raw transcript and its LineSequence
NameStrategy = Callable[[str, List[str]], Optional[str]]


def is_valid_name_line(line: str) -> bool:
    """Check whether a line could plausibly be a person's name.

    A name line contains only letters, whitespace, periods, apostrophes and
    hyphens, is 2-50 characters long, contains none of the excluded keywords,
    is not shouted (all caps and longer than 10 characters) and has at most
    four words.

    Args:
        line: Candidate line

    Returns:
        True if the line passes every check.
    """
    if not NAME_ALLOWED_CHARS_RE.match(line):
        return False

    if len(line) < NAME_MIN_LENGTH or len(line) > NAME_MAX_LENGTH:
        return False

    if contains_any(line, NAME_EXCLUDE_WORDS):
        return False

    # System text is often all caps
    if line == line.upper() and len(line) > NAME_MAX_UPPERCASE_LENGTH:
        return False

    return len(line.split()) <= NAME_MAX_WORDS


def is_proper_name_case(line: str) -> bool:
    """Check every word starts uppercase and no word over 2 chars is all caps."""
    for word in line.split():
        if word[0] != word[0].upper():
            return False
        if len(word) > 2 and word == word.upper():
            return False
    return True


def is_relation_line(line: str) -> bool:
    return contains_any(line, RELATION_MARKERS)


def _is_header_noise(line: str) -> bool:
    """Lines skipped while scanning for the name after the enrolment header."""
    return (
        contains_any(line, HEADER_SKIP_KEYWORDS)
        or line[:1].isdigit()
        or bool(GROUPED_ID_LINE_RE.match(line))
        or len(line) < NAME_MIN_LENGTH
        or len(line) > NAME_MAX_LENGTH
    )


def find_name_before(lines: Sequence[str], index: int) -> Optional[str]:
    """Return the nearest name-like line strictly before ``index``."""
    for j in range(index - 1, -1, -1):
        if is_valid_name_line(lines[j]):
            return lines[j]
    return None


def find_name_after_enrolment(text: str, lines: List[str]) -> Optional[str]:
    """Strategy 1: scan past the enrolment header for the name."""
    past_header = False

    for i, line in enumerate(lines):
        if contains_any(line, ENROLMENT_MARKERS):
            past_header = True
            continue

        if not past_header or _is_header_noise(line):
            continue

        if is_relation_line(line):
            name = find_name_before(lines, i)
            if name is not None:
                logger.debug(f"Found name before relation line: '{name}'")
                return name
            continue

        if is_valid_name_line(line):
            logger.debug(f"Found name after enrolment header: '{line}'")
            return line

    return None


def find_proper_case_name(text: str, lines: List[str]) -> Optional[str]:
    """Strategy 2: first proper-case name line not followed by boilerplate."""
    for i, line in enumerate(lines):
        if contains_any(line, BOILERPLATE_KEYWORDS):
            continue

        if is_valid_name_line(line) and is_proper_name_case(line):
            next_line = lines[i + 1] if i + 1 < len(lines) else ""
            if not contains_any(next_line, NAME_TRAILER_KEYWORDS):
                logger.debug(f"Found proper-case name: '{line}'")
                return line

    return None


def find_name_before_relation(text: str, lines: List[str]) -> Optional[str]:
    """Strategy 3: letters immediately preceding a relation marker."""
    match = RELATION_MARKER_NAME_RE.search(text)
    if not match:
        return None

    candidate = match.group(1).strip()
    if is_valid_name_line(candidate):
        logger.debug(f"Found name before relation marker: '{candidate}'")
        return candidate
    return None


def find_repeated_name(text: str, lines: List[str]) -> Optional[str]:
    """Strategy 4: most frequent word (>2 chars) across name-like lines."""
    name_lines = [line for line in lines if is_valid_name_line(line)]

    counts: Counter = Counter()
    for line in name_lines:
        counts.update(word.lower() for word in line.split() if len(word) > 2)

    best_word, best_count = None, 1
    # Counter preserves first-seen order, so ties go to the earliest word
    for word, count in counts.items():
        if count > best_count:
            best_word, best_count = word, count

    if best_word is None:
        return None

    for line in name_lines:
        for word in line.split():
            if word.lower() == best_word:
                logger.debug(f"Found repeated name: '{word}' ({best_count}x)")
                return word
    return None


NAME_STRATEGIES: Tuple[NameStrategy, ...] = (
    find_name_after_enrolment,
    find_proper_case_name,
    find_name_before_relation,
    find_repeated_name,
)


def first_found(strategies: Sequence[NameStrategy], text: str, lines: List[str]) -> Optional[str]:
    """Run strategies in order and return the first non-empty result."""
    for strategy in strategies:
        result = strategy(text, lines)
        if result:
            return result
    return None


def extract_name(text: str) -> str:
    """Extract the card holder's name from a front-side transcript.

    Args:
        text: Raw OCR transcript

    Returns:
        The name, or ``"Not found"`` when every strategy fails.
    """
    lines = to_lines(text)
    name = first_found(NAME_STRATEGIES, text or "", lines)
    if name is None:
        logger.debug("No name found in transcript")
        return NOT_FOUND
    return name.strip()
