"""Card side classification (front vs back).

This module implements a weighted-indicator scorer that decides which face
of the card a transcript was recognized from:

1. **Front**: "Government of India" header, grouped 12-digit number,
   DOB label, gender
2. **Back**: "Unique Identification Authority" header, "Address" label,
   website/helpline, PIN code, relation marker

Each matching rule adds its weight to the side's score. The winner must beat
the other side and reach a minimum score; exact ties are broken by the
presence of contact details (back) or number plus DOB/gender (front).

Example:
    >>> from src.idcard.side_classifier import classify_side
    >>> classify_side("Government of India\\nDOB: 01/01/1990\\nMALE\\n2360 1234 5677")
    <SideLabel.FRONT: 'front'>
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config_loader import ClassifierConfig
from .constants import (
    BACK_INDICATORS,
    CONTACT_RE,
    DOB_OR_GENDER_RE,
    FRONT_INDICATORS,
    GROUPED_ID_RE,
    RULES_VERSION,
    IndicatorRule,
)
from .tokenizer import to_digit_text
from .types import SideLabel

logger = logging.getLogger(__name__)


@dataclass
class SideScore:
    """Score breakdown for one transcript.

    Attributes:
        front_score: Sum of matching front indicator weights
        back_score: Sum of matching back indicator weights
        front_matches: Names of the matching front rules
        back_matches: Names of the matching back rules
    """

    front_score: int = 0
    back_score: int = 0
    front_matches: List[str] = field(default_factory=list)
    back_matches: List[str] = field(default_factory=list)


def _rule_matches(rule: IndicatorRule, lower_text: str, digit_text: str) -> bool:
    if rule.pattern.search(lower_text):
        return True
    return rule.match_digits and bool(rule.pattern.search(digit_text))


def _score_rules(rules: Sequence[IndicatorRule], lower_text: str, digit_text: str):
    matched = [rule for rule in rules if _rule_matches(rule, lower_text, digit_text)]
    return sum(rule.weight for rule in matched), [rule.name for rule in matched]


class SideClassifier:
    """Classifies transcripts as front, back or unknown card side.

    Args:
        config: Classifier configuration with the minimum winning score.
        front_rules: Front indicator table (defaults to FRONT_INDICATORS).
        back_rules: Back indicator table (defaults to BACK_INDICATORS).

    Attributes:
        config: Classifier configuration instance.
        min_score: Minimum score a side needs to win outright.

    Example:
        >>> classifier = SideClassifier(ClassifierConfig())
        >>> classifier.classify("www.uidai.gov.in\\nAddress: 123 Main St")
        <SideLabel.BACK: 'back'>
    """

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        front_rules: Sequence[IndicatorRule] = FRONT_INDICATORS,
        back_rules: Sequence[IndicatorRule] = BACK_INDICATORS,
    ):
        self.config = config if config is not None else ClassifierConfig()
        self.min_score = self.config.min_score
        self.front_rules = tuple(front_rules)
        self.back_rules = tuple(back_rules)

        logger.debug(
            f"SideClassifier initialized: rules_version={RULES_VERSION}, "
            f"min_score={self.min_score}, "
            f"front_rules={len(self.front_rules)}, back_rules={len(self.back_rules)}"
        )

    def score(self, text: str) -> SideScore:
        """Compute front and back scores for a transcript.

        Args:
            text: Raw OCR transcript.

        Returns:
            SideScore with both scores and the names of matching rules.
        """
        lower_text = (text or "").lower()
        digit_text = to_digit_text(text or "")

        front_score, front_matches = _score_rules(self.front_rules, lower_text, digit_text)
        back_score, back_matches = _score_rules(self.back_rules, lower_text, digit_text)

        return SideScore(
            front_score=front_score,
            back_score=back_score,
            front_matches=front_matches,
            back_matches=back_matches,
        )

    def classify(self, text: str) -> SideLabel:
        """Classify a transcript as FRONT, BACK or UNKNOWN.

        Decision logic:
        1. front > back and front >= min_score → FRONT
        2. back > front and back >= min_score → BACK
        3. front == back > 0: contact/website token → BACK,
           else grouped 12-digit number and DOB/gender token → FRONT
        4. Otherwise → UNKNOWN

        Args:
            text: Raw OCR transcript.

        Returns:
            SideLabel for the transcript.
        """
        score = self.score(text)
        label = self._decide(score, (text or "").lower())

        logger.debug(
            f"Side classification: {label.value} "
            f"(front={score.front_score} {score.front_matches}, "
            f"back={score.back_score} {score.back_matches})"
        )
        return label

    def _decide(self, score: SideScore, lower_text: str) -> SideLabel:
        front, back = score.front_score, score.back_score

        if front > back and front >= self.min_score:
            return SideLabel.FRONT

        if back > front and back >= self.min_score:
            return SideLabel.BACK

        if front == back and front > 0:
            if CONTACT_RE.search(lower_text):
                return SideLabel.BACK
            if GROUPED_ID_RE.search(lower_text) and DOB_OR_GENDER_RE.search(lower_text):
                return SideLabel.FRONT

        return SideLabel.UNKNOWN


_default_classifier = SideClassifier()


def classify_side(text: str) -> SideLabel:
    """Classify a transcript with the default indicator tables and threshold."""
    return _default_classifier.classify(text)
