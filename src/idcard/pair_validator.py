"""Front/back pair content validation.

The validator decides whether a pair of transcripts looks like a genuine,
correctly sided and complete card before any field is extracted:

    1. FRONT CONTENT: institutional reference + 12-digit number + personal info
    2. BACK CONTENT: institutional reference + address context or PIN code
    3. CROSS CHECK: side classification of both transcripts (swap and
       duplicate-side detection)

The first failing check wins. An UNKNOWN side classification never causes
a rejection; cross checks only fire when both sides are classified.

Example:
    >>> from src.idcard.pair_validator import validate_pair
    >>> outcome = validate_pair(front_text, back_text)
    >>> if not outcome.valid:
    ...     print(outcome.reason.message)
"""

import logging
from typing import Optional

from .config_loader import ClassifierConfig, ValidationConfig
from .constants import (
    ADDRESS_CONTEXT_KEYWORDS,
    ID_NUMBER_ANYWHERE_RE,
    INSTITUTIONAL_KEYWORDS,
    PERSONAL_INFO_KEYWORDS,
    PIN_CODE_RE,
)
from .side_classifier import SideClassifier
from .tokenizer import contains_any
from .types import (
    FailureCategory,
    PairValidationOutcome,
    RecognitionResult,
    RejectionReason,
    SideLabel,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)


def _content_reason(code: str, constant: str, message: str, stage: str) -> RejectionReason:
    return RejectionReason(code=code, constant=constant, message=message, stage=stage)


def check_front_content(text: str) -> ValidationOutcome:
    """Check the declared front transcript carries the expected content.

    Args:
        text: Front transcript

    Returns:
        ValidationOutcome with the first missing element as reason.
    """
    text = text or ""

    if not contains_any(text, INSTITUTIONAL_KEYWORDS):
        return ValidationOutcome.fail(
            _content_reason(
                "IDV-E010",
                "FRONT_MISSING_INSTITUTION",
                "Front image does not look like an Aadhaar card "
                "(no Government of India / UIDAI reference found)",
                "FRONT_CONTENT",
            )
        )

    if not ID_NUMBER_ANYWHERE_RE.search(text):
        return ValidationOutcome.fail(
            _content_reason(
                "IDV-E011",
                "FRONT_MISSING_ID_NUMBER",
                "Front image does not contain a valid Aadhaar number",
                "FRONT_CONTENT",
            )
        )

    if not contains_any(text, PERSONAL_INFO_KEYWORDS):
        return ValidationOutcome.fail(
            _content_reason(
                "IDV-E012",
                "FRONT_MISSING_PERSONAL_INFO",
                "Front image does not contain date of birth or gender details",
                "FRONT_CONTENT",
            )
        )

    return ValidationOutcome.ok()


def check_back_content(text: str) -> ValidationOutcome:
    """Check the declared back transcript carries the expected content.

    Args:
        text: Back transcript

    Returns:
        ValidationOutcome with the first missing element as reason.
    """
    text = text or ""

    if not contains_any(text, INSTITUTIONAL_KEYWORDS):
        return ValidationOutcome.fail(
            _content_reason(
                "IDV-E020",
                "BACK_MISSING_INSTITUTION",
                "Back image does not look like an Aadhaar card "
                "(no UIDAI / Government of India reference found)",
                "BACK_CONTENT",
            )
        )

    if not (contains_any(text, ADDRESS_CONTEXT_KEYWORDS) or PIN_CODE_RE.search(text)):
        return ValidationOutcome.fail(
            _content_reason(
                "IDV-E021",
                "BACK_MISSING_ADDRESS",
                "Back image does not contain an address",
                "BACK_CONTENT",
            )
        )

    return ValidationOutcome.ok()


def cross_check_sides(front_side: SideLabel, back_side: SideLabel) -> Optional[RejectionReason]:
    """Compare classified sides of the declared front and back images.

    Args:
        front_side: Classification of the declared front transcript
        back_side: Classification of the declared back transcript

    Returns:
        RejectionReason for an inconsistent pair, None otherwise.
    """
    stage = "CROSS_CHECK"

    if front_side == SideLabel.BACK and back_side == SideLabel.FRONT:
        return _content_reason(
            "IDV-E030",
            "SIDES_SWAPPED",
            "Front and back images appear to be swapped",
            stage,
        )

    if front_side == SideLabel.BACK and back_side == SideLabel.BACK:
        return _same_side_reason(SideLabel.BACK)

    if front_side == SideLabel.FRONT and back_side == SideLabel.FRONT:
        return _same_side_reason(SideLabel.FRONT)

    if front_side == SideLabel.BACK:
        return _content_reason(
            "IDV-E031",
            "FRONT_IS_BACK",
            "The front image appears to be the back side of the card",
            stage,
        )

    if back_side == SideLabel.FRONT:
        return _content_reason(
            "IDV-E032",
            "BACK_IS_FRONT",
            "The back image appears to be the front side of the card",
            stage,
        )

    return None


def _same_side_reason(side: SideLabel) -> RejectionReason:
    return _content_reason(
        "IDV-E033",
        "SAME_SIDE",
        f"both images are the same side: {side.value}",
        "CROSS_CHECK",
    )


def ocr_failure_reason(message: str) -> RejectionReason:
    return RejectionReason(
        code="IDV-E050",
        constant="OCR_FAILED",
        message=message,
        stage="OCR",
        category=FailureCategory.INTERNAL,
        http_status=500,
    )


class PairValidator:
    """Validates front/back transcript pairs.

    Args:
        config: Validation configuration (OCR failure policy, cross checks).
        classifier: Side classifier used for cross checks.

    Attributes:
        config: Validation configuration instance.
        classifier: Side classifier instance.
    """

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        classifier: Optional[SideClassifier] = None,
    ):
        self.config = config if config is not None else ValidationConfig()
        self.classifier = classifier if classifier is not None else SideClassifier(ClassifierConfig())

    def validate_pair(self, front_text: str, back_text: str) -> PairValidationOutcome:
        """Validate a declared front/back transcript pair.

        Args:
            front_text: Transcript of the image declared as front.
            back_text: Transcript of the image declared as back.

        Returns:
            PairValidationOutcome; ``reason`` holds the first failure.
        """
        front = check_front_content(front_text)
        if not front.valid:
            logger.info(f"Pair rejected: {front.reason.constant}")
            return PairValidationOutcome(valid=False, reason=front.reason, front=front)

        back = check_back_content(back_text)
        if not back.valid:
            logger.info(f"Pair rejected: {back.reason.constant}")
            return PairValidationOutcome(valid=False, reason=back.reason, front=front, back=back)

        if not self.config.cross_check_enabled:
            return PairValidationOutcome(valid=True, front=front, back=back)

        front_side = self.classifier.classify(front_text)
        back_side = self.classifier.classify(back_text)

        reason = cross_check_sides(front_side, back_side)
        if reason is not None:
            logger.info(
                f"Pair rejected: {reason.constant} "
                f"(front={front_side.value}, back={back_side.value})"
            )

        return PairValidationOutcome(
            valid=reason is None,
            reason=reason,
            front=front,
            back=back,
            front_side=front_side,
            back_side=back_side,
        )

    def validate_recognitions(
        self, front: RecognitionResult, back: RecognitionResult
    ) -> PairValidationOutcome:
        """Validate OCR results, applying the OCR failure policy first.

        Args:
            front: Recognition result for the declared front image.
            back: Recognition result for the declared back image.

        Returns:
            PairValidationOutcome. With ``on_ocr_failure="skip"`` a failed
            recognition yields a valid outcome with ``skipped=True``.
        """
        failed = [
            f"{side}: {result.error or 'unknown error'}"
            for side, result in (("front", front), ("back", back))
            if not result.success
        ]
        if not failed:
            return self.validate_pair(front.text, back.text)

        return self.apply_failure_policy(
            self.config.on_ocr_failure, f"OCR failed ({'; '.join(failed)})"
        )

    def apply_failure_policy(self, policy: str, detail: str) -> PairValidationOutcome:
        """Turn a technical failure into an outcome according to ``policy``.

        Args:
            policy: "skip" or "reject".
            detail: Description of the failure for logs and the reason.

        Returns:
            Skipped (valid) outcome or an internal-failure outcome.
        """
        if policy == "skip":
            logger.warning(f"{detail}; skipping content validation (policy=skip)")
            return PairValidationOutcome(valid=True, skipped=True)

        logger.error(f"{detail}; rejecting pair (policy=reject)")
        return PairValidationOutcome(
            valid=False,
            reason=ocr_failure_reason("Could not read the uploaded images, please try again"),
        )


_default_validator = PairValidator()


def validate_pair(front_text: str, back_text: str) -> PairValidationOutcome:
    """Validate a transcript pair with the default configuration."""
    return _default_validator.validate_pair(front_text, back_text)
