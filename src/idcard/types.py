"""Type definitions for the ID card module.

This module defines the core data structures shared by the extractors, the
side classifier, the pair validator and the processing pipeline: side labels,
structured rejection reasons, validation outcomes and OCR recognition results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

# Sentinel returned by every extractor when no confident value was found.
NOT_FOUND = "Not found"


class DecisionStatus(Enum):
    """Decision status for a processed card."""

    PASS = "pass"
    REJECT = "reject"


class SideLabel(Enum):
    """Card face a transcript was recognized from."""

    FRONT = "front"
    BACK = "back"
    UNKNOWN = "unknown"


class FailureCategory(Enum):
    """Whether a rejection is the caller's fault or ours."""

    BAD_INPUT = "bad_input"
    INTERNAL = "internal"


@dataclass
class RejectionReason:
    """Structured rejection reason with error code and context.

    Attributes:
        code: Error code (e.g., "IDV-E001")
        constant: String constant for programmatic checking (e.g., "MISSING_IMAGE")
        message: Human-readable explanation, safe to show to the user
        stage: Pipeline stage where rejection occurred (e.g., "UPLOAD")
        category: BAD_INPUT for user-facing rejections, INTERNAL otherwise
        severity: Error severity level ("ERROR" or "WARNING")
        http_status: HTTP status code for API responses (default: 400)
    """

    code: str
    constant: str
    message: str
    stage: str
    category: FailureCategory = FailureCategory.BAD_INPUT
    severity: str = "ERROR"
    http_status: int = 400


class ValidationFailure(Exception):
    """Raised when a card pair is rejected and the caller wants an exception.

    Attributes:
        reason: The rejection reason that caused the failure.
    """

    def __init__(self, reason: RejectionReason):
        super().__init__(reason.message)
        self.reason = reason

    @property
    def http_status(self) -> int:
        return self.reason.http_status


@dataclass
class ValidationOutcome:
    """Result of validating a single image transcript.

    Attributes:
        valid: Whether all checks passed
        reason: Rejection reason of the first failing check, None if valid
    """

    valid: bool
    reason: Optional[RejectionReason] = None

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def fail(cls, reason: RejectionReason) -> "ValidationOutcome":
        return cls(valid=False, reason=reason)


@dataclass
class PairValidationOutcome:
    """Result of validating a front/back transcript pair.

    Attributes:
        valid: Whether the pair passed every check
        reason: Rejection reason of the first failing check, None if valid
        front: Content check outcome for the declared front image
        back: Content check outcome for the declared back image
        front_side: Side the declared front transcript was classified as
        back_side: Side the declared back transcript was classified as
        skipped: True when validation was skipped because OCR failed
    """

    valid: bool
    reason: Optional[RejectionReason] = None
    front: Optional[ValidationOutcome] = None
    back: Optional[ValidationOutcome] = None
    front_side: SideLabel = SideLabel.UNKNOWN
    back_side: SideLabel = SideLabel.UNKNOWN
    skipped: bool = False

    def raise_for_failure(self) -> None:
        """Raise ValidationFailure if the pair was rejected.

        Raises:
            ValidationFailure: If ``valid`` is False.
        """
        if not self.valid and self.reason is not None:
            raise ValidationFailure(self.reason)


@dataclass
class RecognitionResult:
    """Transcript produced by an OCR engine for one card face.

    Attributes:
        text: Recognized text with line structure preserved ("" on failure)
        success: Whether recognition succeeded
        engine: Name of the engine that produced the text
        error: Error description when recognition failed
        processing_time_ms: Time spent in the engine in milliseconds
    """

    text: str
    success: bool
    engine: str = "unknown"
    error: Optional[str] = None
    processing_time_ms: float = 0.0

    @classmethod
    def failure(cls, error: str, engine: str = "unknown") -> "RecognitionResult":
        return cls(text="", success=False, engine=engine, error=error)


@dataclass
class ImageUpload:
    """An uploaded card image as handed over by the upload layer.

    Attributes:
        path: Location of the stored image file
        filename: Original client-side file name
        mime_type: Declared MIME type (e.g., "image/jpeg")
        size_bytes: File size in bytes
    """

    path: str
    filename: str
    mime_type: str
    size_bytes: int


@dataclass
class IdCardFields:
    """Identity fields extracted from a card pair.

    Every attribute holds either the extracted value or ``NOT_FOUND``.
    """

    name: str = NOT_FOUND
    id_number: str = NOT_FOUND
    dob: str = NOT_FOUND
    address: str = NOT_FOUND

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "aadhaarNumber": self.id_number,
            "dob": self.dob,
            "address": self.address,
        }


@dataclass
class IdCardResult:
    """Final pipeline result with decision and metadata.

    Attributes:
        decision: Final decision (PASS or REJECT)
        fields: Extracted fields if PASS, None if REJECT
        validation: Pair validation outcome if validation ran
        rejection_reason: Structured rejection reason if REJECT
        processing_time_ms: Total processing time in milliseconds
        warnings: Non-fatal notes such as a skipped validation
    """

    decision: DecisionStatus
    fields: Optional[IdCardFields] = None
    validation: Optional[PairValidationOutcome] = None
    rejection_reason: Optional[RejectionReason] = None
    processing_time_ms: float = 0.0
    warnings: List[str] = field(default_factory=list)

    def is_pass(self) -> bool:
        """Check if decision is PASS.

        Returns:
            True if decision is PASS, False otherwise.
        """
        return self.decision == DecisionStatus.PASS

    def is_reject(self) -> bool:
        """Check if decision is REJECT.

        Returns:
            True if decision is REJECT, False otherwise.
        """
        return self.decision == DecisionStatus.REJECT
