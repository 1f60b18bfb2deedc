"""ID Card Extraction & Validation.

This module extracts identity fields from OCR transcripts of a two-sided
Aadhaar card and validates that an uploaded image pair is genuine, correctly
sided and complete before the fields are used.

Core Components:
    - tokenizer: LineSequence and digits-only transcript views
    - name_extractor, id_number_extractor, dob_extractor, address_extractor:
      multi-strategy field heuristics
    - side_classifier: weighted-indicator front/back scorer
    - pair_validator: content checks and front/back consistency
    - validator: Verhoeff checksum and date format predicates
    - processor: validate-then-extract pipeline over uploaded images

Example:
    >>> from src.idcard import extract_name, validate_pair
    >>> outcome = validate_pair(front_text, back_text)
    >>> if outcome.valid:
    ...     print(extract_name(front_text))
"""

from .address_extractor import extract_address
from .config_loader import (
    AddressConfig,
    ClassifierConfig,
    Config,
    EngineConfig,
    IdCardModuleConfig,
    UploadConfig,
    ValidationConfig,
    get_default_config,
    load_config,
)
from .dob_extractor import extract_date_of_birth
from .id_number_extractor import extract_id_number, extract_id_number_candidates
from .name_extractor import extract_name
from .pair_validator import (
    PairValidator,
    check_back_content,
    check_front_content,
    validate_pair,
)
from .processor import IdCardProcessor
from .side_classifier import SideClassifier, SideScore, classify_side
from .types import (
    NOT_FOUND,
    DecisionStatus,
    FailureCategory,
    IdCardFields,
    IdCardResult,
    ImageUpload,
    PairValidationOutcome,
    RecognitionResult,
    RejectionReason,
    SideLabel,
    ValidationFailure,
    ValidationOutcome,
)
from .upload_checks import check_uploads
from .validator import (
    calculate_check_digit,
    is_valid_id_number,
    validate_check_digit,
    validate_date_format,
    validate_id_number_format,
)

__all__ = [
    # Types
    "NOT_FOUND",
    "DecisionStatus",
    "FailureCategory",
    "SideLabel",
    "RejectionReason",
    "ValidationFailure",
    "ValidationOutcome",
    "PairValidationOutcome",
    "RecognitionResult",
    "ImageUpload",
    "IdCardFields",
    "IdCardResult",
    # Configuration
    "Config",
    "IdCardModuleConfig",
    "EngineConfig",
    "ClassifierConfig",
    "AddressConfig",
    "UploadConfig",
    "ValidationConfig",
    "load_config",
    "get_default_config",
    # Extraction
    "extract_name",
    "extract_id_number",
    "extract_id_number_candidates",
    "extract_date_of_birth",
    "extract_address",
    # Classification & validation
    "SideClassifier",
    "SideScore",
    "classify_side",
    "PairValidator",
    "check_front_content",
    "check_back_content",
    "validate_pair",
    "check_uploads",
    "calculate_check_digit",
    "validate_check_digit",
    "validate_id_number_format",
    "is_valid_id_number",
    "validate_date_format",
    # Pipeline
    "IdCardProcessor",
]
