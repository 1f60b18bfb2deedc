"""Main ID card processor with validate-then-extract pipeline.

This module orchestrates the complete workflow for a front/back image pair:
    1. UPLOAD CHECKS: presence, file type, size
    2. TEXT RECOGNITION: OCR of both faces, run concurrently
    3. PAIR VALIDATION: content checks + front/back consistency
    4. FIELD EXTRACTION: name, ID number, date of birth, address

The first failing stage produces a REJECT result carrying a structured
rejection reason; later stages are not run.

Example:
    >>> from src.idcard import IdCardProcessor
    >>> processor = IdCardProcessor()
    >>> result = processor.process(front_upload, back_upload)
    >>> if result.is_pass():
    ...     print(result.fields.to_dict())
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional, Tuple

from .address_extractor import extract_address
from .config_loader import Config, get_default_config, load_config
from .dob_extractor import extract_date_of_birth
from .engine import ImageInput, create_engine
from .id_number_extractor import extract_id_number
from .name_extractor import extract_name
from .pair_validator import PairValidator
from .side_classifier import SideClassifier
from .types import (
    NOT_FOUND,
    DecisionStatus,
    IdCardFields,
    IdCardResult,
    ImageUpload,
    PairValidationOutcome,
    RecognitionResult,
    RejectionReason,
)
from .upload_checks import check_uploads
from .validator import is_valid_id_number, validate_date_format

logger = logging.getLogger(__name__)

# Extra time for engines that enforce the timeout themselves to unwind
TIMEOUT_GRACE_SECONDS = 2.0


class IdCardProcessor:
    """Main ID card processing class.

    Args:
        config_path: Optional path to config YAML file. If None, uses default config.
        engine: Optional OCR engine exposing ``recognize_text(image, timeout)``.
            If None, one is created from the configuration on first use.

    Attributes:
        config: Full configuration object
        classifier: Side classifier
        validator: Pair validator
    """

    def __init__(self, config_path: Optional[Path] = None, engine=None):
        if config_path is None:
            self.config: Config = get_default_config()
        else:
            self.config: Config = load_config(config_path)

        self._engine = engine
        self.classifier = SideClassifier(self.config.idcard.classifier)
        self.validator = PairValidator(self.config.idcard.validation, self.classifier)

        logger.info(
            f"IdCardProcessor initialized: engine={self.config.idcard.engine.type}, "
            f"on_ocr_failure={self.config.idcard.validation.on_ocr_failure}, "
            f"on_ocr_timeout={self.config.idcard.validation.on_ocr_timeout}"
        )

    @property
    def engine(self):
        """OCR engine, created from the configuration on first access."""
        if self._engine is None:
            self._engine = create_engine(self.config.idcard.engine)
        return self._engine

    def process(
        self,
        front: Optional[ImageUpload],
        back: Optional[ImageUpload],
    ) -> IdCardResult:
        """Validate an uploaded image pair and extract the identity fields.

        Args:
            front: Upload declared as the front of the card.
            back: Upload declared as the back of the card.

        Returns:
            IdCardResult with decision, fields and validation details.
        """
        start_time = time.perf_counter()

        # ═══════════════════════════════════════════════════════════════
        # STAGE 1: UPLOAD CHECKS
        # ═══════════════════════════════════════════════════════════════
        upload_outcome = check_uploads(front, back, self.config.idcard.uploads)
        if not upload_outcome.valid:
            return self._create_rejection(upload_outcome.reason, start_time=start_time)

        # ═══════════════════════════════════════════════════════════════
        # STAGE 2: TEXT RECOGNITION
        # ═══════════════════════════════════════════════════════════════
        front_result, back_result, timed_out = self.recognize_pair(front.path, back.path)

        # ═══════════════════════════════════════════════════════════════
        # STAGE 3: PAIR VALIDATION
        # ═══════════════════════════════════════════════════════════════
        if timed_out:
            validation = self.validator.apply_failure_policy(
                self.config.idcard.validation.on_ocr_timeout,
                f"OCR timed out after {self.config.idcard.validation.ocr_timeout_seconds}s",
            )
        else:
            validation = self.validator.validate_recognitions(front_result, back_result)

        # ═══════════════════════════════════════════════════════════════
        # STAGE 4: FIELD EXTRACTION
        # ═══════════════════════════════════════════════════════════════
        return self._finish(front_result.text, back_result.text, validation, start_time)

    def process_transcripts(self, front_text: str, back_text: str) -> IdCardResult:
        """Run validation and extraction on already recognized transcripts.

        Args:
            front_text: Transcript of the declared front image.
            back_text: Transcript of the declared back image.

        Returns:
            IdCardResult with decision, fields and validation details.
        """
        start_time = time.perf_counter()
        validation = self.validator.validate_pair(front_text, back_text)
        return self._finish(front_text, back_text, validation, start_time)

    def recognize_pair(
        self, front_image: ImageInput, back_image: ImageInput
    ) -> Tuple[RecognitionResult, RecognitionResult, bool]:
        """OCR both faces concurrently and join before returning.

        The timeout is also handed to the engine, which stops its own work
        (Tesseract kills its subprocess). Workers are joined when they
        finish within TIMEOUT_GRACE_SECONDS after the deadline; otherwise
        they are abandoned and a warning is logged.

        Args:
            front_image: Front image path or array.
            back_image: Back image path or array.

        Returns:
            Tuple of (front_result, back_result, timed_out). Calls still
            running at the timeout are reported as failed results.
        """
        timeout = self.config.idcard.validation.ocr_timeout_seconds
        engine = self.engine
        still_running = set()

        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="idcard-ocr")
        try:
            futures = {
                "front": executor.submit(engine.recognize_text, front_image, timeout=timeout),
                "back": executor.submit(engine.recognize_text, back_image, timeout=timeout),
            }
            _, not_done = wait(futures.values(), timeout=timeout)
            if not_done:
                _, still_running = wait(not_done, timeout=TIMEOUT_GRACE_SECONDS)

            results = {}
            for side, future in futures.items():
                if future in not_done:
                    future.cancel()
                    results[side] = RecognitionResult.failure(f"{side} OCR timed out")
                    continue
                try:
                    results[side] = future.result()
                except Exception as e:
                    logger.error(f"Error in {side} OCR: {e}", exc_info=True)
                    results[side] = RecognitionResult.failure(str(e))
        finally:
            executor.shutdown(wait=not still_running)

        timed_out = bool(not_done)
        if timed_out:
            logger.warning(f"OCR did not finish within {timeout}s")
        if still_running:
            logger.warning(
                f"{len(still_running)} OCR call(s) ignored the timeout and are still running"
            )

        return results["front"], results["back"], timed_out

    def extract_fields(self, front_text: str, back_text: str) -> IdCardFields:
        """Extract identity fields from a validated transcript pair.

        Name and date of birth come from the front. The ID number is
        searched in both transcripts. The address is taken from the front
        and falls back to the back when the front has none.

        Args:
            front_text: Front transcript ("" if unavailable).
            back_text: Back transcript ("" if unavailable).

        Returns:
            IdCardFields with values or ``"Not found"``.
        """
        max_lines = self.config.idcard.address.max_lines

        address = extract_address(front_text, max_lines=max_lines)
        if address == NOT_FOUND:
            address = extract_address(back_text, max_lines=max_lines)

        return IdCardFields(
            name=extract_name(front_text),
            id_number=extract_id_number(f"{front_text} {back_text}"),
            dob=extract_date_of_birth(front_text),
            address=address,
        )

    def _finish(
        self,
        front_text: str,
        back_text: str,
        validation: PairValidationOutcome,
        start_time: float,
    ) -> IdCardResult:
        if not validation.valid:
            return self._create_rejection(
                validation.reason, validation=validation, start_time=start_time
            )

        warnings = []
        if validation.skipped:
            warnings.append("Content validation skipped because OCR failed")

        fields = self.extract_fields(front_text or "", back_text or "")
        if fields.id_number != NOT_FOUND and not is_valid_id_number(fields.id_number):
            logger.warning("Extracted ID number fails checksum validation")
            warnings.append("ID number failed checksum validation")
        if fields.dob != NOT_FOUND and not validate_date_format(fields.dob):
            logger.warning(f"Extracted date of birth is not a valid date: {fields.dob}")
            warnings.append("Date of birth is not a valid calendar date")

        processing_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"Card processed in {processing_time_ms:.1f}ms")

        return IdCardResult(
            decision=DecisionStatus.PASS,
            fields=fields,
            validation=validation,
            processing_time_ms=processing_time_ms,
            warnings=warnings,
        )

    def _create_rejection(
        self,
        reason: RejectionReason,
        validation: Optional[PairValidationOutcome] = None,
        start_time: Optional[float] = None,
    ) -> IdCardResult:
        """Create a rejection IdCardResult.

        Args:
            reason: Rejection reason with error details
            validation: Pair validation outcome, if validation ran
            start_time: perf_counter value at the start of processing

        Returns:
            IdCardResult with REJECT decision
        """
        processing_time_ms = (
            (time.perf_counter() - start_time) * 1000 if start_time is not None else 0.0
        )
        logger.info(f"Card rejected at {reason.stage}: {reason.message}")

        return IdCardResult(
            decision=DecisionStatus.REJECT,
            validation=validation,
            rejection_reason=reason,
            processing_time_ms=processing_time_ms,
        )
