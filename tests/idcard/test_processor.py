"""Integration tests for IdCardProcessor.

Tests the complete validate-then-extract pipeline with various scenarios:
    - Stage 1: Upload precondition failures
    - Stage 2: OCR failures and timeouts
    - Stage 3: Content and cross-check failures
    - Stage 4: Field extraction
    - End-to-end: Successful processing
"""

import threading
from dataclasses import replace

import pytest

from src.idcard.processor import IdCardProcessor
from src.idcard.types import NOT_FOUND, DecisionStatus, RecognitionResult

# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def config_file(tmp_path):
    """Create a config file factory writing the validation section."""

    def factory(**validation):
        lines = ["validation:"] + [f"  {key}: {value}" for key, value in validation.items()]
        path = tmp_path / "idcard.yaml"
        path.write_text("\n".join(lines) + "\n")
        return path

    return factory


@pytest.fixture
def card_engine(fake_engine_factory, front_upload, back_upload, front_transcript, back_transcript):
    """Create a fake engine returning the clean front and back transcripts."""
    return fake_engine_factory(
        {front_upload.path: front_transcript, back_upload.path: back_transcript}
    )


# ═══════════════════════════════════════════════════════════════════════════
# TEST INITIALIZATION
# ═══════════════════════════════════════════════════════════════════════════


class TestProcessorInitialization:
    """Test IdCardProcessor initialization."""

    def test_default_initialization(self):
        """Test processor initializes with default config."""
        processor = IdCardProcessor()

        assert processor.config.idcard.validation.on_ocr_failure == "skip"
        assert processor.classifier is not None
        assert processor.validator is not None

    def test_initialization_with_config(self, config_file):
        """Test processor initializes with custom config file."""
        processor = IdCardProcessor(config_path=config_file(on_ocr_failure="reject"))

        assert processor.config.idcard.validation.on_ocr_failure == "reject"
        assert processor.validator.config.on_ocr_failure == "reject"

    def test_injected_engine(self, card_engine):
        """Test an injected engine is used instead of the configured one."""
        assert IdCardProcessor(engine=card_engine).engine is card_engine


# ═══════════════════════════════════════════════════════════════════════════
# END-TO-END
# ═══════════════════════════════════════════════════════════════════════════


class TestSuccessfulProcessing:
    """Test the complete pipeline on a clean pair."""

    def test_pass_with_fields(self, card_engine, front_upload, back_upload):
        """Test a clean pair passes and all fields are extracted."""
        processor = IdCardProcessor(engine=card_engine)

        result = processor.process(front_upload, back_upload)

        assert result.decision == DecisionStatus.PASS
        assert result.rejection_reason is None
        assert result.warnings == []
        assert result.fields.to_dict() == {
            "name": "Rahul Kumar",
            "aadhaarNumber": "236012345677",
            "dob": "15/08/1995",
            "address": "House No 12, MG Road, Indiranagar, Bengaluru, Karnataka - 560038",
        }
        assert result.processing_time_ms >= 0

    def test_both_images_recognized(self, card_engine, front_upload, back_upload):
        """Test the engine is called once per image."""
        IdCardProcessor(engine=card_engine).process(front_upload, back_upload)

        called_with = sorted(call.args[0] for call in card_engine.recognize_text.call_args_list)
        assert called_with == sorted([front_upload.path, back_upload.path])

    def test_process_transcripts(self, front_transcript, back_transcript):
        """Test the pipeline on already recognized transcripts."""
        processor = IdCardProcessor(engine=object())

        result = processor.process_transcripts(front_transcript, back_transcript)

        assert result.is_pass()
        assert result.fields.name == "Rahul Kumar"
        assert result.validation.front_side.value == "front"

    def test_checksum_warning(self, back_transcript):
        """Test a number failing the checksum passes with a warning."""
        front = "Government of India\nRahul Kumar\n2360 1234 5674\nDOB: 15/08/1995\nMALE"

        result = IdCardProcessor(engine=object()).process_transcripts(front, back_transcript)

        assert result.is_pass()
        assert result.fields.id_number == "236012345674"
        assert result.warnings == ["ID number failed checksum validation"]

    def test_impossible_birth_date_warning(self, back_transcript):
        """Test a date of birth that is not a calendar date passes with a warning."""
        front = "Government of India\nRahul Kumar\n2360 1234 5677\nDOB: 31/02/1995\nMALE"

        result = IdCardProcessor(engine=object()).process_transcripts(front, back_transcript)

        assert result.is_pass()
        assert result.fields.dob == "31/02/1995"
        assert result.warnings == ["Date of birth is not a valid calendar date"]

    def test_valid_birth_date_has_no_warning(self, front_transcript, back_transcript):
        """Test a real calendar date adds no warning."""
        result = IdCardProcessor(engine=object()).process_transcripts(front_transcript, back_transcript)

        assert result.fields.dob == "15/08/1995"
        assert result.warnings == []

    def test_front_address_preferred(self, front_transcript, back_transcript):
        """Test the front address wins over the back when present."""
        front = front_transcript + "S/O: Ramesh Kumar\nFlat 4B, Park Street\n"

        result = IdCardProcessor(engine=object()).process_transcripts(front, back_transcript)

        assert result.fields.address == "Flat 4B, Park Street"


# ═══════════════════════════════════════════════════════════════════════════
# STAGE 1: UPLOAD CHECKS
# ═══════════════════════════════════════════════════════════════════════════


class TestUploadStage:
    """Test upload precondition failures."""

    def test_missing_back(self, card_engine, front_upload):
        """Test a missing image is rejected before OCR."""
        result = IdCardProcessor(engine=card_engine).process(front_upload, None)

        assert result.is_reject()
        assert result.rejection_reason.code == "IDV-E001"
        assert result.fields is None
        card_engine.recognize_text.assert_not_called()

    def test_invalid_type(self, card_engine, front_upload, back_upload):
        """Test an invalid type is rejected before OCR."""
        gif = replace(back_upload, filename="back.gif", mime_type="image/gif")

        result = IdCardProcessor(engine=card_engine).process(front_upload, gif)

        assert result.rejection_reason.constant == "INVALID_FILE_TYPE"
        card_engine.recognize_text.assert_not_called()


# ═══════════════════════════════════════════════════════════════════════════
# STAGE 2: TEXT RECOGNITION
# ═══════════════════════════════════════════════════════════════════════════


class TestRecognitionStage:
    """Test OCR failure and timeout policies."""

    def test_failure_skips_validation(self, fake_engine_factory, front_upload, back_upload, back_transcript):
        """Test an OCR failure passes with a warning under the skip policy."""
        engine = fake_engine_factory(
            {
                front_upload.path: RecognitionResult.failure("engine crashed"),
                back_upload.path: back_transcript,
            }
        )

        result = IdCardProcessor(engine=engine).process(front_upload, back_upload)

        assert result.is_pass()
        assert result.validation.skipped is True
        assert "Content validation skipped because OCR failed" in result.warnings
        assert result.fields.name == NOT_FOUND
        assert result.fields.id_number == "236012345677"

    def test_engine_exception_is_contained(self, fake_engine_factory, front_upload, back_upload, front_transcript):
        """Test an exception raised by the engine becomes a failed result."""
        engine = fake_engine_factory(
            {front_upload.path: front_transcript, back_upload.path: RuntimeError("model missing")}
        )

        front, back, timed_out = IdCardProcessor(engine=engine).recognize_pair(
            front_upload.path, back_upload.path
        )

        assert front.success is True
        assert back.success is False
        assert back.error == "model missing"
        assert timed_out is False

    def test_failure_rejected_by_policy(self, fake_engine_factory, config_file, front_upload, back_upload):
        """Test an OCR failure is an internal rejection under the reject policy."""
        failed = RecognitionResult.failure("engine crashed")
        engine = fake_engine_factory({front_upload.path: failed, back_upload.path: failed})
        processor = IdCardProcessor(config_path=config_file(on_ocr_failure="reject"), engine=engine)

        result = processor.process(front_upload, back_upload)

        assert result.is_reject()
        assert result.rejection_reason.code == "IDV-E050"
        assert result.rejection_reason.http_status == 500

    def test_timeout_passed_to_engine(self, card_engine, config_file, front_upload, back_upload):
        """Test both engine calls receive the configured timeout."""
        processor = IdCardProcessor(config_path=config_file(ocr_timeout_seconds=7.5), engine=card_engine)

        processor.process(front_upload, back_upload)

        timeouts = [call.kwargs["timeout"] for call in card_engine.recognize_text.call_args_list]
        assert timeouts == [7.5, 7.5]

    def test_timeout_rejected_by_default(
        self, fake_engine_factory, config_file, front_upload, back_upload, back_transcript
    ):
        """Test a slow OCR call is rejected and its worker joined before returning."""
        never = threading.Event()
        finished = threading.Event()

        def recognize_text(image, timeout=None):
            if image != front_upload.path:
                return RecognitionResult(text=back_transcript, success=True)
            # Stops at its own deadline, as Tesseract does when it kills the subprocess
            never.wait(timeout=timeout + 0.1)
            finished.set()
            return RecognitionResult.failure("Tesseract process timeout")

        engine = fake_engine_factory({})
        engine.recognize_text.side_effect = recognize_text
        processor = IdCardProcessor(config_path=config_file(ocr_timeout_seconds=0.1), engine=engine)

        result = processor.process(front_upload, back_upload)

        assert result.is_reject()
        assert result.rejection_reason.code == "IDV-E050"
        assert finished.is_set()

    def test_timeout_skipped_by_policy(
        self, fake_engine_factory, config_file, front_upload, back_upload, back_transcript
    ):
        """Test a timeout passes with a warning under the skip policy."""
        never = threading.Event()

        def recognize_text(image, timeout=None):
            if image == front_upload.path:
                never.wait(timeout=timeout + 0.1)
                return RecognitionResult.failure("Tesseract process timeout")
            return RecognitionResult(text=back_transcript, success=True)

        engine = fake_engine_factory({})
        engine.recognize_text.side_effect = recognize_text
        processor = IdCardProcessor(
            config_path=config_file(ocr_timeout_seconds=0.1, on_ocr_timeout="skip"),
            engine=engine,
        )

        result = processor.process(front_upload, back_upload)

        assert result.is_pass()
        assert result.validation.skipped is True

    def test_call_ignoring_timeout_is_abandoned(
        self, fake_engine_factory, config_file, front_upload, back_upload, back_transcript, monkeypatch, caplog
    ):
        """Test an engine that ignores the timeout does not block the result."""
        monkeypatch.setattr("src.idcard.processor.TIMEOUT_GRACE_SECONDS", 0.1)
        release = threading.Event()

        def recognize_text(image, timeout=None):
            if image == front_upload.path:
                release.wait(timeout=5)
            return RecognitionResult(text=back_transcript, success=True)

        engine = fake_engine_factory({})
        engine.recognize_text.side_effect = recognize_text
        processor = IdCardProcessor(config_path=config_file(ocr_timeout_seconds=0.1), engine=engine)

        try:
            with caplog.at_level("WARNING"):
                front, back, timed_out = processor.recognize_pair(front_upload.path, back_upload.path)
        finally:
            release.set()

        assert timed_out is True
        assert front.success is False
        assert back.success is True
        assert "ignored the timeout" in caplog.text


# ═══════════════════════════════════════════════════════════════════════════
# STAGE 3: PAIR VALIDATION
# ═══════════════════════════════════════════════════════════════════════════


class TestValidationStage:
    """Test content and cross-check rejections."""

    def test_swapped_uploads(self, card_engine, front_upload, back_upload):
        """Test a back image uploaded as front fails the front content check."""
        result = IdCardProcessor(engine=card_engine).process(back_upload, front_upload)

        assert result.is_reject()
        assert result.rejection_reason.stage == "FRONT_CONTENT"
        assert result.validation is not None

    def test_same_side(self, front_transcript):
        """Test two fronts are rejected naming the side."""
        duplicate = front_transcript + "Bengaluru 560038\n"

        result = IdCardProcessor(engine=object()).process_transcripts(front_transcript, duplicate)

        assert result.is_reject()
        assert result.rejection_reason.message == "both images are the same side: front"
        assert result.fields is None
