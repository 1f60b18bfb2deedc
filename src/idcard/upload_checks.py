"""Upload preconditions: presence, file type and size.

These checks run before any OCR call so that obviously bad requests are
rejected cheaply, in the order presence → type → size.
"""

import logging
from pathlib import PurePath
from typing import Optional

from .config_loader import UploadConfig
from .types import ImageUpload, RejectionReason, ValidationOutcome

logger = logging.getLogger(__name__)

STAGE = "UPLOAD"


def missing_image_reason() -> RejectionReason:
    return RejectionReason(
        code="IDV-E001",
        constant="MISSING_IMAGE",
        message="Both front and back images are required",
        stage=STAGE,
    )


def check_file_type(upload: ImageUpload, config: UploadConfig) -> bool:
    """Check both the declared MIME type and the file extension."""
    mime_ok = (upload.mime_type or "").lower() in config.allowed_mime_types
    extension_ok = PurePath(upload.filename or "").suffix.lower() in config.allowed_extensions
    return mime_ok and extension_ok


def check_uploads(
    front: Optional[ImageUpload],
    back: Optional[ImageUpload],
    config: Optional[UploadConfig] = None,
) -> ValidationOutcome:
    """Check that both images are present, of an allowed type and small enough.

    Args:
        front: Declared front image (None if missing)
        back: Declared back image (None if missing)
        config: Upload configuration (defaults to UploadConfig())

    Returns:
        ValidationOutcome with the first failing precondition.
    """
    config = config if config is not None else UploadConfig()

    if front is None or back is None:
        logger.info("Upload rejected: missing front or back image")
        return ValidationOutcome.fail(missing_image_reason())

    for side, upload in (("front", front), ("back", back)):
        if not check_file_type(upload, config):
            logger.info(
                f"Upload rejected: {side} image has type '{upload.mime_type}' "
                f"(file '{upload.filename}')"
            )
            return ValidationOutcome.fail(
                RejectionReason(
                    code="IDV-E002",
                    constant="INVALID_FILE_TYPE",
                    message="Invalid file type. Only JPEG or PNG allowed.",
                    stage=STAGE,
                )
            )

    for side, upload in (("front", front), ("back", back)):
        if upload.size_bytes > config.max_file_size_bytes:
            logger.info(
                f"Upload rejected: {side} image is {upload.size_bytes} bytes "
                f"(limit {config.max_file_size_bytes})"
            )
            return ValidationOutcome.fail(
                RejectionReason(
                    code="IDV-E003",
                    constant="FILE_TOO_LARGE",
                    message=f"The {side} image exceeds the maximum size of "
                    f"{config.max_file_size_bytes // (1024 * 1024)} MB",
                    stage=STAGE,
                    http_status=413,
                )
            )

    return ValidationOutcome.ok()
