"""Tesseract OCR engine wrapper for ID card transcripts.

Example:
    >>> from src.idcard.engine_tesseract import TesseractEngine
    >>> engine = TesseractEngine(EngineConfig(type="tesseract"))
    >>> result = engine.recognize_text("front.jpg")
    >>> print(result.success, result.text.splitlines()[:2])
    True ['Government of India', 'Rahul Kumar']
"""

import logging
import time
from typing import Optional

import pytesseract

from .config_loader import EngineConfig
from .engine import ImageInput, load_image, to_grayscale
from .types import RecognitionResult

logger = logging.getLogger(__name__)

ENGINE_NAME = "tesseract"


class TesseractEngine:
    """Wrapper for Tesseract OCR producing full-page transcripts.

    Args:
        config: OCR engine configuration.

    Attributes:
        config: Engine configuration instance.
    """

    def __init__(self, config: EngineConfig):
        """Initialize Tesseract engine wrapper.

        Args:
            config: OCR engine configuration.
        """
        self.config = config
        logger.info(
            f"TesseractEngine initialized: lang={config.lang}, psm={config.psm}"
        )

    def is_available(self) -> bool:
        """Check if the Tesseract binary can be found.

        Returns:
            True if Tesseract reports a version.
        """
        try:
            version = pytesseract.get_tesseract_version()
            logger.debug(f"Tesseract version {version}")
            return True
        except Exception as e:
            logger.error(f"Tesseract not found or not properly configured: {e}")
            return False

    def recognize_text(
        self, image: ImageInput, timeout: Optional[float] = None
    ) -> RecognitionResult:
        """Recognize text on one card face.

        Args:
            image: File path or image array.
            timeout: Seconds after which the Tesseract process is killed
                (None waits indefinitely).

        Returns:
            RecognitionResult with line structure preserved, or a failed
            result carrying the error message (including timeouts).
        """
        start_time = time.perf_counter()

        array = load_image(image)
        if array is None:
            return RecognitionResult.failure("Image could not be loaded", engine=ENGINE_NAME)

        try:
            text = pytesseract.image_to_string(
                to_grayscale(array),
                lang=self.config.lang,
                config=f"--psm {self.config.psm}",
                timeout=timeout or 0,
            )
        except Exception as e:
            logger.error(f"Tesseract recognition failed: {e}", exc_info=True)
            return RecognitionResult.failure(str(e), engine=ENGINE_NAME)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Tesseract recognized {len(text.splitlines())} line(s) in {elapsed_ms:.1f}ms"
        )

        return RecognitionResult(
            text=text,
            success=True,
            engine=ENGINE_NAME,
            processing_time_ms=elapsed_ms,
        )
