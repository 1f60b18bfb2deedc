"""OCR engine selection and shared image loading.

The extraction core only ever sees transcripts. This module is the boundary
to the OCR collaborator: every engine exposes
``recognize_text(image, timeout=None) -> RecognitionResult`` where ``image``
is a file path or a numpy array, and reports failures (timeouts included) in
the result instead of raising.

Example:
    >>> from src.idcard.engine import create_engine
    >>> engine = create_engine(get_default_config().idcard.engine)
    >>> result = engine.recognize_text("uploads/front.jpg")
    >>> if result.success:
    ...     print(result.text)
"""

import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from .config_loader import EngineConfig

logger = logging.getLogger(__name__)

ImageInput = Union[str, Path, np.ndarray]


def load_image(image: ImageInput) -> Optional[np.ndarray]:
    """Load an image from disk or pass an array through.

    Args:
        image: File path or image array (H, W) / (H, W, C).

    Returns:
        Image array, or None if it cannot be read or is empty.
    """
    if isinstance(image, np.ndarray):
        array = image
    else:
        path = Path(image)
        if not path.exists():
            logger.error(f"Image file not found: {path}")
            return None
        array = cv2.imread(str(path))

    if array is None or array.size == 0:
        logger.error("Invalid image: empty or unreadable")
        return None
    return array


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a BGR or single-channel image to a 2D grayscale array."""
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if image.ndim == 3 and image.shape[2] == 1:
        return image[:, :, 0]
    return image


def create_engine(config: EngineConfig):
    """Create the OCR engine named by ``config.type``.

    Args:
        config: OCR engine configuration.

    Returns:
        TesseractEngine or RapidOCREngine instance.
    """
    engine_type = config.type.lower()
    if engine_type == "rapidocr":
        from .engine_rapidocr import RapidOCREngine

        logger.info("Initialized with RapidOCR engine")
        return RapidOCREngine(config=config)

    from .engine_tesseract import TesseractEngine

    logger.info("Initialized with Tesseract OCR engine")
    return TesseractEngine(config=config)
