"""RapidOCR engine wrapper for ID card transcripts.

RapidOCR returns one detection per text region. Regions are ordered top to
bottom (then left to right) and joined with newlines so the transcript keeps
the line structure the extractors rely on.
"""

import logging
import time
from typing import List, Optional

import numpy as np

from .config_loader import EngineConfig
from .engine import ImageInput, load_image
from .types import RecognitionResult

logger = logging.getLogger(__name__)

ENGINE_NAME = "rapidocr"


class RapidOCREngine:
    """Wrapper for RapidOCR with lazy model loading.

    Args:
        config: OCR engine configuration.

    Attributes:
        config: Engine configuration instance.
        engine: RapidOCR engine instance (lazy-loaded).
    """

    def __init__(self, config: EngineConfig):
        self.config = config
        self._engine: Optional[object] = None  # Lazy-loaded

        logger.info(
            f"RapidOCREngine initialized: use_angle_cls={config.use_angle_cls}, "
            f"text_score={config.text_score}"
        )

    @property
    def engine(self):
        """Lazy-load RapidOCR engine on first access.

        Returns:
            RapidOCR engine instance.

        Raises:
            ImportError: If rapidocr_onnxruntime is not installed.
            RuntimeError: If engine initialization fails.
        """
        if self._engine is None:
            try:
                from rapidocr_onnxruntime import RapidOCR

                self._engine = RapidOCR(
                    use_angle_cls=self.config.use_angle_cls,
                    text_score=self.config.text_score,
                )
                logger.info("RapidOCR engine loaded successfully")

            except ImportError as e:
                logger.error(
                    "Failed to import rapidocr_onnxruntime. "
                    "Install with: pip install rapidocr-onnxruntime"
                )
                raise ImportError(
                    "rapidocr-onnxruntime not installed. "
                    "Run: pip install rapidocr-onnxruntime"
                ) from e

            except Exception as e:
                logger.error(f"Failed to initialize RapidOCR engine: {e}")
                raise RuntimeError(f"RapidOCR initialization failed: {e}") from e

        return self._engine

    def is_available(self) -> bool:
        """Check if RapidOCR engine is available.

        Returns:
            True if engine can be initialized.
        """
        try:
            _ = self.engine  # Trigger lazy loading
            return True
        except (ImportError, RuntimeError):
            return False

    def recognize_text(
        self, image: ImageInput, timeout: Optional[float] = None
    ) -> RecognitionResult:
        """Recognize text on one card face.

        Args:
            image: File path or image array.
            timeout: Accepted for interface parity with TesseractEngine.
                Inference runs in-process and cannot be interrupted.

        Returns:
            RecognitionResult with one line per detected region, or a failed
            result carrying the error message.
        """
        start_time = time.perf_counter()

        array = load_image(image)
        if array is None:
            return RecognitionResult.failure("Image could not be loaded", engine=ENGINE_NAME)

        try:
            # RapidOCR returns (results_list, timing_info);
            # each entry is [bbox, text, confidence]
            result = self.engine(array)
        except (ImportError, RuntimeError) as e:
            return RecognitionResult.failure(str(e), engine=ENGINE_NAME)
        except Exception as e:
            logger.error(f"RapidOCR recognition failed: {e}", exc_info=True)
            return RecognitionResult.failure(str(e), engine=ENGINE_NAME)

        results_list = result[0] if isinstance(result, tuple) and result else None
        if not results_list:
            logger.warning("RapidOCR returned no text detections")
            return RecognitionResult.failure("No text detected", engine=ENGINE_NAME)

        lines = self._order_lines(results_list)
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"RapidOCR recognized {len(lines)} region(s) in {elapsed_ms:.1f}ms")

        return RecognitionResult(
            text="\n".join(lines),
            success=True,
            engine=ENGINE_NAME,
            processing_time_ms=elapsed_ms,
        )

    def _order_lines(self, results_list: List) -> List[str]:
        """Sort detections by top edge, then left edge, and return their text.

        Args:
            results_list: RapidOCR detections ``[bbox, text, confidence]``.

        Returns:
            Detection texts in reading order.
        """
        def reading_key(item):
            points = np.array(item[0])
            return (float(points[:, 1].min()), float(points[:, 0].min()))

        return [str(item[1]) for item in sorted(results_list, key=reading_key)]
