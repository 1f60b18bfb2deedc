"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import pytest

from src.idcard.types import ImageUpload, RecognitionResult

FRONT_TRANSCRIPT = """Government of India
Rahul Kumar
2360 1234 5677
DOB: 15/08/1995
MALE
"""

BACK_TRANSCRIPT = """Unique Identification Authority of India
help@uidai.gov.in | www.uidai.gov.in
Address:
S/O: Ramesh Kumar
House No 12, MG Road
Indiranagar
Bengaluru, Karnataka - 560038
2360 1234 5677
"""


@pytest.fixture
def front_transcript():
    """Fixture providing a clean front-side transcript."""
    return FRONT_TRANSCRIPT


@pytest.fixture
def back_transcript():
    """Fixture providing a clean back-side transcript."""
    return BACK_TRANSCRIPT


@pytest.fixture
def front_upload():
    """Fixture providing a valid front image upload."""
    return ImageUpload(
        path="uploads/front.jpg",
        filename="front.jpg",
        mime_type="image/jpeg",
        size_bytes=200 * 1024,
    )


@pytest.fixture
def back_upload():
    """Fixture providing a valid back image upload."""
    return ImageUpload(
        path="uploads/back.png",
        filename="back.png",
        mime_type="image/png",
        size_bytes=300 * 1024,
    )


@pytest.fixture
def sample_card_image():
    """Fixture providing a synthetic BGR card image."""
    import cv2
    import numpy as np

    image = np.ones((400, 640, 3), dtype=np.uint8) * 255
    cv2.putText(
        image,
        "2360 1234 5677",
        (120, 300),
        cv2.FONT_HERSHEY_SIMPLEX,
        1.2,
        (0, 0, 0),
        2,
    )
    return image


@pytest.fixture
def fake_engine_factory():
    """Fixture building a fake OCR engine keyed by image path.

    Values may be strings (successful transcript), RecognitionResult
    instances or exceptions (raised from ``recognize_text``).
    """
    from unittest.mock import Mock

    def factory(transcripts):
        def recognize_text(image, timeout=None):
            value = transcripts[image]
            if isinstance(value, Exception):
                raise value
            if isinstance(value, RecognitionResult):
                return value
            return RecognitionResult(text=value, success=True, engine="fake")

        engine = Mock()
        engine.recognize_text.side_effect = recognize_text
        return engine

    return factory
