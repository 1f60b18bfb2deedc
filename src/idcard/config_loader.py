"""Configuration loader with Pydantic validation for the ID card module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import ADDRESS_MAX_LINES, SIDE_MIN_SCORE

# What to do when OCR fails or times out during validation
FailurePolicy = Literal["skip", "reject"]


class EngineConfig(BaseModel):
    """OCR engine configuration.

    Attributes:
        type: Engine type ("tesseract" or "rapidocr")
        lang: Tesseract language code
        psm: Tesseract page segmentation mode (3 = fully automatic)
        use_angle_cls: Enable RapidOCR angle classification for rotated text
        text_score: Minimum RapidOCR text detection confidence (0.0-1.0)
    """

    type: Literal["tesseract", "rapidocr"] = "tesseract"
    lang: str = "eng"
    psm: int = Field(default=3, ge=0, le=13)
    use_angle_cls: bool = True
    text_score: float = Field(default=0.5, ge=0.0, le=1.0)


class ClassifierConfig(BaseModel):
    """Side classifier configuration.

    Attributes:
        min_score: Minimum winning score for a confident FRONT/BACK label
    """

    min_score: int = Field(default=SIDE_MIN_SCORE, ge=1)


class AddressConfig(BaseModel):
    """Address extraction configuration.

    Attributes:
        max_lines: Maximum number of lines accumulated into the address
    """

    max_lines: int = Field(default=ADDRESS_MAX_LINES, ge=1)


class UploadConfig(BaseModel):
    """Upload precondition configuration.

    Attributes:
        allowed_mime_types: Accepted MIME types
        allowed_extensions: Accepted file extensions (lowercase, with dot)
        max_file_size_bytes: Maximum accepted size per image
    """

    allowed_mime_types: List[str] = ["image/jpeg", "image/jpg", "image/png"]
    allowed_extensions: List[str] = [".jpeg", ".jpg", ".png"]
    max_file_size_bytes: int = Field(default=5 * 1024 * 1024, gt=0)


class ValidationConfig(BaseModel):
    """Pair validation configuration.

    Attributes:
        on_ocr_failure: "skip" treats an OCR failure as a passed validation,
            "reject" turns it into an internal failure
        on_ocr_timeout: Same choice for OCR calls exceeding the timeout
        ocr_timeout_seconds: Upper bound for both OCR calls together
            (None disables the timeout)
        cross_check_enabled: Run front/back consistency checks
    """

    on_ocr_failure: FailurePolicy = "skip"
    on_ocr_timeout: FailurePolicy = "reject"
    ocr_timeout_seconds: Optional[float] = Field(default=60.0, gt=0.0)
    cross_check_enabled: bool = True


class IdCardModuleConfig(BaseModel):
    """Complete ID card module configuration.

    Attributes:
        engine: OCR engine configuration
        classifier: Side classifier configuration
        address: Address extraction configuration
        uploads: Upload precondition configuration
        validation: Pair validation configuration
    """

    engine: EngineConfig = EngineConfig()
    classifier: ClassifierConfig = ClassifierConfig()
    address: AddressConfig = AddressConfig()
    uploads: UploadConfig = UploadConfig()
    validation: ValidationConfig = Field(default_factory=ValidationConfig)


class Config(BaseModel):
    """Root configuration container.

    Attributes:
        idcard: ID card module configuration
    """

    idcard: IdCardModuleConfig = IdCardModuleConfig()


def load_config(config_path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated Config object with all settings

    Raises:
        FileNotFoundError: If config file does not exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If configuration validation fails

    Example:
        >>> config = load_config(Path("src/idcard/config.yaml"))
        >>> print(config.idcard.classifier.min_score)
        3
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    # Accept both a flat module file and one wrapped in an 'idcard' key
    if "idcard" in config_dict:
        config_dict = config_dict["idcard"] or {}

    return Config(idcard=IdCardModuleConfig(**config_dict))


def get_default_config() -> Config:
    """Get default configuration from bundled config.yaml file.

    Returns:
        Config object loaded from src/idcard/config.yaml

    Example:
        >>> config = get_default_config()
        >>> print(config.idcard.engine.type)
        tesseract
    """
    default_config_path = Path(__file__).parent / "config.yaml"
    if default_config_path.exists():
        return load_config(default_config_path)
    else:
        # Fallback to hardcoded defaults if config file is missing
        return Config()
