"""Artwork validation entry point.

Enforces the deck printer's artwork requirements:
- Minimum pixel size (1200x1050 by default)
- Minimum print resolution (300 DPI by default)

Every outcome, including unexpected failures, comes back as a
ValidationResult; nothing is raised to the caller.
"""
import logging
from typing import Optional

from constants import (
    ARTWORK_ERROR_PROCESSING,
    ARTWORK_ERROR_UNSUPPORTED_FORMAT,
    FORMAT_SUGGESTIONS,
)
from services.printing.artwork_types import (
    DEFAULT_REQUIREMENTS,
    ArtworkDetails,
    ArtworkRequirements,
    UploadedFile,
    ValidationResult,
)
from services.printing.classifier import ArtworkKind, classify_artwork, format_label
from services.printing.document import validate_document
from services.printing.psd import validate_psd
from services.printing.raster import validate_raster

logger = logging.getLogger(__name__)


def _reject_format(file: UploadedFile, requirements: ArtworkRequirements, file_type: str) -> ValidationResult:
    logger.info(f"[Artwork] Unsupported file format: type={file.content_type or 'unknown'} name={file.filename!r}")
    return ValidationResult(
        valid=False,
        message="Unsupported file format.",
        error_code=ARTWORK_ERROR_UNSUPPORTED_FORMAT,
        details=ArtworkDetails.for_requirements(requirements, file_type, FORMAT_SUGGESTIONS),
    )


HANDLERS = {
    ArtworkKind.DOCUMENT: validate_document,
    ArtworkKind.LEGACY_RASTER: validate_psd,
    ArtworkKind.COMMON_RASTER: validate_raster,
    ArtworkKind.REJECTED: _reject_format,
}


def validate_artwork(file: UploadedFile, requirements: Optional[ArtworkRequirements] = None) -> ValidationResult:
    """
    Validate an uploaded artwork file against print requirements.

    Args:
        file: The upload (bytes, declared media type, filename).
        requirements: Thresholds to check against. Defaults to the printer minimums.

    Returns:
        ValidationResult. For JPEG/PNG/WebP/TIFF uploads below the required
        resolution, ``processed_file`` carries the upscaled copy.
    """
    requirements = requirements or DEFAULT_REQUIREMENTS

    logger.info(
        f"[Artwork] Starting validation: type={file.content_type or 'unknown'} "
        f"name={file.filename!r} size={file.size}"
    )

    try:
        kind = classify_artwork(file.content_type, file.filename)
        file_type = format_label(kind, file.content_type, file.filename)
        logger.info(f"[Artwork] Classified as {kind.value} ({file_type})")

        result = HANDLERS[kind](file, requirements, file_type)
    except Exception as e:
        logger.exception(f"[Artwork] Validation error: {e}")
        return ValidationResult(
            valid=False,
            message="Error processing file.",
            error_code=ARTWORK_ERROR_PROCESSING,
            details=ArtworkDetails.for_requirements(
                requirements,
                file.content_type or "unknown",
                [
                    "An error occurred while processing your file.",
                    "Please ensure your file is not corrupted.",
                    "Try re-saving your file and upload again.",
                ],
            ),
        )

    logger.info(
        f"[Artwork] Validation finished: valid={result.valid} code={result.error_code} "
        f"processed={result.processed_file is not None}"
    )
    return result
