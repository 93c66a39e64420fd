"""
Common-raster path: JPEG, PNG, WebP, TIFF and other image/* uploads.

The only path that may change the file. DPI normalization runs before the
size check, and the upgraded file is handed back to the caller whether or not
the artwork then passes.
"""
import logging
import math

from constants import (
    ARTWORK_ERROR_PROCESSING,
    ARTWORK_ERROR_RESOLUTION_TOO_LOW,
    ARTWORK_ERROR_SIZE_TOO_SMALL,
    ARTWORK_ERROR_UNREADABLE_DIMENSIONS,
    DEFAULT_SCREEN_DPI,
)
from services.printing.artwork_types import (
    ArtworkDetails,
    ArtworkRequirements,
    UploadedFile,
    ValidationResult,
    format_dpi,
)
from services.printing.dpi import normalize_dpi, read_raster_metadata
from utils.filenames import processed_artwork_filename

logger = logging.getLogger(__name__)


def _processing_error(requirements, file_type, reason: str = "") -> ValidationResult:
    return ValidationResult(
        valid=False,
        message="Error processing image file.",
        error_code=ARTWORK_ERROR_PROCESSING,
        details=ArtworkDetails.for_requirements(
            requirements,
            file_type,
            [
                reason,
                "There was an error processing your image file.",
                "The file may be corrupted or in an unsupported format.",
                "Try re-saving your file in a different format like JPG or PNG.",
            ],
        ),
    )


def validate_raster(file: UploadedFile, requirements: ArtworkRequirements, file_type: str) -> ValidationResult:
    logger.info(f"[Artwork] Processing image file: type={file.content_type or 'unknown'} name={file.filename!r}")

    try:
        original = read_raster_metadata(file.content)
        original_dpi = original.resolution if original.resolution is not None else DEFAULT_SCREEN_DPI

        processed = normalize_dpi(file.content, target_dpi=requirements.resolution)
        if processed is None:
            return _processing_error(
                requirements,
                file_type,
                f"Your image could not be prepared for printing at {requirements.resolution} DPI.",
            )

        was_processed = processed != file.content
        processed_file = None
        if was_processed:
            metadata = read_raster_metadata(processed)
            processed_file = UploadedFile(
                content=processed,
                content_type=metadata.media_type,
                filename=processed_artwork_filename(file.filename, metadata.format),
            )
        else:
            metadata = original

        logger.info(
            f"[Artwork] Image metadata: {metadata.width}x{metadata.height}px format={metadata.format} "
            f"resolution={format_dpi(metadata.resolution)} processed={was_processed} "
            f"original_dpi={format_dpi(original_dpi)}"
        )
    except Exception as e:
        logger.error(f"[Artwork] Error processing image file: {e}")
        return _processing_error(requirements, file_type, str(e))

    if not metadata.width or not metadata.height:
        return ValidationResult(
            valid=False,
            message="Could not read image dimensions.",
            error_code=ARTWORK_ERROR_UNREADABLE_DIMENSIONS,
            details=ArtworkDetails.for_requirements(
                requirements,
                file_type,
                [
                    "Could not read the dimensions of your image file.",
                    "Try re-saving your file in a different format and upload again.",
                    "Ensure your image file is not corrupted.",
                ],
            ),
        )

    issues = []
    error_code = None

    if requirements.is_too_small(metadata.width, metadata.height):
        scale = requirements.scale_to_fit(metadata.width, metadata.height)
        target_width = math.ceil(metadata.width * scale)
        target_height = math.ceil(metadata.height * scale)
        issues.extend([
            f"Your image is too small. Current size: {metadata.width}x{metadata.height}px",
            f"Required minimum size: {requirements.width}x{requirements.height}px",
            f"Try resizing your image to {target_width}x{target_height}px to meet the minimum requirements.",
        ])
        error_code = ARTWORK_ERROR_SIZE_TOO_SMALL

    if metadata.resolution is not None and metadata.resolution < requirements.resolution:
        issues.extend([
            f"Current resolution: {format_dpi(metadata.resolution)} DPI",
            f"Required resolution: {requirements.resolution} DPI",
            "Consider using a higher resolution image or resample your image in an editing program.",
        ])
        error_code = error_code or ARTWORK_ERROR_RESOLUTION_TOO_LOW

    details_kwargs = dict(
        current_width=metadata.width,
        current_height=metadata.height,
        current_resolution=metadata.resolution,
    )

    if issues:
        return ValidationResult(
            valid=False,
            message="Invalid dimensions or resolution.",
            error_code=error_code,
            processed_file=processed_file,
            details=ArtworkDetails.for_requirements(requirements, file_type, issues, **details_kwargs),
        )

    suggestions = [
        "Your artwork meets all requirements!",
        f"Current size: {metadata.width}x{metadata.height}px",
    ]
    if metadata.resolution is not None:
        suggestions.append(f"Current resolution: {format_dpi(metadata.resolution)} DPI")
    if was_processed:
        suggestions.append(
            f"DPI was automatically updated from {format_dpi(original_dpi)} to {format_dpi(metadata.resolution)}"
        )

    return ValidationResult(
        valid=True,
        message="File is valid.",
        processed_file=processed_file,
        details=ArtworkDetails.for_requirements(requirements, file_type, suggestions, **details_kwargs),
    )
