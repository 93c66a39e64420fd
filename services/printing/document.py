"""
Document path: PDF and PDF-compatible Illustrator exports.

Vector documents carry no DPI of their own. The first page is measured in
points and converted to the pixel size it would have if rasterized at the
required resolution, so resolution compliance follows from size compliance.
Nothing is ever rewritten here; scaling vector art is the customer's job in
their authoring tool.
"""
import logging

import fitz  # PyMuPDF

from constants import (
    ARTWORK_ERROR_SIZE_TOO_SMALL,
    ARTWORK_ERROR_UNREADABLE_DOCUMENT,
    POINTS_PER_INCH,
)
from services.printing.artwork_types import (
    ArtworkDetails,
    ArtworkRequirements,
    UploadedFile,
    ValidationResult,
    round_half_up,
)

logger = logging.getLogger(__name__)


class DocumentPageError(Exception):
    """Raised when a document opens but its first page cannot be measured."""

    def __init__(self, message: str, suggestions):
        self.message = message
        self.suggestions = list(suggestions)
        super().__init__(message)


def points_to_pixels(points: float, resolution: int) -> int:
    return round_half_up(points / POINTS_PER_INCH * resolution)


def read_first_page_size(data: bytes):
    """
    Return the first page's (width, height) in points.

    Measured from the unrotated MediaBox: page rotation and CropBox only
    affect how a viewer displays the page, not the artwork size.

    Raises:
        DocumentPageError: zero pages, or the first page cannot be loaded.
        Anything PyMuPDF raises for bytes that are not a PDF at all.
    """
    with fitz.open(stream=data, filetype="pdf") as doc:
        if doc.page_count == 0:
            raise DocumentPageError(
                "Document has no pages.",
                [
                    "Your document appears to be empty.",
                    "Please ensure your artwork is on the first page.",
                    "Try re-saving your document and upload again.",
                ],
            )

        try:
            page = doc.load_page(0)
            box = page.mediabox
        except Exception as e:
            logger.warning(f"[Artwork] Could not load first page: {e}")
            raise DocumentPageError(
                "Could not read first page.",
                ["Your document appears to be corrupted.", "Try re-saving your document and upload again."],
            ) from e

        return box.width, box.height


def validate_document(file: UploadedFile, requirements: ArtworkRequirements, file_type: str) -> ValidationResult:
    logger.info(f"[Artwork] Processing {file_type} document ({file.size} bytes)")

    try:
        width_pts, height_pts = read_first_page_size(file.content)
    except DocumentPageError as e:
        return ValidationResult(
            valid=False,
            message=e.message,
            error_code=ARTWORK_ERROR_UNREADABLE_DOCUMENT,
            details=ArtworkDetails.for_requirements(requirements, file_type, e.suggestions),
        )

    width = points_to_pixels(width_pts, requirements.resolution)
    height = points_to_pixels(height_pts, requirements.resolution)

    logger.info(
        f"[Artwork] Document page {width_pts:g}x{height_pts:g}pt -> {width}x{height}px "
        f"at {requirements.resolution} DPI"
    )

    if width == 0 or height == 0:
        return ValidationResult(
            valid=False,
            message="Could not read first page.",
            error_code=ARTWORK_ERROR_UNREADABLE_DOCUMENT,
            details=ArtworkDetails.for_requirements(
                requirements,
                file_type,
                ["Your document appears to be corrupted.", "Try re-saving your document and upload again."],
            ),
        )

    if requirements.is_too_small(width, height):
        scale = requirements.scale_to_fit(width, height)
        return ValidationResult(
            valid=False,
            message="Invalid dimensions.",
            error_code=ARTWORK_ERROR_SIZE_TOO_SMALL,
            details=ArtworkDetails.for_requirements(
                requirements,
                file_type,
                [
                    f"Your artwork is too small. Current size: {width}x{height}px",
                    f"Required minimum size: {requirements.width}x{requirements.height}px",
                    f"Try scaling your artwork by {round_half_up(scale * 100)}% to meet the minimum size requirement.",
                    "For vector files (AI/PDF), you can safely scale the artwork without losing quality.",
                ],
                current_width=width,
                current_height=height,
            ),
        )

    return ValidationResult(
        valid=True,
        message="File is valid.",
        details=ArtworkDetails.for_requirements(
            requirements,
            file_type,
            ["Your artwork meets all requirements!", f"Current size: {width}x{height}px"],
            current_width=width,
            current_height=height,
        ),
    )
