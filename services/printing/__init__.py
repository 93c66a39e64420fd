"""Print artwork preflight: classification, DPI normalization and requirement checks."""
from services.printing.artwork_types import (
    DEFAULT_REQUIREMENTS,
    ArtworkDetails,
    ArtworkRequirements,
    UploadedFile,
    ValidationResult,
)
from services.printing.classifier import ArtworkKind, classify_artwork
from services.printing.dpi import normalize_dpi, read_raster_metadata
from services.printing.validation import validate_artwork

__all__ = [
    "DEFAULT_REQUIREMENTS",
    "ArtworkDetails",
    "ArtworkKind",
    "ArtworkRequirements",
    "UploadedFile",
    "ValidationResult",
    "classify_artwork",
    "normalize_dpi",
    "read_raster_metadata",
    "validate_artwork",
]
