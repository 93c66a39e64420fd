"""
Artwork classifier.

Routes an upload to one handling strategy from its declared media type and
filename. Declared types from multipart uploads are unreliable, so the
filename extension is consulted as a secondary signal.
"""
from enum import Enum

from constants import (
    COMMON_RASTER_EXTENSIONS,
    MEDIA_TYPE_ILLUSTRATOR,
    MEDIA_TYPE_PDF,
    MEDIA_TYPE_PHOTOSHOP,
    MEDIA_TYPE_POSTSCRIPT,
    VECTOR_EXPORT_EXTENSION,
)


class ArtworkKind(Enum):
    DOCUMENT = "document"
    LEGACY_RASTER = "legacy_raster"
    COMMON_RASTER = "common_raster"
    REJECTED = "rejected"


def _normalize(content_type, filename):
    return (content_type or "").strip().lower(), (filename or "").strip().lower()


def is_vector_export(content_type: str, filename: str) -> bool:
    """Illustrator exports: either typed as such, or mislabeled as generic PostScript with a .ai name."""
    content_type, filename = _normalize(content_type, filename)
    if content_type == MEDIA_TYPE_ILLUSTRATOR:
        return True
    return content_type == MEDIA_TYPE_POSTSCRIPT and filename.endswith(VECTOR_EXPORT_EXTENSION)


def has_common_raster_extension(filename: str) -> bool:
    _, filename = _normalize("", filename)
    return filename.endswith(COMMON_RASTER_EXTENSIONS)


def classify_artwork(content_type: str, filename: str) -> ArtworkKind:
    """
    Decide the handling strategy for an upload. Rules apply in order:

    1. PDF, or a PDF-compatible Illustrator export -> DOCUMENT
    2. Photoshop-native type -> LEGACY_RASTER
    3. Any other image/* type, or a common raster extension -> COMMON_RASTER
    4. Everything else -> REJECTED
    """
    content_type, filename = _normalize(content_type, filename)

    if content_type == MEDIA_TYPE_PDF or is_vector_export(content_type, filename):
        return ArtworkKind.DOCUMENT

    if content_type == MEDIA_TYPE_PHOTOSHOP:
        return ArtworkKind.LEGACY_RASTER

    if content_type.startswith("image/") or has_common_raster_extension(filename):
        return ArtworkKind.COMMON_RASTER

    return ArtworkKind.REJECTED


def format_label(kind: ArtworkKind, content_type: str, filename: str) -> str:
    """Display label for the detected format (e.g. 'PDF', 'AI', 'PSD', 'PNG')."""
    if kind is ArtworkKind.DOCUMENT:
        return "AI" if is_vector_export(content_type, filename) else "PDF"
    if kind is ArtworkKind.LEGACY_RASTER:
        return "PSD"

    content_type, filename = _normalize(content_type, filename)
    if kind is ArtworkKind.COMMON_RASTER:
        label = content_type[len("image/"):] if content_type.startswith("image/") else ""
        if not label and "." in filename:
            label = filename.rsplit(".", 1)[1]
        return label.upper() or "UNKNOWN"

    return content_type or "unknown"
