"""
Value types shared by the artwork validation pipeline.

Everything here is immutable or built fresh per call: the pipeline holds no
state between uploads.
"""
import base64
import math
from dataclasses import dataclass, field
from typing import List, Optional

from constants import REQUIRED_WIDTH_PX, REQUIRED_HEIGHT_PX, REQUIRED_RESOLUTION_PPI


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (unlike built-in round())."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def format_dpi(value: Optional[float]) -> str:
    """Render a resolution for customer-facing text: 300.0 -> '300', 72.5 -> '72.5'."""
    if value is None:
        return "unknown"
    return f"{value:g}"


@dataclass(frozen=True)
class UploadedFile:
    """An uploaded (or processed) artwork payload."""
    content: bytes
    content_type: str = ""
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ArtworkRequirements:
    width: int = REQUIRED_WIDTH_PX
    height: int = REQUIRED_HEIGHT_PX
    resolution: int = REQUIRED_RESOLUTION_PPI

    def scale_to_fit(self, width: int, height: int) -> float:
        """Smallest uniform scale factor that brings width x height up to the minimum."""
        return max(self.width / width, self.height / height)

    def is_too_small(self, width: int, height: int) -> bool:
        return width < self.width or height < self.height


DEFAULT_REQUIREMENTS = ArtworkRequirements()


@dataclass
class ArtworkDetails:
    required_width: int
    required_height: int
    required_resolution: int
    file_type: str
    suggestions: List[str] = field(default_factory=list)
    current_width: Optional[int] = None
    current_height: Optional[int] = None
    current_resolution: Optional[float] = None

    @classmethod
    def for_requirements(cls, requirements: ArtworkRequirements, file_type: str, suggestions, **current):
        return cls(
            required_width=requirements.width,
            required_height=requirements.height,
            required_resolution=requirements.resolution,
            file_type=file_type,
            suggestions=[s for s in suggestions if s],
            **current
        )

    def to_dict(self) -> dict:
        return {
            "current_width": self.current_width,
            "current_height": self.current_height,
            "current_resolution": self.current_resolution,
            "required_width": self.required_width,
            "required_height": self.required_height,
            "required_resolution": self.required_resolution,
            "file_type": self.file_type,
            "suggestions": list(self.suggestions),
        }


@dataclass
class ValidationResult:
    """
    Verdict for one uploaded artwork file.

    ``processed_file`` is only ever set by the common-raster path, and only when
    DPI normalization actually changed the bytes. It is attached whether or not
    the artwork ends up valid, so the caller can offer the upgraded file.
    """
    valid: bool
    message: str
    details: Optional[ArtworkDetails] = None
    processed_file: Optional[UploadedFile] = None
    error_code: Optional[str] = None

    @property
    def suggestions(self) -> List[str]:
        return list(self.details.suggestions) if self.details else []

    def to_dict(self, include_content: bool = True) -> dict:
        """
        JSON-ready representation.

        Args:
            include_content: Embed the processed file as base64. Disable for logs.
        """
        processed = None
        if self.processed_file is not None:
            processed = {
                "filename": self.processed_file.filename,
                "content_type": self.processed_file.content_type,
                "size": self.processed_file.size,
            }
            if include_content:
                processed["content_base64"] = base64.b64encode(self.processed_file.content).decode("ascii")

        return {
            "valid": self.valid,
            "message": self.message,
            "error_code": self.error_code,
            "processed_file": processed,
            "details": self.details.to_dict() if self.details else None,
        }
