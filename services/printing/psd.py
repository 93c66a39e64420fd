"""
Legacy-raster path: Photoshop (PSD/PSB) files.

Pixel size and resolution are read straight from the file header and the
ResolutionInfo image resource; the layered data is never decoded and the file
is never rewritten. Pillow only opens 8-bit PSD files (no 16/32-bit, no
PSB), so the header is parsed here.

PSD structure (big-endian):
- 26 bytes: header ("8BPS", version, 6 reserved, channels, height, width, depth, mode)
- 4 bytes + N: color mode data section
- 4 bytes + N: image resources section, a run of blocks:
    4 bytes signature ("8BIM"), 2 bytes id, padded Pascal name,
    4 bytes size, data padded to even length
"""
import io
import logging
import struct
from dataclasses import dataclass
from typing import Optional

from constants import (
    ARTWORK_ERROR_RESOLUTION_TOO_LOW,
    ARTWORK_ERROR_SIZE_TOO_SMALL,
    ARTWORK_ERROR_UNREADABLE_DIMENSIONS,
)
from services.printing.artwork_types import (
    ArtworkDetails,
    ArtworkRequirements,
    UploadedFile,
    ValidationResult,
    format_dpi,
    round_half_up,
)

logger = logging.getLogger(__name__)

PSD_SIGNATURE = b"8BPS"
RESOURCE_SIGNATURES = (b"8BIM", b"8B64", b"MeSa", b"PHUT", b"AgHg", b"DCSR")
RESOLUTION_INFO_ID = 0x03ED


class PsdHeaderError(ValueError):
    pass


@dataclass(frozen=True)
class PsdInfo:
    width: int
    height: int
    channels: int
    depth: int
    color_mode: int
    resolution: Optional[float] = None


def _read_exact(f, size: int) -> bytes:
    chunk = f.read(size)
    if len(chunk) != size:
        raise PsdHeaderError("Truncated PSD file")
    return chunk


def _read_resolution(f, section_length: int) -> Optional[float]:
    """Walk the image resources section looking for ResolutionInfo."""
    end = f.tell() + section_length
    while f.tell() + 12 <= end:
        signature = _read_exact(f, 4)
        if signature not in RESOURCE_SIGNATURES:
            raise PsdHeaderError(f"Invalid image resource signature: {signature!r}")

        resource_id = struct.unpack(">H", _read_exact(f, 2))[0]

        # Pascal string, padded so length byte + name is even
        name_length = _read_exact(f, 1)[0]
        _read_exact(f, name_length + ((name_length + 1) % 2))

        size = struct.unpack(">I", _read_exact(f, 4))[0]
        data = _read_exact(f, size)
        if size % 2:
            f.read(1)

        if resource_id == RESOLUTION_INFO_ID and size >= 4:
            # hRes is 16.16 fixed point and always pixels per inch; the unit
            # field that follows only controls how Photoshop displays it.
            h_res = struct.unpack(">I", data[:4])[0] / 65536.0
            return h_res if h_res > 0 else None

    return None


def parse_psd_header(data: bytes) -> PsdInfo:
    """
    Parse a PSD/PSB header and its resolution resource.

    Raises:
        PsdHeaderError: Not a PSD, or truncated before the dimensions.
    """
    f = io.BytesIO(data)

    if _read_exact(f, 4) != PSD_SIGNATURE:
        raise PsdHeaderError("Invalid PSD signature")

    version = struct.unpack(">H", _read_exact(f, 2))[0]
    if version not in (1, 2):
        raise PsdHeaderError(f"Unsupported PSD version: {version}")

    _read_exact(f, 6)  # reserved
    channels, height, width, depth, color_mode = struct.unpack(">HIIHH", _read_exact(f, 14))

    resolution = None
    try:
        color_data_length = struct.unpack(">I", _read_exact(f, 4))[0]
        _read_exact(f, color_data_length)
        resources_length = struct.unpack(">I", _read_exact(f, 4))[0]
        resolution = _read_resolution(f, resources_length)
    except PsdHeaderError as e:
        # Dimensions are already known; a damaged resource section only costs us the DPI
        logger.warning(f"[Artwork] PSD resources unreadable: {e}")

    return PsdInfo(
        width=width,
        height=height,
        channels=channels,
        depth=depth,
        color_mode=color_mode,
        resolution=resolution,
    )


def validate_psd(file: UploadedFile, requirements: ArtworkRequirements, file_type: str = "PSD") -> ValidationResult:
    logger.info(f"[Artwork] Processing PSD file ({file.size} bytes)")

    try:
        info = parse_psd_header(file.content)
    except PsdHeaderError as e:
        logger.warning(f"[Artwork] PSD header unreadable: {e}")
        info = None

    if info is None or not info.width or not info.height:
        return ValidationResult(
            valid=False,
            message="Could not read dimensions.",
            error_code=ARTWORK_ERROR_UNREADABLE_DIMENSIONS,
            details=ArtworkDetails.for_requirements(
                requirements,
                file_type,
                [
                    "Could not read the dimensions of your PSD file.",
                    "Try re-saving your file and upload again.",
                    "Ensure your PSD file is not corrupted.",
                ],
            ),
        )

    logger.info(
        f"[Artwork] PSD metadata: {info.width}x{info.height}px, resolution={format_dpi(info.resolution)}"
    )

    issues = []
    error_code = None

    if requirements.is_too_small(info.width, info.height):
        scale = requirements.scale_to_fit(info.width, info.height)
        issues.extend([
            f"Your artwork is too small. Current size: {info.width}x{info.height}px",
            f"Required minimum size: {requirements.width}x{requirements.height}px",
            f"Try increasing the canvas size by {round_half_up(scale * 100)}%",
        ])
        error_code = ARTWORK_ERROR_SIZE_TOO_SMALL

    # Exact match, not "at least": a 600 DPI PSD is rejected too.
    # TODO: confirm with the print shop whether higher-resolution PSDs should pass like rasters do.
    if info.resolution != requirements.resolution:
        issues.extend([
            f"Current resolution: {format_dpi(info.resolution)} DPI",
            f"Required resolution: {requirements.resolution} DPI",
            f"In Photoshop, go to Image > Image Size and set resolution to {requirements.resolution} DPI",
        ])
        error_code = error_code or ARTWORK_ERROR_RESOLUTION_TOO_LOW

    details_kwargs = dict(
        current_width=info.width,
        current_height=info.height,
        current_resolution=info.resolution,
    )

    if issues:
        return ValidationResult(
            valid=False,
            message="Invalid dimensions or resolution.",
            error_code=error_code,
            details=ArtworkDetails.for_requirements(requirements, file_type, issues, **details_kwargs),
        )

    return ValidationResult(
        valid=True,
        message="File is valid.",
        details=ArtworkDetails.for_requirements(
            requirements,
            file_type,
            [
                "Your artwork meets all requirements!",
                f"Current size: {info.width}x{info.height}px",
                f"Current resolution: {format_dpi(info.resolution)} DPI",
            ],
            **details_kwargs
        ),
    )
