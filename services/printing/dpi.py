"""
Raster metadata reading and DPI normalization.

Normalization brings a raster up to the minimum print resolution: the pixel
dimensions are scaled by ``target / current`` and the resolution tag is
rewritten. Images already at or above the target are returned untouched (same
object, no re-encode), so repeated uploads never suffer generation loss.
"""
import io
import logging
import math
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from constants import (
    DEFAULT_SCREEN_DPI,
    DENSITY_SNAP_TOLERANCE,
    MAX_NORMALIZED_PIXELS,
    REQUIRED_RESOLUTION_PPI,
)
from services.printing.artwork_types import round_half_up

logger = logging.getLogger(__name__)

# EXIF / TIFF tag ids
EXIF_X_RESOLUTION = 0x011A
EXIF_Y_RESOLUTION = 0x011B
EXIF_RESOLUTION_UNIT = 0x0128
EXIF_UNIT_INCH = 2
EXIF_UNIT_CM = 3

# Source format -> format written after resampling. Anything else becomes PNG.
SAVE_FORMATS = {
    "JPEG": "JPEG",
    "MPO": "JPEG",
    "PNG": "PNG",
    "TIFF": "TIFF",
    "WEBP": "WEBP",
    "BMP": "BMP",
}

# Formats whose Pillow writer takes a native dpi= tag
DPI_TAG_FORMATS = {"JPEG", "PNG", "TIFF", "BMP"}

# Formats that carry resolution in an embedded EXIF block
EXIF_FORMATS = {"JPEG", "PNG", "WEBP"}


@dataclass(frozen=True)
class RasterMetadata:
    width: int
    height: int
    resolution: Optional[float]
    format: str

    @property
    def media_type(self) -> str:
        return Image.MIME.get(self.format, "application/octet-stream")


def snap_density(value) -> Optional[float]:
    """
    Clean up a decoded resolution value.

    Non-positive or non-finite values mean "not declared". Values within a
    hair of an integer are snapped to it: PNG stores pixels per metre, so
    300 ppi reads back as 299.9994.
    """
    if value is None:
        return None
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        return None
    nearest = round_half_up(value)
    if abs(value - nearest) <= DENSITY_SNAP_TOLERANCE:
        return float(nearest)
    return value


def _read_resolution(img: Image.Image) -> Optional[float]:
    dpi = img.info.get("dpi")
    if dpi:
        try:
            resolution = snap_density(dpi[0])
        except (TypeError, ValueError, IndexError, ZeroDivisionError):
            resolution = None
        if resolution is not None:
            return resolution

    # WebP (and some JPEGs without JFIF density) only declare resolution in EXIF
    exif = img.getexif()
    x_res = exif.get(EXIF_X_RESOLUTION)
    if x_res is None:
        return None

    try:
        x_res = float(x_res)
    except (TypeError, ValueError, ZeroDivisionError):
        return None

    unit = exif.get(EXIF_RESOLUTION_UNIT, EXIF_UNIT_INCH)
    if unit == EXIF_UNIT_CM:
        x_res *= 2.54
    elif unit != EXIF_UNIT_INCH:
        return None

    return snap_density(x_res)


def read_raster_metadata(data: bytes) -> RasterMetadata:
    """
    Read width, height, resolution and format from raster bytes.

    Raises whatever Pillow raises for unreadable data; callers decide how to
    report it.
    """
    with Image.open(io.BytesIO(data)) as img:
        width, height = img.size
        return RasterMetadata(
            width=width,
            height=height,
            resolution=_read_resolution(img),
            format=(img.format or "").upper(),
        )


def _encode(img: Image.Image, size, dpi: int) -> bytes:
    fmt = SAVE_FORMATS.get((img.format or "").upper(), "PNG")

    resized = img.resize(size, Image.Resampling.LANCZOS)
    if fmt == "JPEG" and resized.mode not in ("RGB", "L", "CMYK"):
        resized = resized.convert("RGB")

    params = {}
    icc_profile = img.info.get("icc_profile")
    if icc_profile:
        params["icc_profile"] = icc_profile
    if fmt in DPI_TAG_FORMATS:
        params["dpi"] = (dpi, dpi)
    if fmt in ("JPEG", "WEBP"):
        params["quality"] = 95

    if fmt in EXIF_FORMATS:
        exif = img.getexif()
        if len(exif) or fmt == "WEBP":
            exif[EXIF_X_RESOLUTION] = dpi
            exif[EXIF_Y_RESOLUTION] = dpi
            exif[EXIF_RESOLUTION_UNIT] = EXIF_UNIT_INCH
            params["exif"] = exif.tobytes()

    output = io.BytesIO()
    resized.save(output, format=fmt, **params)
    return output.getvalue()


def normalize_dpi(
    data: bytes,
    target_dpi: int = REQUIRED_RESOLUTION_PPI,
    default_dpi: int = DEFAULT_SCREEN_DPI,
) -> Optional[bytes]:
    """
    Upscale a raster to ``target_dpi`` when its declared resolution is lower.

    Args:
        data: Raw image bytes.
        target_dpi: Minimum print resolution.
        default_dpi: Resolution assumed when the file declares none.

    Returns:
        ``data`` itself when no change is needed, new bytes when the image was
        resampled, or None when no safe transformation is possible (corrupt or
        empty input, zero dimensions, oversize result). None never means
        "valid as-is".
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            declared_dpi = _read_resolution(img)
            if declared_dpi is None:
                logger.info(f"[DPI] Resolution metadata missing, assuming default {default_dpi} DPI")
                current_dpi = float(default_dpi)
            else:
                current_dpi = declared_dpi

            if current_dpi >= target_dpi:
                logger.info(f"[DPI] Image already at {current_dpi:g} DPI (>= {target_dpi}), no processing needed")
                return data

            width, height = img.size
            if not width or not height:
                logger.error(f"[DPI] Invalid image dimensions detected: {width}x{height}")
                return None

            scale = target_dpi / current_dpi
            new_width = round_half_up(width * scale)
            new_height = round_half_up(height * scale)

            if new_width * new_height > MAX_NORMALIZED_PIXELS:
                logger.error(
                    f"[DPI] Refusing to upscale {width}x{height} to {new_width}x{new_height}: "
                    f"exceeds {MAX_NORMALIZED_PIXELS} pixels"
                )
                return None

            logger.info(
                f"[DPI] Image resized from {width}x{height} ({current_dpi:g} DPI) "
                f"to {new_width}x{new_height} ({target_dpi} DPI)"
            )
            return _encode(img, (new_width, new_height), target_dpi)
    except Exception as e:
        logger.error(f"[DPI] Error processing image: {e}")
        return None
