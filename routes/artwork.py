"""
Artwork Blueprint - upload preflight for deck orders.

The order form posts the customer's flattened artwork here before an order is
created. The response is always the full ValidationResult so the UI can show
suggestions and offer the DPI-upgraded file.
"""
from flask import Blueprint, request, jsonify, current_app

from constants import ACCEPTED_MEDIA_TYPES, COMMON_RASTER_EXTENSIONS, VECTOR_EXPORT_EXTENSION
from extensions import limiter
from services.printing import ArtworkRequirements, validate_artwork
from utils.uploads import UploadError, read_artwork_upload

artwork_bp = Blueprint('artwork', __name__, url_prefix='/api/artwork')

ARTWORK_FIELD = "artwork"


def requirements_from_config():
    """Build print requirements from app config (falls back to printer minimums)."""
    defaults = ArtworkRequirements()
    return ArtworkRequirements(
        width=current_app.config.get("ARTWORK_REQUIRED_WIDTH", defaults.width),
        height=current_app.config.get("ARTWORK_REQUIRED_HEIGHT", defaults.height),
        resolution=current_app.config.get("ARTWORK_REQUIRED_RESOLUTION", defaults.resolution),
    )


def _artwork_rate_limit():
    return current_app.config.get("ARTWORK_RATE_LIMIT") or "30 per minute"


@artwork_bp.route("/requirements", methods=["GET"])
def get_requirements():
    """Publish thresholds and accepted formats for the upload form."""
    requirements = requirements_from_config()
    return jsonify({
        "required_width": requirements.width,
        "required_height": requirements.height,
        "required_resolution": requirements.resolution,
        "accepted_media_types": list(ACCEPTED_MEDIA_TYPES),
        "accepted_extensions": list(COMMON_RASTER_EXTENSIONS) + [VECTOR_EXPORT_EXTENSION, ".pdf", ".psd"],
        "max_upload_bytes": current_app.config.get("MAX_CONTENT_LENGTH"),
    }), 200


@artwork_bp.route("/validate", methods=["POST"])
@limiter.limit(_artwork_rate_limit)
def validate_upload():
    """
    Validate a multipart artwork upload.

    Form Fields:
      artwork (file): The artwork to check.

    Query Params:
      include_processed (bool): Embed the processed file as base64 (default true).

    Returns:
      200 with the ValidationResult (valid or not), 400 if no usable file was sent.
    """
    try:
        upload = read_artwork_upload(request.files.get(ARTWORK_FIELD))
    except UploadError as e:
        return jsonify({"error": str(e)}), 400

    result = validate_artwork(upload, requirements_from_config())

    current_app.logger.info(
        f"[Artwork] {upload.filename!r} ({upload.content_type or 'unknown'}, {upload.size} bytes): "
        f"valid={result.valid} code={result.error_code}"
    )

    include_content = request.args.get("include_processed", "1").strip().lower() not in ("0", "false", "no")
    return jsonify(result.to_dict(include_content=include_content)), 200


@artwork_bp.app_errorhandler(413)
def upload_too_large(e):
    limit = current_app.config.get("MAX_CONTENT_LENGTH") or 0
    return jsonify({
        "error": f"File too large. Maximum size is {limit / 1024 / 1024:.0f}MB."
    }), 413


@artwork_bp.app_errorhandler(429)
def rate_limited(e):
    return jsonify({"error": "Too many uploads. Please wait a moment and try again."}), 429
