"""
Artwork upload handling.
Turns a multipart upload into the immutable payload the validation pipeline reads.
"""
import mimetypes

from werkzeug.utils import secure_filename

from services.printing.artwork_types import UploadedFile


class UploadError(ValueError):
    """Raised when a request does not carry a usable artwork upload."""


def guess_content_type(filename):
    """Fallback media type from the filename, for clients that send none."""
    if not filename:
        return ""
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or ""


def read_artwork_upload(file_storage):
    """
    Read a Flask FileStorage into an UploadedFile.

    The declared content type is kept as sent (possibly empty or generic);
    classification deliberately treats it as unreliable and consults the
    filename as well.

    Args:
        file_storage: FileStorage object from request.files

    Returns:
        UploadedFile

    Raises:
        UploadError: No file, or an empty file. Oversize bodies never get here:
            Flask rejects them against MAX_CONTENT_LENGTH first.
    """
    if not file_storage or not file_storage.filename:
        raise UploadError("No file provided")

    file_bytes = file_storage.read()
    if not file_bytes:
        raise UploadError("Uploaded file is empty")

    filename = secure_filename(file_storage.filename) or file_storage.filename
    content_type = (file_storage.mimetype or "").strip().lower()
    if not content_type or content_type == "application/octet-stream":
        content_type = guess_content_type(filename) or content_type

    return UploadedFile(content=file_bytes, content_type=content_type, filename=filename)
