"""
Filename utilities for artwork files handed back to customers.

Names are derived from the customer's upload but never trusted: everything is
slugified before it reaches a Content-Disposition header or a local path.
"""
import os
import re

# Pillow format name -> extension used for processed artwork
FORMAT_EXTENSIONS = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "TIFF": ".tiff",
    "WEBP": ".webp",
    "BMP": ".bmp",
}


def slugify_text(text: str, max_length: int = 60) -> str:
    """
    Convert text to a safe slug: [a-z0-9_-] only, max length enforced.

    Args:
        text: Input text to slugify
        max_length: Maximum length of output (default 60)

    Returns:
        Safe slug string
    """
    if not text:
        return "unnamed"

    s = str(text).lower()

    # Replace common separators with underscore
    s = re.sub(r'[\s\-./\\,]+', '_', s)

    # Remove any character not in allowlist
    s = re.sub(r'[^a-z0-9_-]', '', s)

    # Collapse multiple underscores
    s = re.sub(r'_+', '_', s)

    s = s.strip('_-')

    if len(s) > max_length:
        s = s[:max_length].rstrip('_-')

    return s if s else "unnamed"


def processed_artwork_filename(original_filename: str, image_format: str) -> str:
    """
    Name for a DPI-normalized copy of an upload.

    Examples:
        >>> processed_artwork_filename("My Deck.PNG", "PNG")
        'processed-my_deck.png'
        >>> processed_artwork_filename("", "JPEG")
        'processed-artwork.jpg'
    """
    stem = os.path.splitext(os.path.basename(original_filename or ""))[0]
    slug = slugify_text(stem) if stem else "artwork"
    if slug == "unnamed":
        slug = "artwork"
    ext = FORMAT_EXTENSIONS.get((image_format or "").upper(), ".png")
    return f"processed-{slug}{ext}"
