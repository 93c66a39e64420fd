# Print Requirements (skateboard deck artwork)
REQUIRED_WIDTH_PX = 1200
REQUIRED_HEIGHT_PX = 1050
REQUIRED_RESOLUTION_PPI = 300

# Most consumer images omit print resolution; 96 is the universal software default
DEFAULT_SCREEN_DPI = 96

# PostScript points per inch
POINTS_PER_INCH = 72

# PNG stores pixels-per-metre, so 72/96/300 ppi never round-trip exactly
DENSITY_SNAP_TOLERANCE = 0.02

# Upscaled rasters above this are refused (decompression bomb guard)
MAX_NORMALIZED_PIXELS = 120_000_000

# Media Types
MEDIA_TYPE_PDF = "application/pdf"
MEDIA_TYPE_POSTSCRIPT = "application/postscript"
MEDIA_TYPE_ILLUSTRATOR = "application/illustrator"
MEDIA_TYPE_PHOTOSHOP = "image/vnd.adobe.photoshop"

VECTOR_EXPORT_EXTENSION = ".ai"

ACCEPTED_MEDIA_TYPES = (
    MEDIA_TYPE_POSTSCRIPT,
    MEDIA_TYPE_PHOTOSHOP,
    MEDIA_TYPE_PDF,
    MEDIA_TYPE_ILLUSTRATOR,
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/tiff",
)

# Declared types from multipart uploads are unreliable; the extension is a secondary signal
COMMON_RASTER_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".tiff", ".tif")

# Validation Error Codes
ARTWORK_ERROR_UNSUPPORTED_FORMAT = "unsupported_format"
ARTWORK_ERROR_UNREADABLE_DOCUMENT = "unreadable_document"
ARTWORK_ERROR_UNREADABLE_DIMENSIONS = "unreadable_dimensions"
ARTWORK_ERROR_SIZE_TOO_SMALL = "size_too_small"
ARTWORK_ERROR_RESOLUTION_TOO_LOW = "resolution_too_low"
ARTWORK_ERROR_PROCESSING = "processing_error"

# Suggestions shown whenever a format is rejected
FORMAT_SUGGESTIONS = (
    "Please provide your artwork in AI, PSD, PDF, or common image formats (JPG, PNG, etc.).",
    "If you have an Adobe Illustrator file, save it as .ai or PDF.",
    "For Photoshop files, save as .psd format.",
)
