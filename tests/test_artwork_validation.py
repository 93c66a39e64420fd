"""
End-to-end tests for validate_artwork across all handling paths.
"""
import base64
import io

import pytest
from PIL import Image, UnidentifiedImageError

from constants import (
    ARTWORK_ERROR_PROCESSING,
    ARTWORK_ERROR_RESOLUTION_TOO_LOW,
    ARTWORK_ERROR_SIZE_TOO_SMALL,
    ARTWORK_ERROR_UNREADABLE_DIMENSIONS,
    ARTWORK_ERROR_UNREADABLE_DOCUMENT,
    ARTWORK_ERROR_UNSUPPORTED_FORMAT,
)
from services.printing import ArtworkRequirements, UploadedFile, read_raster_metadata, validate_artwork
from services.printing import document as document_module
from services.printing import raster as raster_module
from services.printing import validation as validation_module
from services.printing.artwork_types import round_half_up
from services.printing.classifier import ArtworkKind
from services.printing.psd import parse_psd_header


def assert_thresholds_echoed(result):
    assert result.details.required_width == 1200
    assert result.details.required_height == 1050
    assert result.details.required_resolution == 300


class TestCommonRaster:

    def test_small_low_dpi_png_is_upgraded_but_still_invalid(self, make_image):
        """200x150 @ 72 DPI upscales to 833x625 @ 300 DPI: still too small."""
        data = make_image(200, 150, dpi=72)
        result = validate_artwork(UploadedFile(data, "image/png", "small.png"))

        assert result.valid is False
        assert result.error_code == ARTWORK_ERROR_SIZE_TOO_SMALL
        assert result.processed_file is not None
        assert result.processed_file.content != data
        assert result.processed_file.content_type == "image/png"
        assert result.processed_file.filename == "processed-small.png"
        assert (result.details.current_width, result.details.current_height) == (833, 625)
        assert result.details.current_resolution == 300
        assert_thresholds_echoed(result)
        assert result.suggestions[0] == "Your image is too small. Current size: 833x625px"
        assert len(result.suggestions) == 3
        assert result.suggestions[2].startswith("Try resizing your image to 1400x")

    def test_low_dpi_png_upscaled_into_compliance(self, make_image):
        """400x300 @ 72 DPI becomes 1667x1250 @ 300 DPI, which meets the minimum."""
        result = validate_artwork(UploadedFile(make_image(400, 300, dpi=72), "image/png", "deck.png"))

        assert result.valid is True
        assert result.processed_file is not None
        assert "DPI was automatically updated from 72 to 300" in result.suggestions
        meta = read_raster_metadata(result.processed_file.content)
        assert (meta.width, meta.height) == (1667, 1250)

    def test_compliant_jpeg_needs_no_processing(self, make_image):
        data = make_image(1600, 1400, fmt="JPEG", dpi=300)
        result = validate_artwork(UploadedFile(data, "image/jpeg", "deck.jpg"))

        assert result.valid is True
        assert result.message == "File is valid."
        assert result.processed_file is None
        assert result.error_code is None
        assert result.details.file_type == "JPEG"
        assert result.suggestions == [
            "Your artwork meets all requirements!",
            "Current size: 1600x1400px",
            "Current resolution: 300 DPI",
        ]

    def test_large_high_dpi_image_too_small_is_not_processed(self, make_image):
        result = validate_artwork(UploadedFile(make_image(600, 500, dpi=300), "image/png", "deck.png"))

        assert result.valid is False
        assert result.processed_file is None
        assert result.error_code == ARTWORK_ERROR_SIZE_TOO_SMALL

    def test_extension_fallback_validates(self, make_image):
        data = make_image(1600, 1400, fmt="JPEG", dpi=300)
        result = validate_artwork(UploadedFile(data, "application/octet-stream", "deck.jpg"))

        assert result.valid is True
        assert result.details.file_type == "JPG"

    def test_corrupt_image_reports_processing_error(self):
        result = validate_artwork(UploadedFile(b"not really a png", "image/png", "deck.png"))

        assert result.valid is False
        assert result.message == "Error processing image file."
        assert result.error_code == ARTWORK_ERROR_PROCESSING
        assert result.processed_file is None
        # Raw decoder error first, then the canned hints
        assert len(result.suggestions) == 4
        assert "There was an error processing your image file." in result.suggestions

    def test_normalizer_failure_blocks_validation(self, make_image, monkeypatch):
        """The None sentinel means validation cannot proceed, never 'valid as-is'."""
        monkeypatch.setattr(raster_module, "normalize_dpi", lambda data, target_dpi: None)
        result = validate_artwork(UploadedFile(make_image(1600, 1400, dpi=300), "image/png", "deck.png"))

        assert result.valid is False
        assert result.error_code == ARTWORK_ERROR_PROCESSING
        assert result.processed_file is None

    def test_custom_requirements(self, make_image):
        requirements = ArtworkRequirements(width=100, height=100, resolution=72)
        data = make_image(200, 200, dpi=72)
        result = validate_artwork(UploadedFile(data, "image/png", "deck.png"), requirements)

        assert result.valid is True
        assert result.processed_file is None
        assert result.details.required_resolution == 72


class TestDocument:

    def test_twelve_by_ten_and_a_half_inch_pdf_is_valid(self, make_pdf):
        result = validate_artwork(UploadedFile(make_pdf(864, 756), "application/pdf", "deck.pdf"))

        assert result.valid is True
        assert (result.details.current_width, result.details.current_height) == (3600, 3150)
        assert result.details.file_type == "PDF"
        assert result.processed_file is None
        assert result.suggestions == ["Your artwork meets all requirements!", "Current size: 3600x3150px"]

    def test_exact_minimum_pdf_is_valid(self, make_pdf):
        """4 x 3.5 inches at 300 DPI is exactly 1200x1050."""
        result = validate_artwork(UploadedFile(make_pdf(288, 252), "application/pdf", "deck.pdf"))
        assert result.valid is True

    def test_small_pdf_suggests_scale(self, make_pdf):
        result = validate_artwork(UploadedFile(make_pdf(144, 144), "application/pdf", "deck.pdf"))

        assert result.valid is False
        assert result.message == "Invalid dimensions."
        assert result.error_code == ARTWORK_ERROR_SIZE_TOO_SMALL
        assert result.processed_file is None
        assert result.suggestions == [
            "Your artwork is too small. Current size: 600x600px",
            "Required minimum size: 1200x1050px",
            "Try scaling your artwork by 200% to meet the minimum size requirement.",
            "For vector files (AI/PDF), you can safely scale the artwork without losing quality.",
        ]

    def test_ai_export_labelled_postscript(self, make_pdf):
        result = validate_artwork(UploadedFile(make_pdf(), "application/postscript", "Deck.ai"))

        assert result.valid is True
        assert result.details.file_type == "AI"

    def test_only_first_page_counts(self, make_pdf):
        result = validate_artwork(UploadedFile(make_pdf(864, 756, pages=3), "application/pdf", "deck.pdf"))
        assert result.valid is True

    def test_rotated_page_measured_unrotated(self, make_pdf):
        """Rotation is a viewing hint; a landscape deck rotated 90 degrees keeps its size."""
        data = make_pdf(324, 280.8, rotation=90)
        result = validate_artwork(UploadedFile(data, "application/pdf", "deck.pdf"))

        assert result.valid is True
        assert (result.details.current_width, result.details.current_height) == (1350, 1170)

    def test_cropbox_does_not_shrink_page(self, make_pdf):
        data = make_pdf(400, 400, cropbox=(0, 0, 200, 200))
        result = validate_artwork(UploadedFile(data, "application/pdf", "deck.pdf"))

        assert result.valid is True
        assert (result.details.current_width, result.details.current_height) == (1667, 1667)

    def test_zero_pages(self, monkeypatch):
        class EmptyDoc:
            page_count = 0

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        monkeypatch.setattr(document_module.fitz, "open", lambda *a, **k: EmptyDoc())
        result = validate_artwork(UploadedFile(b"%PDF-1.4", "application/pdf", "deck.pdf"))

        assert result.valid is False
        assert result.message == "Document has no pages."
        assert result.error_code == ARTWORK_ERROR_UNREADABLE_DOCUMENT
        assert result.details.current_width is None

    def test_unreadable_first_page(self, monkeypatch):
        class BrokenDoc:
            page_count = 1

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def load_page(self, index):
                raise RuntimeError("bad page tree")

        monkeypatch.setattr(document_module.fitz, "open", lambda *a, **k: BrokenDoc())
        result = validate_artwork(UploadedFile(b"%PDF-1.4", "application/pdf", "deck.pdf"))

        assert result.valid is False
        assert result.message == "Could not read first page."
        assert result.error_code == ARTWORK_ERROR_UNREADABLE_DOCUMENT

    def test_garbage_pdf_falls_back_to_generic_error(self):
        result = validate_artwork(UploadedFile(b"definitely not a pdf", "application/pdf", "deck.pdf"))

        assert result.valid is False
        assert result.message == "Error processing file."
        assert result.error_code == ARTWORK_ERROR_PROCESSING
        assert_thresholds_echoed(result)


class TestPsd:

    def test_compliant_psd(self, make_psd):
        result = validate_artwork(UploadedFile(make_psd(1600, 1400, 300), "image/vnd.adobe.photoshop", "deck.psd"))

        assert result.valid is True
        assert result.details.file_type == "PSD"
        assert result.details.current_resolution == 300
        assert result.processed_file is None

    def test_correct_size_at_96_dpi_is_rejected(self, make_psd):
        result = validate_artwork(UploadedFile(make_psd(1600, 1400, 96), "image/vnd.adobe.photoshop", "deck.psd"))

        assert result.valid is False
        assert result.error_code == ARTWORK_ERROR_RESOLUTION_TOO_LOW
        assert result.processed_file is None
        assert result.suggestions == [
            "Current resolution: 96 DPI",
            "Required resolution: 300 DPI",
            "In Photoshop, go to Image > Image Size and set resolution to 300 DPI",
        ]

    def test_higher_resolution_psd_is_rejected(self, make_psd):
        """PSD resolution must match exactly; 600 DPI fails where a PNG would pass."""
        result = validate_artwork(UploadedFile(make_psd(1600, 1400, 600), "image/vnd.adobe.photoshop", "deck.psd"))
        assert result.valid is False
        assert "Current resolution: 600 DPI" in result.suggestions

    def test_small_psd_reports_both_issues(self, make_psd):
        result = validate_artwork(UploadedFile(make_psd(400, 350, 72), "image/vnd.adobe.photoshop", "deck.psd"))

        assert result.valid is False
        assert result.error_code == ARTWORK_ERROR_SIZE_TOO_SMALL
        assert result.suggestions[:3] == [
            "Your artwork is too small. Current size: 400x350px",
            "Required minimum size: 1200x1050px",
            "Try increasing the canvas size by 300%",
        ]
        assert result.suggestions[3] == "Current resolution: 72 DPI"
        assert len(result.suggestions) == 6

    def test_missing_resolution_resource(self, make_psd):
        result = validate_artwork(UploadedFile(make_psd(1600, 1400, None), "image/vnd.adobe.photoshop", "deck.psd"))

        assert result.valid is False
        assert result.details.current_resolution is None
        assert "Current resolution: unknown DPI" in result.suggestions

    def test_corrupt_psd(self):
        result = validate_artwork(UploadedFile(b"8BPS\x00", "image/vnd.adobe.photoshop", "deck.psd"))

        assert result.valid is False
        assert result.message == "Could not read dimensions."
        assert result.error_code == ARTWORK_ERROR_UNREADABLE_DIMENSIONS

    def test_parse_header(self, make_psd):
        info = parse_psd_header(make_psd(1234, 567, 150, channels=4))
        assert (info.width, info.height, info.channels, info.resolution) == (1234, 567, 4, 150)

    def test_sixteen_bit_psd(self, make_psd):
        """Pillow refuses 16-bit PSDs; the header parser still reads them."""
        data = make_psd(1600, 1400, 300, depth=16)
        with pytest.raises(UnidentifiedImageError):
            Image.open(io.BytesIO(data))

        result = validate_artwork(UploadedFile(data, "image/vnd.adobe.photoshop", "deck.psd"))
        assert result.valid is True
        assert parse_psd_header(data).depth == 16

    def test_large_document_format(self, make_psd):
        """PSB (version 2) shares the header layout up to the image resources."""
        result = validate_artwork(
            UploadedFile(make_psd(1600, 1400, 300, version=2), "image/vnd.adobe.photoshop", "deck.psb")
        )

        assert result.valid is True
        assert (result.details.current_width, result.details.current_height) == (1600, 1400)


class TestRejectedAndFallback:

    def test_unsupported_format(self):
        result = validate_artwork(UploadedFile(b"hello", "text/plain", "notes.txt"))

        assert result.valid is False
        assert result.message == "Unsupported file format."
        assert result.error_code == ARTWORK_ERROR_UNSUPPORTED_FORMAT
        assert result.details.file_type == "text/plain"
        assert result.details.current_width is None
        assert len(result.suggestions) == 3
        assert_thresholds_echoed(result)

    def test_unexpected_handler_error_is_contained(self, monkeypatch):
        def boom(file, requirements, file_type):
            raise RuntimeError("kaboom")

        monkeypatch.setitem(validation_module.HANDLERS, ArtworkKind.REJECTED, boom)
        result = validate_artwork(UploadedFile(b"hello", "text/plain", "notes.txt"))

        assert result.valid is False
        assert result.message == "Error processing file."
        assert result.error_code == ARTWORK_ERROR_PROCESSING


class TestResultSerialization:

    def test_to_dict_embeds_processed_file(self, make_image):
        result = validate_artwork(UploadedFile(make_image(200, 150, dpi=72), "image/png", "small.png"))
        payload = result.to_dict()

        assert payload["valid"] is False
        assert payload["details"]["required_width"] == 1200
        processed = payload["processed_file"]
        assert processed["filename"] == "processed-small.png"
        assert base64.b64decode(processed["content_base64"]) == result.processed_file.content
        assert processed["size"] == len(result.processed_file.content)

    def test_to_dict_without_content(self, make_image):
        result = validate_artwork(UploadedFile(make_image(200, 150, dpi=72), "image/png", "small.png"))
        assert "content_base64" not in result.to_dict(include_content=False)["processed_file"]

    def test_to_dict_valid_document(self, make_pdf):
        payload = validate_artwork(UploadedFile(make_pdf(), "application/pdf", "deck.pdf")).to_dict()
        assert payload["processed_file"] is None
        assert payload["error_code"] is None


@pytest.mark.parametrize("value,expected", [
    (0.5, 1),
    (1.5, 2),
    (2.5, 3),
    (937.5, 938),
    (2.4999, 2),
    (-0.5, -1),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
