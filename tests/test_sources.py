"""Unit tests for upload validation, OCR worker lifecycle and upload import."""

from unittest.mock import MagicMock

import pytest

from recipebox.ingest.sources import (
    DOCX_TYPE,
    JPEG_TYPE,
    PDF_TYPE,
    PNG_TYPE,
    OcrError,
    OcrWorker,
    UploadError,
    UploadErrorKind,
    UploadPolicy,
    extract_recipe_from_upload,
    validate_upload,
)


class StaticExtractor:
    """TextExtractor returning fixed text."""

    def __init__(self, text: str):
        self.text = text
        self.calls = 0

    def extract_text(self, data: bytes) -> str:
        self.calls += 1
        return self.text


class FailingExtractor:
    def extract_text(self, data: bytes) -> str:
        raise ValueError("corrupt file")


@pytest.fixture
def ocr_engine():
    engine = MagicMock()
    engine.recognize.return_value = "Toast\n2 slices bread\nToast the bread."
    return engine


class TestValidateUpload:
    """Tests for validate_upload."""

    @pytest.mark.parametrize("content_type", [DOCX_TYPE, PDF_TYPE, JPEG_TYPE, PNG_TYPE])
    def test_accepted_types(self, content_type):
        validate_upload(content_type, 1024)

    def test_unsupported_type(self):
        with pytest.raises(UploadError) as exc_info:
            validate_upload("image/gif", 10)
        assert exc_info.value.kind is UploadErrorKind.UNSUPPORTED_TYPE

    def test_too_large(self):
        with pytest.raises(UploadError) as exc_info:
            validate_upload(PDF_TYPE, 10 * 1024 * 1024 + 1)
        assert exc_info.value.kind is UploadErrorKind.TOO_LARGE

    def test_limit_is_inclusive(self):
        validate_upload(PDF_TYPE, 10 * 1024 * 1024)

    def test_limit_from_settings(self, monkeypatch):
        monkeypatch.setenv("RECIPEBOX_UPLOAD_MAX_BYTES", "100")
        with pytest.raises(UploadError):
            validate_upload(PNG_TYPE, 101)

    def test_custom_policy(self):
        policy = UploadPolicy(allowed_types=frozenset({"text/plain"}), max_bytes=5)
        validate_upload("text/plain", 5, policy)
        with pytest.raises(UploadError):
            validate_upload(PDF_TYPE, 1, policy)


class TestOcrWorker:
    """Tests for the OcrWorker lifecycle."""

    def test_context_manager_loads_and_terminates(self, ocr_engine):
        with OcrWorker(ocr_engine, language="deu", max_width=800) as worker:
            assert worker.is_running
            text = worker.extract_text(b"image")

        assert text.startswith("Toast")
        ocr_engine.load.assert_called_once_with("deu")
        ocr_engine.recognize.assert_called_once_with(b"image", 800)
        ocr_engine.terminate.assert_called_once()
        assert not worker.is_running

    def test_recognize_empty_result(self, ocr_engine):
        ocr_engine.recognize.return_value = None
        with OcrWorker(ocr_engine) as worker:
            assert worker.recognize(b"blank") == ""

    def test_settings_defaults(self, ocr_engine):
        worker = OcrWorker(ocr_engine)
        assert worker.language == "eng"
        assert worker.max_width == 1600

    def test_start_is_idempotent(self, ocr_engine):
        worker = OcrWorker(ocr_engine)
        worker.start()
        worker.start()
        ocr_engine.load.assert_called_once()
        worker.close()

    def test_use_before_start(self, ocr_engine):
        with pytest.raises(OcrError):
            OcrWorker(ocr_engine).extract_text(b"image")

    def test_use_after_close(self, ocr_engine):
        worker = OcrWorker(ocr_engine).start()
        worker.close()
        with pytest.raises(OcrError):
            worker.extract_text(b"image")
        with pytest.raises(OcrError):
            worker.start()

    def test_close_without_start(self, ocr_engine):
        OcrWorker(ocr_engine).close()
        ocr_engine.terminate.assert_not_called()

    def test_close_is_idempotent(self, ocr_engine):
        worker = OcrWorker(ocr_engine).start()
        worker.close()
        worker.close()
        ocr_engine.terminate.assert_called_once()


class TestExtractRecipeFromUpload:
    """Tests for extract_recipe_from_upload."""

    def test_document_upload(self, chocolate_cake_text):
        extractor = StaticExtractor(chocolate_cake_text)
        result = extract_recipe_from_upload(b"%PDF-1.4", PDF_TYPE, {PDF_TYPE: extractor})
        assert extractor.calls == 1
        assert result.source == "text"
        assert result.extracted_recipe_data.name == "Chocolate Cake"

    def test_image_upload_through_ocr_worker(self, ocr_engine):
        with OcrWorker(ocr_engine) as worker:
            result = extract_recipe_from_upload(b"\x89PNG", PNG_TYPE, {PNG_TYPE: worker})
        assert result.extracted_recipe_data.ingredients == ["2 slices bread"]

    def test_validation_runs_first(self):
        extractor = StaticExtractor("text")
        with pytest.raises(UploadError) as exc_info:
            extract_recipe_from_upload(b"x", "text/html", {"text/html": extractor})
        assert exc_info.value.kind is UploadErrorKind.UNSUPPORTED_TYPE
        assert extractor.calls == 0

    def test_missing_extractor(self):
        with pytest.raises(UploadError) as exc_info:
            extract_recipe_from_upload(b"x", DOCX_TYPE, {})
        assert exc_info.value.kind is UploadErrorKind.NO_EXTRACTOR

    def test_extractor_failure(self):
        with pytest.raises(UploadError) as exc_info:
            extract_recipe_from_upload(b"x", PDF_TYPE, {PDF_TYPE: FailingExtractor()})
        assert exc_info.value.kind is UploadErrorKind.EXTRACTION_FAILED
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_stopped_ocr_worker_is_reported(self, ocr_engine):
        worker = OcrWorker(ocr_engine)
        with pytest.raises(OcrError):
            extract_recipe_from_upload(b"x", JPEG_TYPE, {JPEG_TYPE: worker})
