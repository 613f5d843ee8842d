"""Uploaded documents and images as recipe text sources.

PDF, DOCX and OCR text extraction are collaborators supplied by the
caller through the :class:`TextExtractor` protocol. OCR engines are wrapped
in an :class:`OcrWorker` that the caller creates once, shares, and closes.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import TracebackType
from typing import Protocol, runtime_checkable

from recipebox.config import get_settings
from recipebox.ingest.importer import ImportResult, extract_recipe_from_text
from recipebox.logging_config import get_logger

logger = get_logger(__name__)

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_TYPE = "application/pdf"
JPEG_TYPE = "image/jpeg"
PNG_TYPE = "image/png"


class UploadErrorKind(str, Enum):
    UNSUPPORTED_TYPE = "unsupported_type"
    TOO_LARGE = "too_large"
    NO_EXTRACTOR = "no_extractor"
    EXTRACTION_FAILED = "extraction_failed"


class UploadError(Exception):
    """Raised when an upload cannot be turned into text."""

    def __init__(self, message: str, kind: UploadErrorKind, content_type: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.content_type = content_type


class OcrError(RuntimeError):
    """Raised when an OcrWorker is used outside its lifecycle."""


@runtime_checkable
class TextExtractor(Protocol):
    """Anything that turns file bytes into plain text."""

    def extract_text(self, data: bytes) -> str: ...


class OcrEngine(Protocol):
    """An OCR backend; loading and unloading may be expensive."""

    def load(self, language: str) -> None: ...

    def recognize(self, image: bytes, max_width: int) -> str: ...

    def terminate(self) -> None: ...


@dataclass(frozen=True)
class UploadPolicy:
    """Accepted upload types and size."""

    allowed_types: frozenset[str] = frozenset({DOCX_TYPE, PDF_TYPE, JPEG_TYPE, PNG_TYPE})
    max_bytes: int = field(default_factory=lambda: get_settings().upload_max_bytes)


def validate_upload(content_type: str, size: int, policy: UploadPolicy | None = None) -> None:
    """Raise UploadError if the upload type or size is not accepted."""
    policy = policy or UploadPolicy()
    if content_type not in policy.allowed_types:
        raise UploadError("Invalid file type", UploadErrorKind.UNSUPPORTED_TYPE, content_type)
    if size > policy.max_bytes:
        raise UploadError(
            f"File too large ({size} bytes, limit {policy.max_bytes})",
            UploadErrorKind.TOO_LARGE,
            content_type,
        )


class OcrWorker:
    """
    Owned handle on an OCR engine.

    The engine is loaded once by :meth:`start` and released by
    :meth:`close`; use it as a context manager to tie both to a scope::

        with OcrWorker(engine) as worker:
            text = worker.extract_text(image_bytes)
    """

    def __init__(
        self,
        engine: OcrEngine,
        language: str | None = None,
        max_width: int | None = None,
    ):
        settings = get_settings()
        self.engine = engine
        self.language = language or settings.ocr_language
        self.max_width = max_width or settings.ocr_max_width
        self._started = False
        self._closed = False

    @property
    def is_running(self) -> bool:
        return self._started and not self._closed

    def start(self) -> "OcrWorker":
        if self._closed:
            raise OcrError("OCR worker was closed and cannot be restarted")
        if not self._started:
            logger.info(f"Loading OCR engine (language={self.language})")
            self.engine.load(self.language)
            self._started = True
        return self

    def recognize(self, image: bytes) -> str:
        """Run OCR on one image; the worker must be started."""
        if not self.is_running:
            raise OcrError("OCR worker is not running; call start() first")
        return self.engine.recognize(image, self.max_width) or ""

    def extract_text(self, data: bytes) -> str:
        return self.recognize(data)

    def close(self) -> None:
        if self._started and not self._closed:
            logger.info("Terminating OCR engine")
            self.engine.terminate()
        self._closed = True

    def __enter__(self) -> "OcrWorker":
        return self.start()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def extract_recipe_from_upload(
    data: bytes,
    content_type: str,
    extractors: Mapping[str, TextExtractor],
    policy: UploadPolicy | None = None,
) -> ImportResult:
    """
    Validate an upload, extract its text, and parse it into a recipe draft.

    Args:
        data: File contents.
        content_type: MIME type reported for the upload.
        extractors: Text extractor per MIME type (an OcrWorker for images).
        policy: Accepted types and size limit.

    Raises:
        UploadError: unsupported type, oversized file, missing extractor, or
            a failing extractor.
    """
    validate_upload(content_type, len(data), policy)

    extractor = extractors.get(content_type)
    if extractor is None:
        raise UploadError(
            f"No text extractor configured for {content_type}",
            UploadErrorKind.NO_EXTRACTOR,
            content_type,
        )

    try:
        text = extractor.extract_text(data)
    except OcrError:
        raise
    except Exception as e:
        logger.error(f"Text extraction failed for {content_type}: {e}")
        raise UploadError(
            f"Failed to extract text: {e}", UploadErrorKind.EXTRACTION_FAILED, content_type
        ) from e

    logger.info(f"Extracted {len(text)} characters from {content_type} upload")
    return extract_recipe_from_text(text)
