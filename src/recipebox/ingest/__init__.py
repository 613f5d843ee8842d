"""Recipe import from web pages, structured data and uploaded files."""

from recipebox.ingest.fetcher import FetchError, FetchErrorKind, PageFetcher
from recipebox.ingest.importer import (
    ImportResult,
    extract_recipe_from_html,
    extract_recipe_from_text,
    import_recipe_from_url,
)
from recipebox.ingest.jsonld import extract_recipe_from_json_ld
from recipebox.ingest.sources import (
    OcrWorker,
    UploadError,
    UploadPolicy,
    extract_recipe_from_upload,
)

__all__ = [
    "FetchError",
    "FetchErrorKind",
    "ImportResult",
    "OcrWorker",
    "PageFetcher",
    "UploadError",
    "UploadPolicy",
    "extract_recipe_from_html",
    "extract_recipe_from_json_ld",
    "extract_recipe_from_text",
    "extract_recipe_from_upload",
    "import_recipe_from_url",
]
