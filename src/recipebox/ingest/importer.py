"""Turn text, HTML pages and URLs into reviewable recipe drafts."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from recipebox.ingest.fetcher import PageFetcher
from recipebox.ingest.html import extract_title, html_to_text
from recipebox.ingest.jsonld import extract_recipe_from_json_ld
from recipebox.logging_config import LoggingContext, get_logger
from recipebox.parse.assembler import parse_recipe_text
from recipebox.schemas import ExtractedRecipe

logger = get_logger(__name__)

TRUNCATION_WARNING = "Content truncated while parsing; verify the results."
NO_SECTIONS_WARNING = "Could not detect recipe sections; review the extracted text."


class ImportResult(BaseModel):
    """A recipe draft plus an advisory warning for the editing form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    extracted_recipe_data: ExtractedRecipe = Field(default_factory=ExtractedRecipe)
    parsing_warning: str | None = None
    source: Literal["json_ld", "text"] = "text"


def _with_warning(recipe: ExtractedRecipe, warning: str | None, source: str) -> ImportResult:
    if recipe.is_empty and warning is None:
        warning = NO_SECTIONS_WARNING
    return ImportResult(extracted_recipe_data=recipe, parsing_warning=warning, source=source)


def extract_recipe_from_text(text: str) -> ImportResult:
    """Parse typed, OCR or document text into a recipe draft."""
    return _with_warning(parse_recipe_text(text), None, "text")


def extract_recipe_from_html(html: str, truncated: bool = False) -> ImportResult:
    """
    Build a recipe draft from an HTML page.

    JSON-LD structured data is tried first. Otherwise the page is rendered
    to text and parsed, with ``<title>`` as a fallback name.
    """
    warning = TRUNCATION_WARNING if truncated else None

    recipe = extract_recipe_from_json_ld(html)
    if recipe is not None:
        return _with_warning(recipe, warning, "json_ld")

    logger.debug("No JSON-LD recipe found, falling back to text parsing")
    recipe = parse_recipe_text(html_to_text(html))
    if not recipe.name:
        recipe.name = extract_title(html)
    return _with_warning(recipe, warning, "text")


async def import_recipe_from_url(url: str, fetcher: PageFetcher | None = None) -> ImportResult:
    """
    Fetch a recipe page and build a recipe draft from it.

    Raises:
        FetchError: when the page cannot be obtained (bad URL, blocked host,
            timeout, upstream status or content type).
    """
    owns_fetcher = fetcher is None
    fetcher = fetcher or PageFetcher()
    with LoggingContext(source=url):
        try:
            page = await fetcher.fetch(url)
        finally:
            if owns_fetcher:
                await fetcher.close()

        result = extract_recipe_from_html(page.html, truncated=page.truncated)
        logger.info(
            f"Imported '{result.extracted_recipe_data.name}' via {result.source} "
            f"({len(result.extracted_recipe_data.ingredients)} ingredients)"
        )
        return result
