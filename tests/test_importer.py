"""Unit tests for recipe import from text, HTML and URLs."""

from unittest.mock import AsyncMock

import httpx
import pytest

from recipebox.ingest.fetcher import FetchedPage, FetchError, FetchErrorKind, PageFetcher
from recipebox.ingest.importer import (
    NO_SECTIONS_WARNING,
    TRUNCATION_WARNING,
    ImportResult,
    extract_recipe_from_html,
    extract_recipe_from_text,
    import_recipe_from_url,
)


class TestExtractRecipeFromText:
    """Tests for extract_recipe_from_text."""

    def test_text_recipe(self, chocolate_cake_text):
        result = extract_recipe_from_text(chocolate_cake_text)
        assert result.source == "text"
        assert result.parsing_warning is None
        assert result.extracted_recipe_data.name == "Chocolate Cake"

    def test_empty_text_warns(self):
        result = extract_recipe_from_text("")
        assert result.extracted_recipe_data.is_empty
        assert result.parsing_warning == NO_SECTIONS_WARNING


class TestExtractRecipeFromHtml:
    """Tests for extract_recipe_from_html."""

    def test_json_ld_wins(self, json_ld_html):
        result = extract_recipe_from_html(json_ld_html)
        assert result.source == "json_ld"
        assert result.extracted_recipe_data.name == "Classic Pancakes"
        assert result.parsing_warning is None

    def test_text_fallback(self, plain_recipe_html):
        result = extract_recipe_from_html(plain_recipe_html)
        assert result.source == "text"
        recipe = result.extracted_recipe_data
        assert recipe.name == "Tomato Soup"
        assert recipe.ingredients == ["2 cups tomatoes", "1 cup water"]
        assert recipe.instructions == "Simmer for 20 minutes.\nBlend until smooth."

    def test_title_is_used_when_body_is_empty(self):
        result = extract_recipe_from_html("<html><head><title>Mystery Dish</title></head><body></body></html>")
        assert result.extracted_recipe_data.name == "Mystery Dish"
        assert result.parsing_warning is None

    def test_truncation_warning(self, json_ld_html):
        result = extract_recipe_from_html(json_ld_html, truncated=True)
        assert result.parsing_warning == TRUNCATION_WARNING

    def test_camel_case_serialization(self, json_ld_html):
        data = extract_recipe_from_html(json_ld_html).model_dump(by_alias=True)
        assert set(data) == {"extractedRecipeData", "parsingWarning", "source"}
        assert data["extractedRecipeData"]["ingredients"][0] == "1 cup flour"

    def test_result_accepts_camel_case(self):
        result = ImportResult.model_validate(
            {"extractedRecipeData": {"name": "Soup"}, "parsingWarning": "check"}
        )
        assert result.extracted_recipe_data.name == "Soup"
        assert result.parsing_warning == "check"


class TestImportRecipeFromUrl:
    """Tests for import_recipe_from_url."""

    @pytest.mark.asyncio
    async def test_import_with_mock_transport(self, json_ld_html):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(
                    200, text=json_ld_html, headers={"content-type": "text/html"}
                )
            )
        )
        async with PageFetcher(client=client) as fetcher:
            result = await import_recipe_from_url("https://example.com/pancakes", fetcher=fetcher)
        await client.aclose()

        assert result.source == "json_ld"
        assert result.extracted_recipe_data.ingredients == ["1 cup flour", "1 cup milk", "1 egg"]

    @pytest.mark.asyncio
    async def test_truncated_page_warns(self, plain_recipe_html):
        fetcher = AsyncMock(spec=PageFetcher)
        fetcher.fetch.return_value = FetchedPage(
            url="https://example.com/soup", html=plain_recipe_html, truncated=True
        )

        result = await import_recipe_from_url("https://example.com/soup", fetcher=fetcher)

        assert result.parsing_warning == TRUNCATION_WARNING
        assert result.extracted_recipe_data.name == "Tomato Soup"
        fetcher.close.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate(self):
        fetcher = AsyncMock(spec=PageFetcher)
        fetcher.fetch.side_effect = FetchError("timed out", FetchErrorKind.TIMEOUT)

        with pytest.raises(FetchError) as exc_info:
            await import_recipe_from_url("https://example.com/slow", fetcher=fetcher)
        assert exc_info.value.kind is FetchErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_blocked_url_without_fetcher(self):
        with pytest.raises(FetchError) as exc_info:
            await import_recipe_from_url("http://localhost/recipe")
        assert exc_info.value.kind is FetchErrorKind.BLOCKED_HOST
