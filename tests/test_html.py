"""Unit tests for HTML to text rendering."""

from recipebox.ingest.html import extract_title, html_to_text


class TestHtmlToText:
    """Tests for html_to_text."""

    def test_block_elements_become_lines(self, plain_recipe_html):
        text = html_to_text(plain_recipe_html)
        lines = [line for line in text.split("\n") if line]
        assert lines == [
            "Tomato Soup",
            "Ingredients",
            "2 cups tomatoes",
            "1 cup water",
            "Instructions",
            "Simmer for 20 minutes.",
            "Blend until smooth.",
        ]

    def test_scripts_and_styles_are_dropped(self, plain_recipe_html):
        text = html_to_text(plain_recipe_html)
        assert "tracking" not in text
        assert "color" not in text

    def test_line_breaks(self):
        assert html_to_text("<p>1 cup rice<br>2 cups water</p>") == "1 cup rice\n2 cups water"

    def test_whitespace_is_collapsed(self):
        assert html_to_text("<p>  2 \t cups&nbsp;&nbsp;flour </p>") == "2 cups flour"

    def test_blank_lines_are_limited(self):
        text = html_to_text("<div>A</div><div></div><div></div><div></div><div>B</div>")
        assert "\n\n\n" not in text
        assert text.startswith("A") and text.endswith("B")

    def test_empty(self):
        assert html_to_text("") == ""


class TestExtractTitle:
    """Tests for extract_title."""

    def test_title(self):
        assert extract_title("<html><head><title>  Best\n Soup </title></head></html>") == "Best Soup"

    def test_no_title(self):
        assert extract_title("<p>No title</p>") == ""
