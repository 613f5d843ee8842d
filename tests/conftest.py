"""Pytest configuration and shared fixtures."""

import json

import pytest

from recipebox.config import get_settings
from recipebox.logging_config import clear_context
from recipebox.normalize.tables import default_unit_tables

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require network access)"
    )
    config.addinivalue_line("markers", "slow: marks tests as slow running")


@pytest.fixture(autouse=True)
def reset_cached_state():
    """Drop cached settings, unit tables and logging context between tests."""
    get_settings.cache_clear()
    default_unit_tables.cache_clear()
    clear_context()
    yield
    get_settings.cache_clear()
    default_unit_tables.cache_clear()
    clear_context()


# =============================================================================
# Recipe Text Fixtures
# =============================================================================


@pytest.fixture
def chocolate_cake_text():
    """Recipe with both ingredients and instructions headers."""
    return (
        "Chocolate Cake\n"
        "\n"
        "Ingredients:\n"
        "- 2 cups flour\n"
        "- 1 cup sugar\n"
        "- 1/2 cup cocoa powder\n"
        "\n"
        "Instructions:\n"
        "1. Preheat oven to 350F.\n"
        "2. Mix everything together.\n"
        "3. Bake for 30 minutes.\n"
    )


@pytest.fixture
def sectioned_ingredients_text():
    """Recipe whose ingredients are split into labeled groups."""
    return (
        "Vanilla Cake\n"
        "\n"
        "Dry Ingredients:\n"
        "- 2 cups flour\n"
        "- 1 tsp baking powder\n"
        "\n"
        "Wet Ingredients:\n"
        "- 1 cup milk\n"
        "- 2 eggs\n"
        "\n"
        "Instructions:\n"
        "Combine the dry and wet ingredients.\n"
        "Bake until golden.\n"
    )


@pytest.fixture
def unlabeled_recipe_text():
    """Recipe with no section headers at all."""
    return (
        "Simple Sandwich\n"
        "2 slices bread\n"
        "1 slice cheese\n"
        "1 tbsp butter\n"
        "Butter the bread.\n"
        "Put the cheese between the slices.\n"
    )


@pytest.fixture
def ocr_recipe_text():
    """OCR output where the capital I of the headers was read as l."""
    return "Garden Salad\nlngredients:\n2 cups lettuce\n1 tomato\nlnstructions:\nToss and serve.\n"


# =============================================================================
# HTML Fixtures
# =============================================================================


@pytest.fixture
def json_ld_recipe():
    """A schema.org Recipe node."""
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Classic Pancakes",
        "recipeIngredient": ["1 cup flour", "1 cup milk", "1 egg"],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Whisk everything together."},
            {"@type": "HowToStep", "text": "Fry in a hot pan."},
        ],
    }


@pytest.fixture
def json_ld_html(json_ld_recipe):
    """HTML page carrying the recipe as JSON-LD inside an @graph."""
    graph = {
        "@context": "https://schema.org",
        "@graph": [
            {"@type": "WebSite", "name": "Example Kitchen"},
            json_ld_recipe,
        ],
    }
    return (
        "<html><head><title>Pancakes | Example Kitchen</title>"
        f'<script type="application/ld+json">{json.dumps(graph)}</script>'
        "</head><body><p>Not the recipe text</p></body></html>"
    )


@pytest.fixture
def plain_recipe_html():
    """HTML page without structured data."""
    return (
        "<html><head><title>Tomato Soup | Example Kitchen</title>"
        "<style>body { color: red; }</style></head>"
        "<body>"
        "<h1>Tomato Soup</h1>"
        "<h2>Ingredients</h2>"
        "<ul><li>2 cups tomatoes</li><li>1 cup water</li></ul>"
        "<h2>Instructions</h2>"
        "<ol><li>Simmer for 20 minutes.</li><li>Blend until smooth.</li></ol>"
        "<script>var tracking = true;</script>"
        "</body></html>"
    )


# =============================================================================
# Meal Plan Fixtures
# =============================================================================


@pytest.fixture
def meal_plan_data():
    """Meal plan as read back from persistence (camelCase keys)."""
    return {
        "id": "plan-1",
        "name": "Week 1",
        "days": [
            {
                "date": "2024-03-04",
                "recipes": [
                    {
                        "serveCount": 2,
                        "recipe": {
                            "id": "r1",
                            "name": "Pancakes",
                            "ingredients": [
                                {"name": "Flour", "quantity": 1, "unit": "cup", "notes": "sifted"},
                                {"name": "Milk", "quantity": 1, "unit": "cup"},
                                {"name": "Eggs", "quantity": 1, "unit": ""},
                            ],
                        },
                    }
                ],
            },
            {
                "date": "2024-03-05",
                "recipes": [
                    {
                        "serveCount": 1,
                        "recipe": {
                            "id": "r2",
                            "name": "Omelette",
                            "ingredients": [
                                {"name": "eggs", "quantity": 3, "unit": "", "notes": "large"},
                                {"name": "milk", "quantity": 2, "unit": "tbsp"},
                                {"name": "Salt", "quantity": 0, "unit": ""},
                            ],
                        },
                    }
                ],
            },
        ],
    }
