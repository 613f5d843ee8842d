"""Recipe extraction from schema.org JSON-LD blocks embedded in HTML."""

import json
import re
from collections.abc import Iterator
from typing import Any

from bs4 import BeautifulSoup

from recipebox.logging_config import get_logger
from recipebox.schemas import ExtractedRecipe

logger = get_logger(__name__)

JSON_LD_TYPE_RE = re.compile(r"application/ld\+json", re.IGNORECASE)


def extract_json_ld_blocks(html: str) -> list[str]:
    """Return the raw contents of every ``application/ld+json`` script tag."""
    soup = BeautifulSoup(html or "", "html.parser")
    blocks = []
    for script in soup.find_all("script", attrs={"type": JSON_LD_TYPE_RE}):
        content = script.string if script.string is not None else script.get_text()
        if content and content.strip():
            blocks.append(content)
    return blocks


def _is_recipe_type(value: Any) -> bool:
    types = value if isinstance(value, list) else [value]
    for item in types:
        # Accept "Recipe", "recipe" and "http://schema.org/Recipe"
        if str(item).rstrip("/").rsplit("/", 1)[-1].lower() == "recipe":
            return True
    return False


def iter_recipe_nodes(value: Any) -> Iterator[dict[str, Any]]:
    """
    Depth-first walk yielding every node typed as a Recipe.

    Lists are walked in order; for dicts the node itself is checked, then
    its ``@graph``, then every other value. A Recipe node is not searched
    further.
    """
    if isinstance(value, list):
        for item in value:
            yield from iter_recipe_nodes(item)
        return

    if not isinstance(value, dict):
        return

    node_type = value.get("@type") or value.get("type")
    if node_type and _is_recipe_type(node_type):
        yield value
        return

    if "@graph" in value:
        yield from iter_recipe_nodes(value["@graph"])

    for key, child in value.items():
        if key != "@graph":
            yield from iter_recipe_nodes(child)


def find_recipe_node(value: Any) -> dict[str, Any] | None:
    """Return the first Recipe node, or None."""
    return next(iter_recipe_nodes(value), None)


def normalize_instructions(value: Any) -> str:
    """
    Flatten ``recipeInstructions`` into newline-separated text.

    Accepts a plain string, a list of strings, a list of HowToStep objects
    (``text`` or ``name``), HowToSection objects and ``itemListElement``
    wrappers.
    """
    if not value:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        parts = [normalize_instructions(item) for item in value]
        return "\n".join(part for part in parts if part)
    if isinstance(value, dict):
        if isinstance(value.get("itemListElement"), list):
            return normalize_instructions(value["itemListElement"])
        for key in ("text", "name"):
            if isinstance(value.get(key), str):
                return value[key].strip()
    return ""


def recipe_from_node(node: dict[str, Any]) -> ExtractedRecipe:
    """Build an ExtractedRecipe from a schema.org Recipe node."""
    name = node.get("name")
    raw_ingredients = node.get("recipeIngredient")
    ingredients = []
    if isinstance(raw_ingredients, list):
        ingredients = [item.strip() for item in raw_ingredients if isinstance(item, str) and item.strip()]
    return ExtractedRecipe(
        name=name.strip() if isinstance(name, str) else "",
        ingredients=ingredients,
        instructions=normalize_instructions(node.get("recipeInstructions")),
    )


def extract_recipe_from_json_ld(html: str) -> ExtractedRecipe | None:
    """
    Extract the first recipe described by the page's JSON-LD.

    Each block is parsed on its own; a block that fails to parse is skipped.

    Returns:
        The recipe, or None when no block holds a usable Recipe node.
    """
    for index, block in enumerate(extract_json_ld_blocks(html)):
        try:
            data = json.loads(block.strip())
        except json.JSONDecodeError as e:
            logger.debug(f"Skipping invalid JSON-LD block {index}: {e}")
            continue

        for node in iter_recipe_nodes(data):
            recipe = recipe_from_node(node)
            if not recipe.is_empty:
                logger.debug(f"Found JSON-LD recipe '{recipe.name}' in block {index}")
                return recipe

    return None
