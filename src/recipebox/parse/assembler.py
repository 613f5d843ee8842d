"""Assemble an ExtractedRecipe from raw recipe text.

The text takes one of four layouts depending on which section headers
are present. Each layout has its own handler:

* ``NO_SECTIONS``: line-by-line classification with a one-way
  preamble -> ingredients -> instructions run.
* ``INGREDIENTS_ONLY`` / ``BOTH``: blocks are sliced at the headers.
* ``INSTRUCTIONS_ONLY``: as above, and the lines between the title and the
  instructions header are classified to recover an unlabeled ingredient list.
"""

import re
from collections.abc import Callable
from enum import Enum

from recipebox.logging_config import get_logger
from recipebox.parse.classifier import (
    is_ingredient_like,
    is_noise_line,
    is_subheader,
    strip_bullet,
    strip_list_prefix,
    strip_step_number,
)
from recipebox.parse.sections import (
    INGREDIENTS_TERMINATORS,
    INSTRUCTIONS_TERMINATORS,
    SectionHeaders,
    detect_sections,
    normalize_text,
    slice_block,
)
from recipebox.schemas import ExtractedRecipe

logger = get_logger(__name__)

_MARKDOWN_HEADING_RE = re.compile(r"^#+\s*")


class RecipeLayout(str, Enum):
    """Which section headers a recipe text carries."""

    NO_SECTIONS = "no_sections"
    INGREDIENTS_ONLY = "ingredients_only"
    INSTRUCTIONS_ONLY = "instructions_only"
    BOTH = "both"


class _Run(Enum):
    PREAMBLE = "preamble"
    INGREDIENTS = "ingredients"
    INSTRUCTIONS = "instructions"


def split_lines(text: str) -> list[str]:
    """Split text into trimmed, non-empty lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def clean_title(line: str) -> str:
    return _MARKDOWN_HEADING_RE.sub("", line).strip()


def classify_layout(headers: SectionHeaders) -> RecipeLayout:
    has_ingredients = headers.ingredients is not None
    has_instructions = headers.instructions is not None
    if has_ingredients and has_instructions:
        return RecipeLayout.BOTH
    if has_ingredients:
        return RecipeLayout.INGREDIENTS_ONLY
    if has_instructions:
        return RecipeLayout.INSTRUCTIONS_ONLY
    return RecipeLayout.NO_SECTIONS


# =============================================================================
# Block cleanup
# =============================================================================


def _ingredient_lines(block: str) -> list[str]:
    lines = []
    for line in split_lines(block):
        if is_noise_line(line):
            continue
        cleaned = strip_list_prefix(line)
        if not cleaned or is_subheader(cleaned):
            continue
        lines.append(cleaned)
    return lines


def _instruction_lines(block: str) -> list[str]:
    lines = []
    for line in split_lines(block):
        if is_noise_line(line):
            continue
        cleaned = strip_step_number(line)
        if cleaned:
            lines.append(cleaned)
    return lines


# =============================================================================
# Layout handlers
# =============================================================================


def _parse_without_sections(text: str, headers: SectionHeaders) -> ExtractedRecipe:
    lines = split_lines(text)
    if not lines:
        return ExtractedRecipe()

    ingredients: list[str] = []
    instructions: list[str] = []
    run = _Run.PREAMBLE

    for line in lines[1:]:
        if is_noise_line(line):
            continue
        like = is_ingredient_like(line)
        if run is _Run.PREAMBLE and like:
            run = _Run.INGREDIENTS
        elif run is _Run.INGREDIENTS and not like and ingredients:
            run = _Run.INSTRUCTIONS

        if run is _Run.INGREDIENTS:
            ingredients.append(strip_bullet(line))
        else:
            instructions.append(strip_step_number(line))

    return ExtractedRecipe(
        name=clean_title(lines[0]),
        ingredients=ingredients,
        instructions="\n".join(instructions),
    )


def _parse_with_sections(text: str, headers: SectionHeaders) -> ExtractedRecipe:
    first_start = headers.first_start or 0
    preamble = split_lines(text[:first_start])
    title = clean_title(preamble[0]) if preamble else ""

    ingredients: list[str] = []
    instructions: list[str] = []

    if headers.ingredients is not None:
        block = slice_block(text, headers.ingredients, INGREDIENTS_TERMINATORS)
        ingredients = _ingredient_lines(block)

    if headers.instructions is not None:
        block = slice_block(text, headers.instructions, INSTRUCTIONS_TERMINATORS)
        instructions = _instruction_lines(block)

    return ExtractedRecipe(
        name=title,
        ingredients=ingredients,
        instructions="\n".join(instructions),
    )


def _parse_instructions_only(text: str, headers: SectionHeaders) -> ExtractedRecipe:
    recipe = _parse_with_sections(text, headers)
    preamble = split_lines(text[: headers.first_start or 0])[1:]

    found_ingredients = []
    found_instructions = []
    for line in preamble:
        if is_noise_line(line):
            continue
        if is_ingredient_like(line):
            found_ingredients.append(strip_bullet(line))
        else:
            found_instructions.append(strip_step_number(line))

    if found_ingredients:
        recipe.ingredients = found_ingredients
    if found_instructions:
        recipe.instructions = "\n".join(
            found_instructions + ([recipe.instructions] if recipe.instructions else [])
        )
    return recipe


_HANDLERS: dict[RecipeLayout, Callable[[str, SectionHeaders], ExtractedRecipe]] = {
    RecipeLayout.NO_SECTIONS: _parse_without_sections,
    RecipeLayout.INGREDIENTS_ONLY: _parse_with_sections,
    RecipeLayout.INSTRUCTIONS_ONLY: _parse_instructions_only,
    RecipeLayout.BOTH: _parse_with_sections,
}


def parse_recipe_text(text: str) -> ExtractedRecipe:
    """
    Split raw recipe text into title, ingredient lines and instructions.

    Works on typed text, OCR output and text extracted from PDF, DOCX or
    HTML. Never raises on odd input; the worst case is an empty recipe.

    Example:
        "Chocolate Cake\\n\\nIngredients:\\n- 1 cup sugar\\n\\nInstructions:\\n1. Mix"
        -> name "Chocolate Cake", ingredients ["1 cup sugar"], instructions "Mix"
    """
    src = normalize_text(text)
    headers = detect_sections(src)
    layout = classify_layout(headers)
    recipe = _HANDLERS[layout](src, headers)
    logger.debug(
        f"Parsed recipe text as {layout.value}: '{recipe.name}', "
        f"{len(recipe.ingredients)} ingredients, {len(recipe.instructions)} instruction chars"
    )
    return recipe
