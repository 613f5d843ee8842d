"""Parse free-form recipe text into structured recipes and ingredients."""

from recipebox.parse.assembler import RecipeLayout, classify_layout, parse_recipe_text
from recipebox.parse.ingredients import (
    parse_fraction,
    parse_ingredient,
    parse_ingredients,
    split_unit_name_notes,
    tokenize_quantity,
)
from recipebox.parse.sections import SectionHeaders, detect_sections

__all__ = [
    "RecipeLayout",
    "SectionHeaders",
    "classify_layout",
    "detect_sections",
    "parse_fraction",
    "parse_ingredient",
    "parse_ingredients",
    "parse_recipe_text",
    "split_unit_name_notes",
    "tokenize_quantity",
]
