"""Unit normalization and conversion utilities."""

from collections.abc import Iterable

from recipebox.logging_config import get_logger
from recipebox.normalize.tables import UnitTables, default_unit_tables
from recipebox.schemas import ParsedIngredient

logger = get_logger(__name__)

# Decimal places kept on canonical quantities
CANONICAL_PRECISION = 2


def resolve_unit(unit: str | None, tables: UnitTables | None = None) -> str:
    """Lowercase a unit and resolve it to its canonical spelling."""
    tables = tables or default_unit_tables()
    return tables.resolve_alias((unit or "").strip().lower())


def normalize_parsed_ingredient(
    parsed: ParsedIngredient,
    tables: UnitTables | None = None,
) -> ParsedIngredient:
    """
    Add canonical unit and quantity fields to a parsed ingredient.

    Steps:
    1. Resolve the unit through the alias table ("tablespoons" -> "tbsp").
    2. Convert to the metric base unit (ml or g) when a conversion exists.
       Without a quantity only the canonical unit is set. Units without a
       conversion ("pinch", "clove") keep their resolved spelling.
    3. Volumes in ml are converted to grams when the ingredient name
       contains a key of the density table.

    The input is not modified; ``quantity`` and ``unit`` are never changed.

    Example:
        1 cup sugar -> 240 ml -> canonical_quantity 204.0, canonical_unit "g"
    """
    tables = tables or default_unit_tables()
    canonical_unit = resolve_unit(parsed.unit, tables)
    canonical_quantity: float | None = None

    conversion = tables.conversion_for(canonical_unit)
    if conversion is not None:
        if parsed.quantity > 0:
            canonical_quantity = round(parsed.quantity * conversion.factor, CANONICAL_PRECISION)
        canonical_unit = conversion.target_unit

    if canonical_unit == "ml" and canonical_quantity and canonical_quantity > 0:
        density = tables.density_for(parsed.name or "")
        if density is not None:
            canonical_quantity = round(canonical_quantity * density, CANONICAL_PRECISION)
            canonical_unit = "g"
            logger.debug(f"Applied density {density} g/ml to '{parsed.name}'")

    return parsed.model_copy(
        update={"canonical_unit": canonical_unit, "canonical_quantity": canonical_quantity}
    )


def normalize_ingredients(
    ingredients: Iterable[ParsedIngredient],
    tables: UnitTables | None = None,
) -> list[ParsedIngredient]:
    """Normalize a batch of parsed ingredients."""
    tables = tables or default_unit_tables()
    return [normalize_parsed_ingredient(item, tables) for item in ingredients]
