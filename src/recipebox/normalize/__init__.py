"""Normalize parsed ingredients into canonical metric units."""

from recipebox.normalize.tables import (
    UnitConversion,
    UnitTableError,
    UnitTables,
    UnitTablesBuilder,
    default_unit_tables,
    load_unit_tables,
)
from recipebox.normalize.units import (
    normalize_ingredients,
    normalize_parsed_ingredient,
    resolve_unit,
)

__all__ = [
    "UnitConversion",
    "UnitTableError",
    "UnitTables",
    "UnitTablesBuilder",
    "default_unit_tables",
    "load_unit_tables",
    "normalize_ingredients",
    "normalize_parsed_ingredient",
    "resolve_unit",
]
