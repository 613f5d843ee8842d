"""Unit vocabulary, alias, conversion and density tables.

The tables are data: they ship as ``data/units.json`` and are assembled
through :class:`UnitTablesBuilder`, which enforces the table invariants.
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

from recipebox.config import get_settings
from recipebox.logging_config import get_logger

logger = get_logger(__name__)

# Metric base units every conversion must land on
BASE_UNITS = frozenset({"ml", "g"})


class UnitTableError(ValueError):
    """Raised when unit table data violates a table invariant."""


@dataclass(frozen=True)
class UnitConversion:
    """Conversion of one canonical unit to a metric base unit."""

    target_unit: str
    factor: float


@dataclass(frozen=True)
class UnitTables:
    """Immutable set of unit tables used by parsing and normalization."""

    units: frozenset[str]
    aliases: Mapping[str, str]
    conversions: Mapping[str, UnitConversion]
    densities: tuple[tuple[str, float], ...]
    version: int = 1

    def is_known_unit(self, token: str) -> bool:
        """Check whether a lowercased, letters-only token is a unit."""
        return token in self.units

    def resolve_alias(self, unit: str) -> str:
        """Map a unit spelling to its canonical spelling (idempotent)."""
        return self.aliases.get(unit, unit)

    def conversion_for(self, canonical_unit: str) -> UnitConversion | None:
        return self.conversions.get(canonical_unit)

    def density_for(self, ingredient_name: str) -> float | None:
        """Return the density (g/ml) of the first key contained in the name."""
        name = ingredient_name.lower()
        for key, density in self.densities:
            if key in name:
                return density
        return None


@dataclass
class UnitTablesBuilder:
    """Collects table entries and validates them into :class:`UnitTables`."""

    version: int = 1
    _units: set[str] = field(default_factory=set)
    _aliases: dict[str, str] = field(default_factory=dict)
    _conversions: dict[str, UnitConversion] = field(default_factory=dict)
    _densities: list[tuple[str, float]] = field(default_factory=list)

    def add_units(self, units: Iterable[str]) -> "UnitTablesBuilder":
        self._units.update(u.lower() for u in units)
        return self

    def add_alias(self, variant: str, canonical: str) -> "UnitTablesBuilder":
        variant, canonical = variant.lower(), canonical.lower()
        existing = self._aliases.get(variant)
        if existing is not None and existing != canonical:
            raise UnitTableError(
                f"Alias '{variant}' already maps to '{existing}', not '{canonical}'"
            )
        self._aliases[variant] = canonical
        return self

    def add_conversion(self, unit: str, target_unit: str, factor: float) -> "UnitTablesBuilder":
        unit = unit.lower()
        if unit in self._conversions:
            raise UnitTableError(f"Unit '{unit}' already has a conversion")
        if target_unit not in BASE_UNITS:
            raise UnitTableError(
                f"Conversion target for '{unit}' must be one of {sorted(BASE_UNITS)}, "
                f"got '{target_unit}'"
            )
        if factor <= 0:
            raise UnitTableError(f"Conversion factor for '{unit}' must be positive")
        self._conversions[unit] = UnitConversion(target_unit=target_unit, factor=float(factor))
        return self

    def add_density(self, keyword: str, density: float) -> "UnitTablesBuilder":
        if density <= 0:
            raise UnitTableError(f"Density for '{keyword}' must be positive")
        self._densities.append((keyword.lower(), float(density)))
        return self

    def build(self) -> UnitTables:
        # Alias targets must be canonical spellings
        for variant, canonical in self._aliases.items():
            if self._aliases.get(canonical, canonical) != canonical:
                raise UnitTableError(
                    f"Alias '{variant}' -> '{canonical}' points at another alias"
                )
        for unit in self._conversions:
            if unit in self._aliases and self._aliases[unit] != unit:
                raise UnitTableError(f"Conversion defined on alias '{unit}' instead of its canonical unit")

        units = set(self._units)
        units.update(self._aliases)
        units.update(self._aliases.values())
        return UnitTables(
            units=frozenset(units),
            aliases=MappingProxyType(dict(self._aliases)),
            conversions=MappingProxyType(dict(self._conversions)),
            densities=tuple(self._densities),
            version=self.version,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnitTablesBuilder":
        """Populate a builder from the ``units.json`` schema."""
        try:
            builder = cls(version=int(data.get("version", 1)))
            builder.add_units(data.get("units", []))
            for variant, canonical in data.get("aliases", {}).items():
                builder.add_alias(variant, canonical)
            for unit, entry in data.get("conversions", {}).items():
                builder.add_conversion(unit, entry["to"], entry["factor"])
            for keyword, density in data.get("densities", []):
                builder.add_density(keyword, density)
        except UnitTableError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise UnitTableError(f"Malformed unit table data: {e}") from e
        return builder


def load_unit_tables(path: Path | None = None) -> UnitTables:
    """
    Load unit tables from a JSON file.

    Args:
        path: JSON file following the ``units.json`` schema. Defaults to the
            bundled data file.

    Returns:
        Validated UnitTables.
    """
    if path is None:
        raw = resources.files("recipebox.normalize").joinpath("data/units.json").read_text("utf-8")
        source = "bundled units.json"
    else:
        raw = Path(path).read_text("utf-8")
        source = str(path)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise UnitTableError(f"Unit table {source} is not valid JSON: {e}") from e

    tables = UnitTablesBuilder.from_dict(data).build()
    logger.debug(
        f"Loaded unit tables v{tables.version} from {source}: "
        f"{len(tables.units)} units, {len(tables.conversions)} conversions, "
        f"{len(tables.densities)} densities"
    )
    return tables


@lru_cache
def default_unit_tables() -> UnitTables:
    """Get the cached tables configured through settings."""
    return load_unit_tables(get_settings().unit_tables_path)
