"""Shopping list generation from meal plans."""

import unicodedata
from dataclasses import dataclass
from typing import Any

from recipebox.logging_config import LoggingContext, get_logger
from recipebox.schemas import (
    MealPlan,
    PlannedIngredient,
    ShoppingListItem,
    ShoppingListResponse,
)

logger = get_logger(__name__)


@dataclass
class _Accumulator:
    name: str
    quantity: float
    unit: str
    notes: str | None


def collation_key(name: str) -> tuple[str, str]:
    """
    Sort key approximating locale-aware comparison.

    Accents and case are ignored first ("Éclair" sorts with "eclair"), the
    original spelling breaks ties so ordering stays deterministic.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), name


def _amount(
    ingredient: PlannedIngredient, use_canonical_units: bool
) -> tuple[str, float]:
    if (
        use_canonical_units
        and ingredient.canonical_unit is not None
        and ingredient.canonical_quantity is not None
    ):
        return ingredient.canonical_unit, ingredient.canonical_quantity
    return ingredient.unit, ingredient.quantity


def aggregate_shopping_list(
    plan: MealPlan | dict[str, Any],
    use_canonical_units: bool = False,
) -> list[ShoppingListItem]:
    """
    Sum the ingredients of every recipe in a meal plan.

    Ingredients merge when the lowercased name and the unit string are
    equal; quantities are multiplied by each assignment's serve count.
    Notes of the first occurrence are kept. The result is sorted by name.

    Args:
        plan: MealPlan, or its dict form as read from persistence.
        use_canonical_units: Key on the canonical unit and sum canonical
            quantities for ingredients that have been normalized, so that
            "1 cup sugar" and "240 ml sugar" merge.

    Returns:
        Aggregated shopping list items.
    """
    if not isinstance(plan, MealPlan):
        plan = MealPlan.model_validate(plan)

    entries: dict[tuple[str, str], _Accumulator] = {}

    for day in plan.days:
        for assignment in day.recipes:
            for ingredient in assignment.recipe.ingredients:
                unit, quantity = _amount(ingredient, use_canonical_units)
                key = (ingredient.name.lower(), unit)
                scaled = quantity * assignment.serve_count

                existing = entries.get(key)
                if existing is None:
                    entries[key] = _Accumulator(
                        name=ingredient.name,
                        quantity=scaled,
                        unit=unit,
                        notes=ingredient.notes,
                    )
                else:
                    existing.quantity += scaled

    items = [
        ShoppingListItem(name=e.name, quantity=e.quantity, unit=e.unit, notes=e.notes)
        for e in entries.values()
    ]
    return sorted(items, key=lambda item: collation_key(item.name))


def build_shopping_list(
    plan: MealPlan | dict[str, Any],
    use_canonical_units: bool = False,
) -> ShoppingListResponse:
    """Build the shopping list response for a meal plan."""
    if not isinstance(plan, MealPlan):
        plan = MealPlan.model_validate(plan)

    with LoggingContext(meal_plan_id=plan.id):
        items = aggregate_shopping_list(plan, use_canonical_units=use_canonical_units)
        logger.info(f"Generated shopping list: {len(items)} items for plan '{plan.name}'")

    return ShoppingListResponse(
        meal_plan_id=plan.id,
        meal_plan_name=plan.name,
        shopping_list=items,
        total_items=len(items),
    )
