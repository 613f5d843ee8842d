"""Common data schemas for the ingestion pipeline.

Boundary models serialize with camelCase aliases (``model_dump(by_alias=True)``)
to match the shapes the recipe and meal plan stores exchange.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ContractModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParsedIngredient(_ContractModel):
    """One structured ingredient line.

    ``quantity == 0`` with an empty ``unit`` means no measurable quantity was
    found (e.g. "salt to taste"). The canonical fields are only filled in by
    the unit normalizer.
    """

    name: str = ""
    quantity: float = Field(default=0.0, ge=0)
    unit: str = ""
    notes: str | None = None
    canonical_unit: str | None = None
    canonical_quantity: float | None = None

    @property
    def has_quantity(self) -> bool:
        """True when a measurable amount was detected."""
        return self.quantity > 0 or bool(self.unit)


class ExtractedRecipe(BaseModel):
    """Recipe text split into a title, raw ingredient lines and instructions."""

    name: str = ""
    ingredients: list[str] = Field(default_factory=list)
    instructions: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.ingredients and not self.instructions


class ShoppingListItem(_ContractModel):
    """A single aggregated shopping list line."""

    name: str
    quantity: float
    unit: str = ""
    notes: str | None = None


class ShoppingListResponse(_ContractModel):
    """Shopping list for one meal plan."""

    meal_plan_id: str
    meal_plan_name: str
    shopping_list: list[ShoppingListItem] = Field(default_factory=list)
    total_items: int = 0


# Meal plan input, as read back from persistence


class PlannedIngredient(_ContractModel):
    """Persisted ingredient of a recipe assigned to a meal plan."""

    name: str
    quantity: float = Field(default=0.0, ge=0)
    unit: str = ""
    notes: str | None = None
    canonical_unit: str | None = None
    canonical_quantity: float | None = None


class PlannedRecipe(_ContractModel):
    """Recipe with its persisted ingredients."""

    id: str | None = None
    name: str = ""
    ingredients: list[PlannedIngredient] = Field(default_factory=list)


class MealPlanRecipe(_ContractModel):
    """A recipe assigned to a day, scaled by ``serve_count``."""

    serve_count: int = Field(default=1, ge=0)
    recipe: PlannedRecipe


class MealPlanDay(_ContractModel):
    """One day of a meal plan."""

    date: str | None = None
    recipes: list[MealPlanRecipe] = Field(default_factory=list)


class MealPlan(_ContractModel):
    """A meal plan with its days and assigned recipes."""

    id: str
    name: str = ""
    days: list[MealPlanDay] = Field(default_factory=list)
