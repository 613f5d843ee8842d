"""Meal plan shopping lists."""

from recipebox.plan.shopping_list import aggregate_shopping_list, build_shopping_list

__all__ = [
    "aggregate_shopping_list",
    "build_shopping_list",
]
