"""Print the shopping list for a meal plan stored as JSON.

Run with: python scripts/shopping_list.py plan.json [--canonical]
"""

import argparse
import json
from pathlib import Path

from recipebox.config import get_settings
from recipebox.logging_config import configure_logging
from recipebox.plan.shopping_list import build_shopping_list


def main():
    parser = argparse.ArgumentParser(description="Aggregate a meal plan into a shopping list")
    parser.add_argument("plan", type=str, help="Path to the meal plan JSON file")
    parser.add_argument(
        "--canonical", "-c", action="store_true", help="Merge amounts by canonical unit"
    )

    args = parser.parse_args()
    settings = get_settings()
    configure_logging(
        log_level=settings.log_level,
        json_format=True if settings.environment == "production" else None,
    )

    plan = json.loads(Path(args.plan).read_text(encoding="utf-8"))
    response = build_shopping_list(plan, use_canonical_units=args.canonical)
    print(json.dumps(response.model_dump(by_alias=True), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
