"""Import a recipe from a URL, an HTML file or a text file and print it as JSON.

Run with: python scripts/import_recipe.py https://example.com/pancakes
          python scripts/import_recipe.py --html page.html --parse
          python scripts/import_recipe.py --text recipe.txt --parse --normalize
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from recipebox.config import get_settings
from recipebox.ingest.fetcher import FetchError
from recipebox.ingest.importer import (
    ImportResult,
    extract_recipe_from_html,
    extract_recipe_from_text,
    import_recipe_from_url,
)
from recipebox.logging_config import configure_logging, get_logger
from recipebox.normalize.units import normalize_ingredients
from recipebox.parse.ingredients import parse_ingredients

logger = get_logger(__name__)


def load_result(args: argparse.Namespace) -> ImportResult:
    if args.html:
        return extract_recipe_from_html(Path(args.html).read_text(encoding="utf-8"))
    if args.text:
        return extract_recipe_from_text(Path(args.text).read_text(encoding="utf-8"))
    return asyncio.run(import_recipe_from_url(args.url))


def main():
    parser = argparse.ArgumentParser(description="Import a recipe and print it as JSON")
    parser.add_argument("url", nargs="?", help="Recipe page URL")
    parser.add_argument("--html", type=str, help="Read a saved HTML page instead of fetching")
    parser.add_argument("--text", "-t", type=str, help="Read plain recipe text from a file")
    parser.add_argument("--parse", "-p", action="store_true", help="Parse ingredient lines")
    parser.add_argument(
        "--normalize", "-n", action="store_true", help="Add canonical units (implies --parse)"
    )

    args = parser.parse_args()
    if not (args.url or args.html or args.text):
        parser.error("a URL, --html or --text is required")

    settings = get_settings()
    configure_logging(
        log_level=settings.log_level,
        json_format=True if settings.environment == "production" else None,
    )

    try:
        result = load_result(args)
    except FetchError as e:
        logger.error(f"Import failed ({e.kind.value}): {e}")
        sys.exit(1)

    output = result.model_dump(by_alias=True)
    if args.parse or args.normalize:
        parsed = parse_ingredients(result.extracted_recipe_data.ingredients)
        if args.normalize:
            parsed = normalize_ingredients(parsed)
        output["parsedIngredients"] = [p.model_dump(by_alias=True) for p in parsed]

    print(json.dumps(output, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
