"""Ingredient line parsing: leading quantity, unit, name and notes."""

import math
import re

from recipebox.logging_config import get_logger
from recipebox.normalize.tables import UnitTables, default_unit_tables
from recipebox.schemas import ParsedIngredient

logger = get_logger(__name__)


# =============================================================================
# Patterns
# =============================================================================

MIXED_FRACTION_RE = re.compile(r"^(\d+)\s+(\d+)/(\d+)$")
FRACTION_RE = re.compile(r"^(\d+)/(\d+)$")
NON_NUMERIC_RE = re.compile(r"[^0-9.]")
NON_LETTER_RE = re.compile(r"[^a-z]")

VULGAR_FRACTIONS: dict[str, float] = {
    "½": 1 / 2,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 1 / 4,
    "¾": 3 / 4,
    "⅕": 1 / 5,
    "⅖": 2 / 5,
    "⅗": 3 / 5,
    "⅘": 4 / 5,
    "⅙": 1 / 6,
    "⅚": 5 / 6,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
}
VULGAR_RE = re.compile(rf"^(\d*)([{''.join(VULGAR_FRACTIONS)}])$")

# "pinch of salt", "2 dashes" style lines without a number
NAMED_AMOUNT_RE = re.compile(r"^(pinch|dash)(?:es)?\b\s*(?:of\s+)?(.*)$", re.IGNORECASE)
LEADING_OF_RE = re.compile(r"^of\s+", re.IGNORECASE)
NOTES_SPLIT_RE = re.compile(r"\s*[,(]\s*")


# =============================================================================
# Quantity Tokenizer
# =============================================================================


def parse_fraction(token: str) -> float | None:
    """
    Parse a numeric token into a float.

    Handles formats like:
    - "2", "1.5"
    - "1/2"
    - "1 1/2" (mixed fraction, as one string)
    - "½", "1½"
    - "1,500" (digits are extracted, so thousands separators are dropped)

    Returns None for anything that is not a number, including zero
    denominators. Never raises.
    """
    token = token.strip()
    if not token:
        return None

    mixed = MIXED_FRACTION_RE.match(token)
    if mixed:
        whole, num, denom = (int(g) for g in mixed.groups())
        if denom == 0:
            return None
        return whole + num / denom

    frac = FRACTION_RE.match(token)
    if frac:
        num, denom = int(frac.group(1)), int(frac.group(2))
        if denom == 0:
            return None
        return num / denom

    vulgar = VULGAR_RE.match(token)
    if vulgar:
        whole = int(vulgar.group(1)) if vulgar.group(1) else 0
        return whole + VULGAR_FRACTIONS[vulgar.group(2)]

    digits = NON_NUMERIC_RE.sub("", token)
    if not any(c.isdigit() for c in digits):
        return None
    try:
        value = float(digits)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def tokenize_quantity(tokens: list[str]) -> tuple[float | None, list[str]]:
    """
    Read the leading quantity from a whitespace-split line.

    Returns:
        Tuple of (quantity or None, remaining tokens). A mixed fraction
        consumes two tokens, any other number one.
    """
    if not tokens:
        return None, []

    first = tokens[0]
    second = tokens[1] if len(tokens) > 1 else ""

    # Only "<int> <int>/<int>" is a mixed fraction
    if first.isdecimal() and FRACTION_RE.match(second):
        mixed = parse_fraction(f"{first} {second}")
        if mixed is not None:
            return mixed, tokens[2:]

    quantity = parse_fraction(first)
    if quantity is None:
        return None, list(tokens)
    return quantity, tokens[1:]


# =============================================================================
# Unit/Name/Notes Splitter
# =============================================================================


def split_name_notes(text: str) -> tuple[str, str | None]:
    """Split "butter (melted)" or "garlic, minced" into name and notes."""
    text = text.strip()
    parts = NOTES_SPLIT_RE.split(text, maxsplit=1)
    if len(parts) == 1:
        return text, None
    name, notes = parts[0].strip(), parts[1].strip()
    # Drop the ")" that closes the parenthesis the split consumed
    if notes.endswith(")") and notes.count(")") > notes.count("("):
        notes = notes[:-1].rstrip()
    return name, notes or None


def split_unit_name_notes(
    tokens: list[str],
    has_quantity: bool = True,
    tables: UnitTables | None = None,
) -> tuple[str, str, str | None]:
    """
    Split the tokens left after the quantity into unit, name and notes.

    The unit is only looked for right after a quantity, so a bare
    "clove of garlic" keeps its first word in the name.

    Returns:
        Tuple of (unit, name, notes).
    """
    tables = tables or default_unit_tables()
    remaining = list(tokens)
    unit = ""

    if has_quantity and remaining:
        candidate = NON_LETTER_RE.sub("", remaining[0].lower())
        if candidate and tables.is_known_unit(candidate):
            unit = candidate
            remaining = remaining[1:]

    text = " ".join(remaining).strip()
    if unit:
        text = LEADING_OF_RE.sub("", text)
    name, notes = split_name_notes(text)
    return unit, name, notes


def parse_ingredient(line: str, tables: UnitTables | None = None) -> ParsedIngredient:
    """
    Parse one ingredient line into a ParsedIngredient.

    Examples:
        "1 1/2 cups milk" -> quantity 1.5, unit "cups", name "milk"
        "3 tbsp butter (melted)" -> notes "melted"
        "salt to taste" -> quantity 0, unit "", name "salt to taste"
        "pinch of salt" -> quantity 0, unit "pinch", name "salt"
    """
    original = (line or "").strip()
    if not original:
        return ParsedIngredient(name="", quantity=0, unit="")

    tokens = original.split()
    quantity, remaining = tokenize_quantity(tokens)

    if quantity is None:
        named = NAMED_AMOUNT_RE.match(original)
        if named:
            name, notes = split_name_notes(named.group(2))
            return ParsedIngredient(
                name=name, quantity=0, unit=named.group(1).lower(), notes=notes
            )
        unit, name, notes = split_unit_name_notes(remaining, has_quantity=False, tables=tables)
        return ParsedIngredient(name=name, quantity=0, unit=unit, notes=notes)

    unit, name, notes = split_unit_name_notes(remaining, has_quantity=True, tables=tables)
    logger.debug(f"Parsed ingredient '{original}': qty={quantity} unit='{unit}' name='{name}'")
    return ParsedIngredient(name=name, quantity=quantity, unit=unit, notes=notes)


def parse_ingredients(lines: list[str], tables: UnitTables | None = None) -> list[ParsedIngredient]:
    """Parse raw ingredient lines, skipping blank ones."""
    return [parse_ingredient(line, tables) for line in lines if line and line.strip()]
