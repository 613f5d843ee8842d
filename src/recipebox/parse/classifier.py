"""Heuristics for classifying single recipe text lines."""

import re

BULLET_CHARS = "-*•·●▪"
VULGAR_CHARS = "½⅓⅔¼¾⅕⅖⅗⅘⅙⅚⅛⅜⅝⅞"

BULLET_RE = re.compile(rf"^[{re.escape(BULLET_CHARS)}]")
BULLET_PREFIX_RE = re.compile(rf"^[{re.escape(BULLET_CHARS)}]+\s*")
# "1. Preheat" / "2) Stir" / "Step 3: Bake"
NUMBERED_STEP_RE = re.compile(r"^\d+[.)]\s")
STEP_PREFIX_RE = re.compile(r"^(?:step\s*)?\d+\s*[.):](?:\s+|$)", re.IGNORECASE)
LIST_NUMBER_PREFIX_RE = re.compile(r"^\d+[.)]\s+")
# "2 cups", "1.5 lb", "3/4 cup", "1 1/2 tsp", "½ cup"; "1." is a step number
LEADING_QUANTITY_RE = re.compile(
    rf"^(?:\d+(?:\.\d+|/\d+)?(?:\s+\d+/\d+)?[{VULGAR_CHARS}]?|[{VULGAR_CHARS}])\s+"
)
UNIT_KEYWORD_RE = re.compile(
    r"\b(?:cups?|tablespoons?|tbsp|teaspoons?|tsp|grams?|g|kg|ml|ounces?|oz|pounds?|lbs?)\b",
    re.IGNORECASE,
)
METADATA_RE = re.compile(
    r"^(?:"
    r"(?:prep(?:aration)?|cook(?:ing)?|total|active|inactive|rest(?:ing)?|chill(?:ing)?|bake|baking)"
    r"\s*time"
    r"|servings?|serves|yields?|makes|calories|course|cuisine|author|difficulty|source"
    r")\s*:",
    re.IGNORECASE,
)
URL_RE = re.compile(r"^(?:https?://|www\.)\S+$", re.IGNORECASE)
# "For the dough:", "Dry Ingredients", "Sauce:", "## Topping"
SUBHEADER_RE = re.compile(
    r"^(?:#+\s*\S.*"
    r"|for\s+(?:the\s+)?[^\d:]{1,40}:?"
    r"|[^\d:]{0,40}\bingredients?\s*:?"
    r"|[^\d:,.]{1,30}:)$",
    re.IGNORECASE,
)


def is_metadata_line(line: str) -> bool:
    """Lines like "Prep time: 10 minutes" or "Servings: 4"."""
    return bool(METADATA_RE.match(line.strip()))


def is_url_line(line: str) -> bool:
    return bool(URL_RE.match(line.strip()))


def is_noise_line(line: str) -> bool:
    """Metadata and bare URLs belong to neither ingredients nor instructions."""
    return is_metadata_line(line) or is_url_line(line)


def is_numbered_step(line: str) -> bool:
    return bool(NUMBERED_STEP_RE.match(line.strip()))


def is_subheader(line: str) -> bool:
    """Group labels inside an ingredients block ("For the dough:")."""
    line = line.strip()
    if not line or LEADING_QUANTITY_RE.match(line):
        return False
    return bool(SUBHEADER_RE.match(line))


def is_ingredient_like(line: str) -> bool:
    """
    Decide whether a line without section context reads as an ingredient.

    True for lines that start with a bullet, start with a quantity, or
    mention a unit keyword. Metadata, bare URLs and numbered steps are
    never ingredient-like.
    """
    line = (line or "").strip()
    if not line:
        return False
    if is_noise_line(line) or is_numbered_step(line):
        return False
    if BULLET_RE.match(line):
        return True
    if LEADING_QUANTITY_RE.match(line):
        return True
    return bool(UNIT_KEYWORD_RE.search(line))


def strip_bullet(line: str) -> str:
    return BULLET_PREFIX_RE.sub("", line.strip()).strip()


def strip_list_prefix(line: str) -> str:
    """Remove a bullet or a "1." / "1)" list number from an ingredient line."""
    line = strip_bullet(line)
    return LIST_NUMBER_PREFIX_RE.sub("", line).strip()


def strip_step_number(line: str) -> str:
    """Remove "1.", "2)", "Step 3:" or a bullet from an instruction line."""
    line = strip_bullet(line)
    return STEP_PREFIX_RE.sub("", line).strip()
