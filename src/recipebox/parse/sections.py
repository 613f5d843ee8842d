"""Section header detection for recipe text.

Two pattern sets exist per header family:

* detection patterns, anchored to a line start, used to find the first
  header of each family;
* block-end patterns, anchored to a preceding newline, used only to find
  where a block stops.

A header is the family keyword alone on its line (optionally behind a
markdown ``#`` run and followed by ``:``), or one or two capitalized
label words plus the keyword and a colon ("Dry Ingredients:"). Prose such
as "Mix the ingredients together" matches neither set. Ingredient group
labels are only taken as the ingredients header ahead of the instructions
header, and never end an instructions block.
"""

import re
from dataclasses import dataclass

# =============================================================================
# Text normalization
# =============================================================================

_LINE_BREAK_RE = re.compile(r"\r\n?")
_INLINE_SPACE_RE = re.compile(r"[\t ]")
# OCR reads the capital I of these headers as l, 1 or |
_OCR_HEADER_RE = re.compile(r"(?<![A-Za-z])[l1|](?=(?:ngredients?|nstructions)\b)", re.IGNORECASE)


def normalize_text(text: str) -> str:
    """Unify line endings, turn tabs and NBSP into spaces, and trim."""
    text = _LINE_BREAK_RE.sub("\n", text or "")
    return _INLINE_SPACE_RE.sub(" ", text).strip()


def fix_ocr_headers(text: str) -> str:
    """Correct "lngredients"/"lnstructions" misreads; keeps offsets intact."""
    return _OCR_HEADER_RE.sub("I", text)


# =============================================================================
# Header patterns
# =============================================================================

INGREDIENTS_WORDS = r"ingredients?"
INSTRUCTIONS_WORDS = r"instructions|directions|method|preparation|steps"
NOTES_WORDS = r"recipe\s+notes|notes?|tips"
NUTRITION_WORDS = r"nutrition(?:al)?(?:\s+(?:facts|information|info))?"

_MARKDOWN = r"[ \t]*#*[ \t]*"
# Capitalized label words, as in "Dry Ingredients:" but not "Combine the ingredients:"
_QUALIFIER = r"(?:(?-i:[A-Z][A-Za-z]*)[ \t]+){1,2}"


def _header_body(
    words: str, exclude: str | None = None, bare: bool = True, labelled: bool = True
) -> str:
    guard = rf"(?![^\n]*{exclude})" if exclude else ""
    forms = []
    if bare:
        forms.append(rf"(?:{words})[ \t]*(?::|$)")
    if labelled:
        forms.append(rf"{_QUALIFIER}(?:{words})[ \t]*:")
    return rf"{guard}(?:{'|'.join(forms)})"


def _detection_pattern(words: str, exclude: str | None = None, **forms: bool) -> re.Pattern[str]:
    return re.compile(
        rf"^{_MARKDOWN}{_header_body(words, exclude, **forms)}", re.IGNORECASE | re.MULTILINE
    )


def _block_end_pattern(words: str, exclude: str | None = None, **forms: bool) -> re.Pattern[str]:
    return re.compile(
        rf"\n\s*#*[ \t]*{_header_body(words, exclude, **forms)}", re.IGNORECASE | re.MULTILINE
    )


INGREDIENTS_HEADER_RE = _detection_pattern(INGREDIENTS_WORDS, labelled=False)
# Group labels only count as the ingredients header ahead of the instructions
INGREDIENTS_LABEL_RE = _detection_pattern(INGREDIENTS_WORDS, bare=False)
INSTRUCTIONS_HEADER_RE = _detection_pattern(INSTRUCTIONS_WORDS, exclude="ingredients")
NOTES_HEADER_RE = _detection_pattern(NOTES_WORDS)
NUTRITION_HEADER_RE = _detection_pattern(NUTRITION_WORDS)

# A step such as "Mix All Ingredients:" must not close the instructions block
INGREDIENTS_BLOCK_END_RE = _block_end_pattern(INGREDIENTS_WORDS, labelled=False)
INSTRUCTIONS_BLOCK_END_RE = _block_end_pattern(INSTRUCTIONS_WORDS, exclude="ingredients")
NOTES_BLOCK_END_RE = _block_end_pattern(NOTES_WORDS)
NUTRITION_BLOCK_END_RE = _block_end_pattern(NUTRITION_WORDS)

# Patterns that close each block
INGREDIENTS_TERMINATORS = (INSTRUCTIONS_BLOCK_END_RE, NOTES_BLOCK_END_RE, NUTRITION_BLOCK_END_RE)
INSTRUCTIONS_TERMINATORS = (INGREDIENTS_BLOCK_END_RE, NOTES_BLOCK_END_RE, NUTRITION_BLOCK_END_RE)


# =============================================================================
# Detection
# =============================================================================


@dataclass(frozen=True)
class HeaderMatch:
    """Position of a header; ``end`` is where the block content starts."""

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class SectionHeaders:
    """First header found for each family, if any."""

    ingredients: HeaderMatch | None = None
    instructions: HeaderMatch | None = None
    notes: HeaderMatch | None = None
    nutrition: HeaderMatch | None = None

    @property
    def first_start(self) -> int | None:
        """Offset of the earliest ingredients or instructions header."""
        starts = [h.start for h in (self.ingredients, self.instructions) if h is not None]
        return min(starts) if starts else None


def _first_match(pattern: re.Pattern[str], text: str) -> HeaderMatch | None:
    match = pattern.search(text)
    if match is None:
        return None
    return HeaderMatch(start=match.start(), end=match.end(), text=match.group(0).strip())


def detect_sections(text: str) -> SectionHeaders:
    """
    Find the first header of each family in normalized text.

    OCR header misreads are corrected before matching; the returned
    offsets are valid for the text as passed in.
    """
    fixed = fix_ocr_headers(text)
    instructions = _first_match(INSTRUCTIONS_HEADER_RE, fixed)
    ingredients = _first_match(INGREDIENTS_HEADER_RE, fixed)

    label_zone = fixed[: instructions.start] if instructions else fixed
    label = _first_match(INGREDIENTS_LABEL_RE, label_zone)
    if label is not None and (ingredients is None or label.start < ingredients.start):
        ingredients = label

    return SectionHeaders(
        ingredients=ingredients,
        instructions=instructions,
        notes=_first_match(NOTES_HEADER_RE, fixed),
        nutrition=_first_match(NUTRITION_HEADER_RE, fixed),
    )


def find_block_end(text: str, start: int, terminators: tuple[re.Pattern[str], ...]) -> int:
    """Return the offset where the block starting at ``start`` ends."""
    fixed = fix_ocr_headers(text)
    end = len(text)
    for pattern in terminators:
        match = pattern.search(fixed, start)
        if match is not None and match.start() < end:
            end = match.start()
    return end


def slice_block(text: str, header: HeaderMatch, terminators: tuple[re.Pattern[str], ...]) -> str:
    """Return the text between a header and the next terminating header."""
    return text[header.end : find_block_end(text, header.end, terminators)]
