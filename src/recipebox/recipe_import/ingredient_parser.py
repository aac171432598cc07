"""Ingredient Parser - Split raw ingredient lines into amount and name.

The amount stays text ("1 1/2 cups", "2-3", "1 (14.5 ounce)") so that
ranges and parenthetical sizes round-trip for display. Numeric work
happens later, in recipebox.tools.scaling.
"""

import logging
import re

from .amounts import normalize_amount_text
from .models import ParsedIngredient

logger = logging.getLogger(__name__)

# 1 | 1/2 | 1.5 | 1 1/2
_NUMBER = r"(?:\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?)"

# number, optional range ("2-3", "2 to 3"), optional aside ("(14.5 ounce)")
_AMOUNT = (
    rf"(?P<amount>{_NUMBER}"
    rf"(?:\s*(?:-|to)\s*{_NUMBER})?"
    r"(?:\s*\([^)]*\))?)"
)

UNIT_PATTERN = (
    r"(?:cups?|tablespoons?|tbsps?|teaspoons?|tsps?|ounces?|oz|pounds?|lbs?"
    r"|grams?|g|kilograms?|kgs?|milliliters?|millilitres?|ml|liters?|litres?|l"
    r"|pinch(?:es)?|dash(?:es)?|cloves?|pieces?|slices?|cans?|packages?)"
)

# amount + unit + rest; the unit must end at whitespace or end of line
AMOUNT_WITH_UNIT_RE = re.compile(
    rf"^{_AMOUNT}\s*(?P<unit>{UNIT_PATTERN})\.?(?=\s|$)\s*(?P<name>.*)$",
    re.IGNORECASE,
)

# amount + rest; "2% milk" does not match because "%" is not whitespace
SIMPLE_AMOUNT_RE = re.compile(
    rf"^{_AMOUNT}\s+(?P<name>.+)$",
    re.IGNORECASE,
)


def parse_ingredient(line: str | None) -> ParsedIngredient:
    """
    Parse one ingredient line.

    Examples:
        "2 cups pasta" -> ("2 cups", "pasta")
        "1/2 tsp salt" -> ("1/2 tsp", "salt")
        "3 large eggs" -> ("3", "large eggs")
        "Salt to taste" -> (None, "Salt to taste")
    """
    normalized = normalize_amount_text(line)
    if not normalized:
        return ParsedIngredient(amount=None, name="")

    match = AMOUNT_WITH_UNIT_RE.match(normalized)
    if match and match.group("name").strip():
        amount = f"{match.group('amount').strip()} {match.group('unit')}"
        return ParsedIngredient(amount=amount, name=match.group("name").strip())

    match = SIMPLE_AMOUNT_RE.match(normalized)
    if match:
        return ParsedIngredient(
            amount=match.group("amount").strip(),
            name=match.group("name").strip(),
        )

    return ParsedIngredient(amount=None, name=normalized)


def parse_ingredients(lines: list[str] | tuple[str, ...]) -> list[ParsedIngredient]:
    """
    Parse a batch of lines, dropping the ones with nothing in them.

    Args:
        lines: Raw ingredient lines from an import or a manual entry form

    Returns:
        Parsed ingredients in input order, safe to persist
    """
    parsed = [parse_ingredient(line) for line in lines]
    kept = [p for p in parsed if p.name]
    if len(kept) != len(parsed):
        logger.debug(f"Dropped {len(parsed) - len(kept)} empty ingredient lines")
    return kept
