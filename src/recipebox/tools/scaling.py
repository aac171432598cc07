"""
Recipe Box - Quantity Scaling.

Rescales ingredient amounts for a serving multiplier and formats the
result the way a cook would write it ("1 1/2", not "1.5").
"""

import math
import re
from fractions import Fraction

from recipebox.recipe_import.amounts import normalize_amount_text
from recipebox.recipe_import.models import ParsedIngredient

# Results this close to a whole number or a fraction snap to it
TOLERANCE = 0.02

CULINARY_FRACTIONS: list[tuple[Fraction, str]] = [
    (Fraction(1, 8), "1/8"),
    (Fraction(1, 4), "1/4"),
    (Fraction(1, 3), "1/3"),
    (Fraction(3, 8), "3/8"),
    (Fraction(1, 2), "1/2"),
    (Fraction(5, 8), "5/8"),
    (Fraction(2, 3), "2/3"),
    (Fraction(3, 4), "3/4"),
    (Fraction(7, 8), "7/8"),
]

# Whole, fraction, mixed ("1 1/2") or decimal
_NUMBER = r"\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?|\.\d+"

# Leading amount with an optional range: "2", "1 1/2-2", "2 to 3"
_LEADING_AMOUNT_RE = re.compile(
    rf"^(?P<low>{_NUMBER})(?:(?P<sep>\s*-\s*|\s+to\s+)(?P<high>{_NUMBER}))?(?=\s|$)",
    re.IGNORECASE,
)

Multiplier = int | float | Fraction | str


def to_multiplier(multiplier: Multiplier) -> Fraction:
    """
    Convert a serving multiplier to an exact rational.

    Raises:
        ValueError: If the multiplier is not a positive finite number
    """
    try:
        value = Fraction(multiplier)
    except OverflowError as e:
        raise ValueError(f"Multiplier must be finite, got {multiplier!r}") from e
    if value <= 0:
        raise ValueError(f"Multiplier must be positive, got {multiplier!r}")
    return value


def format_quantity(value: Fraction | float) -> str:
    """
    Format a quantity for display.

    Examples:
        2.0 -> "2"
        0.5 -> "1/2"
        1.6667 -> "1 2/3"
        1.1 -> "1.1"
    """
    x = float(value)

    nearest = round(x)
    if abs(x - nearest) < TOLERANCE:
        return str(int(nearest))

    whole = math.floor(x)
    frac = x - whole
    for fraction, label in CULINARY_FRACTIONS:
        if abs(frac - float(fraction)) < TOLERANCE:
            return label if whole == 0 else f"{whole} {label}"

    return f"{x:.2f}".rstrip("0").rstrip(".")


def _parse_number(text: str) -> Fraction | None:
    """Value of "2", "1.5", "1/2" or "1 1/2"; None for a zero denominator."""
    try:
        return sum((Fraction(part) for part in text.split()), Fraction(0))
    except ZeroDivisionError:
        return None


def _scale_leading(text: str, multiplier: Fraction) -> str | None:
    """Scale the leading amount of text, or None if it has none."""
    text = text.strip()
    match = _LEADING_AMOUNT_RE.match(text)
    if not match:
        return None

    low = _parse_number(match.group("low"))
    high = _parse_number(match.group("high")) if match.group("high") else None
    if low is None or (match.group("high") and high is None):
        return None

    try:
        scaled = format_quantity(low * multiplier)
        if high is not None:
            scaled = f"{scaled}{match.group('sep')}{format_quantity(high * multiplier)}"
    except OverflowError as e:
        raise ValueError(f"Scaled amount is too large for multiplier {multiplier}") from e

    rest = text[match.end() :].split()
    return " ".join([scaled, *rest])


def scale_amount(amount: str, multiplier: Multiplier) -> str:
    """
    Scale a parsed amount string.

    Trailing text (unit, parenthetical size) is kept as is. Amounts
    without a leading number come back unchanged.

    Examples:
        ("1/2", 2) -> "1"
        ("1", 0.5) -> "1/2"
        ("1 1/2 cups", 2) -> "3 cups"
        ("2-3", 2) -> "4-6"
        ("a pinch", 2) -> "a pinch"
    """
    scaled = _scale_leading(amount, to_multiplier(multiplier))
    return amount if scaled is None else scaled


def scale_ingredient_line(line: str, multiplier: Multiplier) -> str:
    """
    Scale an ingredient line whose amount was never split off.

    Examples:
        ("2 cups flour", 2) -> "4 cups flour"
        ("½ tsp salt", 2) -> "1 tsp salt"
        ("Salt to taste", 2) -> "Salt to taste"
    """
    scaled = _scale_leading(normalize_amount_text(line), to_multiplier(multiplier))
    return line if scaled is None else scaled


def scale_ingredient(ingredient: ParsedIngredient, multiplier: Multiplier) -> str:
    """Display text for an ingredient at the given multiplier."""
    if ingredient.amount:
        return f"{scale_amount(ingredient.amount, multiplier)} {ingredient.name}".strip()
    return scale_ingredient_line(ingredient.name, multiplier)
