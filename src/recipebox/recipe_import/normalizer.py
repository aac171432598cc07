"""Normalization utilities for recipe data."""

import math
import re
from typing import Any

# P1DT2H30M, PT45M, PT1H30M0S
_DURATION_RE = re.compile(
    r"P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:\d+(?:\.\d+)?S)?)?",
    re.IGNORECASE,
)
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}\b)")


def parse_duration(duration: str | int | float | None) -> int | None:
    """
    Parse ISO 8601 duration to minutes.

    Examples:
        PT30M -> 30
        PT1H -> 60
        PT1H30M -> 90
        P1DT2H -> 1560
        "45" -> 45
        30.0 -> 30
        "about an hour" -> None
    """
    if duration is None or isinstance(duration, bool):
        return None

    # Handle already-numeric values (minutes)
    if isinstance(duration, int):
        return duration if duration >= 0 else None
    if isinstance(duration, float):
        if not math.isfinite(duration) or duration < 0:
            return None
        return int(duration + 0.5)

    text = str(duration).strip()
    if not text:
        return None

    if _LEADING_NUMBER_RE.fullmatch(text):
        return int(float(text) + 0.5)

    match = _DURATION_RE.fullmatch(text)
    if not match:
        return None

    days, hours, minutes = match.group("days", "hours", "minutes")
    if days is None and hours is None and minutes is None:
        return None

    return int(days or 0) * 24 * 60 + int(hours or 0) * 60 + int(minutes or 0)


def parse_servings(recipe_yield: Any) -> int | None:
    """
    Parse recipe yield/servings to a positive integer.

    Examples:
        "4 servings" -> 4
        "Serves 6" -> 6
        4 -> 4
        ["8", "8 slices"] -> 8
        "Makes a dozen" -> None
    """
    if recipe_yield is None or isinstance(recipe_yield, bool):
        return None

    if isinstance(recipe_yield, list):
        for item in recipe_yield:
            servings = parse_servings(item)
            if servings is not None:
                return servings
        return None

    if isinstance(recipe_yield, (int, float)):
        servings = int(recipe_yield)
        return servings if servings > 0 else None

    # Extract first number from string
    match = re.search(r"\d+", str(recipe_yield))
    if match and int(match.group(0)) > 0:
        return int(match.group(0))

    return None


def normalize_ingredients(ingredients: Any) -> list[str]:
    """
    Coerce an ingredient field to a list of non-empty strings.

    Handles:
        - A single string
        - List of strings (or numbers)
        - List of dicts with 'text' or 'name' field
    """
    if not ingredients:
        return []

    if not isinstance(ingredients, list):
        ingredients = [ingredients]

    result = []
    for item in ingredients:
        if isinstance(item, dict):
            item = item.get("text") or item.get("name") or ""
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            result.append(text)

    return result


def extract_instructions_text(instructions: Any) -> list[str]:
    """
    Flatten instructions into ordered step strings, depth first.

    Handles:
        - A single string (one step)
        - List of strings
        - HowToStep dicts with 'text' (or 'name') field
        - HowToSection dicts holding nested steps in 'itemListElement'
    """
    if not instructions:
        return []

    if isinstance(instructions, str):
        text = instructions.strip()
        return [text] if text else []

    if isinstance(instructions, list):
        result = []
        for item in instructions:
            result.extend(extract_instructions_text(item))
        return result

    if isinstance(instructions, dict):
        # Sections carry a heading in 'name'; only their steps are kept
        nested = instructions.get("itemListElement")
        if isinstance(nested, (list, dict)):
            return extract_instructions_text(nested)

        for key in ("text", "name"):
            text = instructions.get(key)
            if isinstance(text, str) and text.strip():
                return [text.strip()]

    return []


def humanize_label(value: str) -> str:
    """
    Humanize a taxonomy label.

    Examples:
        "mexican_food" -> "Mexican Food"
        "main-course" -> "Main Course"
    """
    words = re.sub(r"[_-]+", " ", value).split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def join_labels(value: Any) -> str | None:
    """
    Humanize a string or list of strings and join with ", ".

    Returns None when nothing usable is left.
    """
    if value is None:
        return None

    items = value if isinstance(value, list) else [value]
    labels = []
    for item in items:
        if not isinstance(item, str):
            continue
        label = humanize_label(item)
        if label:
            labels.append(label)

    return ", ".join(labels) if labels else None


def parse_nutrition_number(value: Any) -> int | None:
    """
    Extract the leading number of a nutrition value, rounded half up.

    Examples:
        "12g" -> 12
        "240 calories" -> 240
        "7.5 g" -> 8
        "1,200 kcal" -> 1200
        15.4 -> 15
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = _THOUSANDS_RE.sub("", str(value))
        match = _LEADING_NUMBER_RE.search(text)
        if not match:
            return None
        number = float(match.group(0))

    if number < 0:
        return None
    return int(number + 0.5)


def clean_text(value: Any) -> str | None:
    """Return a stripped string, or None when empty or not text."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def combine_notes(description: str | None, cooks_notes: str | None) -> str | None:
    """Append the cook's notes to the description under a labeled separator."""
    if description and cooks_notes:
        return f"{description}\n\nCook's Note:\n{cooks_notes}"
    return description or cooks_notes
