"""JSON-LD/Schema.org recipe location and mapping."""

import json
import logging
from collections.abc import Iterator
from typing import Any

import lxml.html
from lxml.etree import ParserError

from .images import select_image_urls
from .models import ExtractedRecipe
from .normalizer import (
    clean_text,
    combine_notes,
    extract_instructions_text,
    join_labels,
    normalize_ingredients,
    parse_duration,
    parse_nutrition_number,
    parse_servings,
)

logger = logging.getLogger(__name__)

JSON_LD_CONTENT_TYPE = "application/ld+json"
DEFAULT_TITLE = "Untitled Recipe"


# =============================================================================
# Locating blocks
# =============================================================================


def iter_json_ld_blocks(html: str) -> Iterator[str]:
    """Yield the text of every JSON-LD script block, in document order."""
    if not html or not html.strip():
        return

    try:
        document = lxml.html.fromstring(html)
    except (ParserError, ValueError) as e:
        logger.warning(f"Could not parse page HTML: {e}")
        return

    for script in document.iter("script"):
        script_type = (script.get("type") or "").strip().lower()
        if script_type != JSON_LD_CONTENT_TYPE:
            continue
        text = script.text_content()
        if text and text.strip():
            yield text


def load_json_ld_blocks(html: str) -> Iterator[Any]:
    """
    Yield each JSON-LD block parsed into a data tree.

    Blocks that are not valid JSON are logged and skipped; one broken
    block never hides the others.
    """
    for index, raw in enumerate(iter_json_ld_blocks(html)):
        try:
            yield json.loads(raw, strict=False)
        except ValueError as e:
            logger.warning(f"Skipping malformed JSON-LD block #{index}: {e}")


# =============================================================================
# Finding the recipe node
# =============================================================================


def is_recipe_type(node_type: Any) -> bool:
    """True when an @type value is, or includes, Recipe."""
    if isinstance(node_type, str):
        return _is_recipe_name(node_type)
    if isinstance(node_type, list):
        return any(isinstance(t, str) and _is_recipe_name(t) for t in node_type)
    return False


def _is_recipe_name(name: str) -> bool:
    # Accepts "Recipe", "schema:Recipe" and "https://schema.org/Recipe"
    return name.rsplit("/", 1)[-1].rsplit(":", 1)[-1] == "Recipe"


def _as_recipe(node: Any) -> dict | None:
    """Shape (a): the node itself is recipe-typed."""
    if isinstance(node, dict) and is_recipe_type(node.get("@type")):
        return node
    return None


def _graph_nodes(node: Any) -> list:
    """Shape (c): a wrapper object holding an @graph list."""
    if isinstance(node, dict):
        graph = node.get("@graph")
        if isinstance(graph, list):
            return graph
    return []


def _find_in_graph(node: Any) -> dict | None:
    for graph_node in _graph_nodes(node):
        recipe = _as_recipe(graph_node)
        if recipe:
            return recipe
    return None


def find_recipe_node(tree: Any) -> dict | None:
    """
    Find the first Recipe node in a JSON-LD data tree.

    Handles:
        - A Recipe object
        - A list containing one
        - A wrapper object with an @graph list
        - A list of such wrappers
    """
    recipe = _as_recipe(tree) or _find_in_graph(tree)
    if recipe:
        return recipe

    if isinstance(tree, list):
        for item in tree:
            recipe = _as_recipe(item) or _find_in_graph(item)
            if recipe:
                return recipe

    return None


def find_recipe_in_json_ld(html: str) -> dict | None:
    """First Recipe node across all JSON-LD blocks of a page."""
    for tree in load_json_ld_blocks(html):
        recipe = find_recipe_node(tree)
        if recipe:
            return recipe
    return None


# =============================================================================
# Mapping
# =============================================================================


def map_recipe_node(node: dict, source_url: str, base_url: str | None = None) -> ExtractedRecipe:
    """
    Map a schema.org Recipe node to an ExtractedRecipe.

    Every field is optional in the source; anything missing or
    unparsable comes out as None (or an empty tuple).
    """
    nutrition = node.get("nutrition")
    if not isinstance(nutrition, dict):
        nutrition = {}

    description = clean_text(node.get("description"))
    cooks_notes = clean_text(node.get("recipeNotes"))

    return ExtractedRecipe(
        title=clean_text(node.get("name")) or DEFAULT_TITLE,
        source_url=source_url,
        image_urls=tuple(select_image_urls(node.get("image"), base_url=base_url or source_url)),
        prep_time_minutes=parse_duration(node.get("prepTime")),
        cook_time_minutes=parse_duration(node.get("cookTime")),
        total_time_minutes=parse_duration(node.get("totalTime")),
        servings=parse_servings(node.get("recipeYield")),
        ingredient_lines=tuple(normalize_ingredients(node.get("recipeIngredient"))),
        instruction_steps=tuple(extract_instructions_text(node.get("recipeInstructions"))),
        cuisine=join_labels(node.get("recipeCuisine")),
        category=join_labels(node.get("recipeCategory")),
        calories=parse_nutrition_number(nutrition.get("calories")),
        protein_grams=parse_nutrition_number(nutrition.get("proteinContent")),
        carbs_grams=parse_nutrition_number(nutrition.get("carbohydrateContent")),
        fat_grams=parse_nutrition_number(nutrition.get("fatContent")),
        description=description,
        notes=combine_notes(description, cooks_notes),
    )
