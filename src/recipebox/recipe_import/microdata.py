"""Schema.org microdata fallback for pages without JSON-LD."""

import logging

import extruct

from .json_ld import find_recipe_node

logger = logging.getLogger(__name__)


def find_recipe_in_microdata(html: str, base_url: str | None = None) -> dict | None:
    """
    Find a Recipe item in the page's microdata.

    extruct's uniform output turns each item into a JSON-LD shaped
    dict (@type plus flat properties), so the JSON-LD mapper applies.
    """
    try:
        data = extruct.extract(
            html,
            base_url=base_url,
            syntaxes=["microdata"],
            uniform=True,
        )
    except Exception as e:
        # extruct surfaces lxml and w3lib errors for broken markup
        logger.warning(f"Microdata extraction failed for {base_url}: {e}")
        return None

    for item in data.get("microdata", []):
        recipe = find_recipe_node(item)
        if recipe:
            return recipe

    return None
