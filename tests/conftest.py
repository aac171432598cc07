"""
Pytest configuration and fixtures for Recipe Box tests.
"""

import json
import os

import httpx
import pytest

# Set test environment before importing recipebox modules
os.environ["RECIPEBOX_ENV"] = "development"
os.environ.pop("IMAGE_UPLOAD_URL", None)


def _html_page(*blocks, body: str = "") -> str:
    scripts = "\n".join(
        '<script type="application/ld+json">'
        + (block if isinstance(block, str) else json.dumps(block))
        + "</script>"
        for block in blocks
    )
    return f"<!DOCTYPE html><html><head><title>Recipe</title>{scripts}</head><body>{body}</body></html>"


@pytest.fixture
def html_page():
    """Build an HTML page with one JSON-LD script per block (str blocks are inserted raw)."""
    return _html_page


@pytest.fixture
def make_client():
    """Build an httpx.Client whose requests are answered by `handler`."""
    clients = []

    def _make(handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def sample_recipe_node():
    """A realistic schema.org Recipe node."""
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Weeknight Chicken Tacos",
        "description": "Quick tacos with a smoky marinade.",
        "recipeNotes": "Marinate overnight for more flavor.",
        "image": [
            "https://cdn.example.com/photos/2024/tacos/tacos-thumbStandard.jpg",
            "https://cdn.example.com/photos/2024/tacos/tacos-superJumbo.jpg",
            "https://cdn.example.com/photos/2024/tacos/tacos-articleLarge.jpg",
        ],
        "prepTime": "PT15M",
        "cookTime": "PT20M",
        "totalTime": "PT35M",
        "recipeYield": "4 servings",
        "recipeCuisine": "mexican",
        "recipeCategory": ["main_course", "weeknight-dinner"],
        "recipeIngredient": [
            "1 ½ pounds chicken thighs",
            "2 tbsp olive oil",
            "8 corn tortillas",
            "Salt to taste",
        ],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Marinate the chicken."},
            {"@type": "HowToStep", "text": "Grill until charred."},
            {"@type": "HowToStep", "text": "Slice and serve in tortillas."},
        ],
        "nutrition": {
            "@type": "NutritionInformation",
            "calories": "420 calories",
            "proteinContent": "32 g",
            "carbohydrateContent": "28.6g",
            "fatContent": "18.5 g",
        },
    }
