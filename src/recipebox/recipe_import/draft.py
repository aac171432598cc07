"""Persistence-ready recipe drafts built from reviewed imports."""

from dataclasses import dataclass, field

from .ingredient_parser import parse_ingredients
from .models import ExtractedRecipe, ParsedIngredient


@dataclass
class RecipeDraft:
    """
    A recipe ready to hand to the persistence layer.

    List order is the display order; the store assigns ids.
    """

    title: str
    source_url: str
    image_urls: list[str] = field(default_factory=list)
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    total_time_minutes: int | None = None
    servings: int | None = None
    cuisine: str | None = None
    category: str | None = None
    calories: int | None = None
    protein_grams: int | None = None
    carbs_grams: int | None = None
    fat_grams: int | None = None
    notes: str | None = None
    ingredients: list[ParsedIngredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)


def total_time(recipe: ExtractedRecipe) -> int | None:
    """Declared total time, else prep + cook when both are known."""
    if recipe.total_time_minutes is not None:
        return recipe.total_time_minutes
    if recipe.prep_time_minutes is not None and recipe.cook_time_minutes is not None:
        return recipe.prep_time_minutes + recipe.cook_time_minutes
    return None


def build_recipe_draft(recipe: ExtractedRecipe, hosted_image_urls: list[str]) -> RecipeDraft:
    """
    Assemble the draft for a reviewed recipe.

    Args:
        recipe: The recipe as the user confirmed it
        hosted_image_urls: Durable URLs for the images that re-hosted
            successfully (possibly none)
    """
    return RecipeDraft(
        title=recipe.title,
        source_url=recipe.source_url,
        image_urls=list(hosted_image_urls),
        prep_time_minutes=recipe.prep_time_minutes,
        cook_time_minutes=recipe.cook_time_minutes,
        total_time_minutes=total_time(recipe),
        servings=recipe.servings,
        cuisine=recipe.cuisine,
        category=recipe.category,
        calories=recipe.calories,
        protein_grams=recipe.protein_grams,
        carbs_grams=recipe.carbs_grams,
        fat_grams=recipe.fat_grams,
        notes=recipe.notes,
        ingredients=parse_ingredients(recipe.ingredient_lines),
        instructions=[step for step in recipe.instruction_steps if step.strip()],
    )
