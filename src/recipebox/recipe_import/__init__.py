"""Recipe import module for extracting recipes from external URLs."""

from .amounts import normalize_amount_text
from .draft import RecipeDraft, build_recipe_draft
from .extractor import extract_from_html, extract_recipe, validate_url
from .images import score_image_url, select_image_urls
from .ingredient_parser import parse_ingredient, parse_ingredients
from .models import (
    ExtractedRecipe,
    ExtractionErrorKind,
    ExtractionMethod,
    ExtractionResult,
    FetchError,
    ImageCandidate,
    ImageUploadFailure,
    ParsedIngredient,
)
from .rehost import HttpImageUploader, ImageUploader, get_image_uploader, rehost_images

__all__ = [
    "ExtractedRecipe",
    "ExtractionErrorKind",
    "ExtractionMethod",
    "ExtractionResult",
    "FetchError",
    "HttpImageUploader",
    "ImageCandidate",
    "ImageUploadFailure",
    "ImageUploader",
    "ParsedIngredient",
    "RecipeDraft",
    "build_recipe_draft",
    "extract_from_html",
    "extract_recipe",
    "get_image_uploader",
    "normalize_amount_text",
    "parse_ingredient",
    "parse_ingredients",
    "rehost_images",
    "score_image_url",
    "select_image_urls",
    "validate_url",
]
