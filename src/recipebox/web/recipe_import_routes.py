"""API endpoints for recipe import from external URLs."""

import logging
from urllib.parse import urljoin, urlsplit

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from recipebox.recipe_import import (
    ExtractedRecipe,
    ImageUploader,
    build_recipe_draft,
    extract_recipe,
    get_image_uploader,
    parse_ingredient,
    parse_ingredients,
    rehost_images,
)
from recipebox.recipe_import.extractor import is_public_http_url
from recipebox.recipe_import.fetch import browser_headers, build_client
from recipebox.recipe_import.models import MAX_IMAGE_URLS
from recipebox.recipe_import.rehost import IMAGE_ACCEPT
from recipebox.tools.scaling import scale_amount, scale_ingredient_line

logger = logging.getLogger(__name__)

# Redirect hops the image proxy follows, each re-checked
MAX_PROXY_REDIRECTS = 5

router = APIRouter(tags=["recipe-import"])


# =============================================================================
# Request/Response Models
# =============================================================================


class ImportRequest(BaseModel):
    """Request to import a recipe from URL."""

    url: str


class ParsedIngredientResponse(BaseModel):
    """Ingredient line split into amount and name."""

    amount: str | None = None
    name: str
    raw_text: str | None = None  # Original line for reference


class RecipePreviewResponse(BaseModel):
    """Extracted recipe preview for user review."""

    title: str
    source_url: str
    image_urls: list[str] = []
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
    description: str | None = None
    notes: str | None = None
    ingredients_raw: list[str] = []
    ingredients_parsed: list[ParsedIngredientResponse] = []
    instructions: list[str] = []


class ImportResponse(BaseModel):
    """Response from recipe import attempt."""

    success: bool
    method: str  # "json_ld" | "microdata" | "failed"
    preview: RecipePreviewResponse | None = None
    error_kind: str | None = None  # "invalid_url" | "fetch_error" | "no_recipe_found"
    error: str | None = None
    fallback_message: str | None = None


class ConfirmRequest(BaseModel):
    """Request to save an imported recipe after user review/edit."""

    source_url: str
    title: str
    image_urls: list[str] = Field(default=[], max_length=MAX_IMAGE_URLS)
    prep_time_minutes: int | None = Field(default=None, ge=0)
    cook_time_minutes: int | None = Field(default=None, ge=0)
    total_time_minutes: int | None = Field(default=None, ge=0)
    servings: int | None = Field(default=None, gt=0)
    cuisine: str | None = None
    category: str | None = None
    calories: int | None = Field(default=None, ge=0)
    protein_grams: int | None = Field(default=None, ge=0)
    carbs_grams: int | None = Field(default=None, ge=0)
    fat_grams: int | None = Field(default=None, ge=0)
    notes: str | None = None
    ingredients: list[str] = []
    instructions: list[str] = []


class RecipeDraftResponse(BaseModel):
    """Recipe ready for the persistence layer."""

    title: str
    source_url: str
    image_urls: list[str] = []
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
    ingredients: list[ParsedIngredientResponse] = []
    instructions: list[str] = []


class ConfirmResponse(BaseModel):
    """Response after preparing an imported recipe for saving."""

    success: bool
    draft: RecipeDraftResponse | None = None
    images_requested: int = 0
    images_hosted: int = 0
    error: str | None = None


class ParseIngredientsRequest(BaseModel):
    """Ingredient lines typed by hand."""

    lines: list[str]


class ParseIngredientsResponse(BaseModel):
    ingredients: list[ParsedIngredientResponse]


class ScaleRequest(BaseModel):
    """Amounts to rescale for a serving multiplier."""

    multiplier: float = Field(gt=0, allow_inf_nan=False)
    amounts: list[str | None] = []
    lines: list[str] = []  # Legacy rows with the amount still inside the text


class ScaleResponse(BaseModel):
    amounts: list[str | None]
    lines: list[str]


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/recipes/import", response_model=ImportResponse)
def import_recipe(req: ImportRequest) -> ImportResponse:
    """
    Extract recipe data from a URL for preview.

    Returns extracted data for user review before saving. Failures come
    back as success=false with a short message, never as an error status.
    """
    logger.info(f"Import request for URL: {req.url}")

    result = extract_recipe(req.url)

    if result.success and result.recipe:
        recipe = result.recipe
        preview = RecipePreviewResponse(
            title=recipe.title,
            source_url=recipe.source_url,
            image_urls=list(recipe.image_urls),
            prep_time_minutes=recipe.prep_time_minutes,
            cook_time_minutes=recipe.cook_time_minutes,
            total_time_minutes=recipe.total_time_minutes,
            servings=recipe.servings,
            cuisine=recipe.cuisine,
            category=recipe.category,
            calories=recipe.calories,
            protein_grams=recipe.protein_grams,
            carbs_grams=recipe.carbs_grams,
            fat_grams=recipe.fat_grams,
            description=recipe.description,
            notes=recipe.notes,
            ingredients_raw=list(recipe.ingredient_lines),
            ingredients_parsed=[_parsed_response(line) for line in recipe.ingredient_lines],
            instructions=list(recipe.instruction_steps),
        )
        return ImportResponse(
            success=True,
            method=result.method.value,
            preview=preview,
        )

    return ImportResponse(
        success=False,
        method=result.method.value,
        error_kind=result.error_kind.value if result.error_kind else None,
        error=result.error,
        fallback_message=result.fallback_message,
    )


@router.post("/recipes/import/confirm", response_model=ConfirmResponse)
def confirm_import(
    req: ConfirmRequest,
    uploader: ImageUploader | None = Depends(get_image_uploader),
) -> ConfirmResponse:
    """
    Prepare an imported recipe for saving after user review/edit.

    Selected images are re-hosted one by one; any that fail are dropped
    without affecting the rest of the recipe.
    """
    logger.info(f"Confirm import for recipe: {req.title}")

    # Validate required fields
    if not req.title or not req.title.strip():
        return ConfirmResponse(success=False, error="Recipe title is required")

    recipe = ExtractedRecipe(
        title=req.title.strip(),
        source_url=req.source_url,
        image_urls=tuple(req.image_urls),
        prep_time_minutes=req.prep_time_minutes,
        cook_time_minutes=req.cook_time_minutes,
        total_time_minutes=req.total_time_minutes,
        servings=req.servings,
        ingredient_lines=tuple(req.ingredients),
        instruction_steps=tuple(req.instructions),
        cuisine=req.cuisine,
        category=req.category,
        calories=req.calories,
        protein_grams=req.protein_grams,
        carbs_grams=req.carbs_grams,
        fat_grams=req.fat_grams,
        notes=req.notes,
    )

    hosted: list[str] = []
    if recipe.image_urls:
        if uploader is None:
            logger.warning("No image store configured, importing without images")
        else:
            hosted = rehost_images(recipe.image_urls, uploader)

    draft = build_recipe_draft(recipe, hosted)
    return ConfirmResponse(
        success=True,
        draft=RecipeDraftResponse(
            title=draft.title,
            source_url=draft.source_url,
            image_urls=draft.image_urls,
            prep_time_minutes=draft.prep_time_minutes,
            cook_time_minutes=draft.cook_time_minutes,
            total_time_minutes=draft.total_time_minutes,
            servings=draft.servings,
            cuisine=draft.cuisine,
            category=draft.category,
            calories=draft.calories,
            protein_grams=draft.protein_grams,
            carbs_grams=draft.carbs_grams,
            fat_grams=draft.fat_grams,
            notes=draft.notes,
            ingredients=[
                ParsedIngredientResponse(amount=p.amount, name=p.name) for p in draft.ingredients
            ],
            instructions=draft.instructions,
        ),
        images_requested=len(recipe.image_urls),
        images_hosted=len(hosted),
    )


@router.post("/ingredients/parse", response_model=ParseIngredientsResponse)
def parse_ingredient_lines(req: ParseIngredientsRequest) -> ParseIngredientsResponse:
    """Split hand-typed ingredient lines into amount and name."""
    return ParseIngredientsResponse(
        ingredients=[
            ParsedIngredientResponse(amount=p.amount, name=p.name)
            for p in parse_ingredients(req.lines)
        ]
    )


@router.post("/ingredients/scale", response_model=ScaleResponse)
def scale_ingredients(req: ScaleRequest) -> ScaleResponse:
    """Rescale amounts (and legacy unsplit lines) for a serving multiplier."""
    try:
        return ScaleResponse(
            amounts=[scale_amount(a, req.multiplier) if a else a for a in req.amounts],
            lines=[scale_ingredient_line(line, req.multiplier) for line in req.lines],
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.get("/image")
def proxy_image(url: str = Query(...)) -> Response:
    """
    Proxy a remote image for the import preview.

    Publishers often block hotlinking, so preview images are fetched
    server side. Only public http(s) image URLs are served, and every
    redirect target is checked again before it is followed.
    """
    if not is_public_http_url(url):
        raise HTTPException(status_code=400, detail="Invalid url")

    parts = urlsplit(url)
    headers = browser_headers(accept=IMAGE_ACCEPT)
    headers["Referer"] = f"{parts.scheme}://{parts.netloc}"

    try:
        with build_client() as client:
            upstream = _fetch_public(client, url, headers)
    except httpx.HTTPError as e:
        logger.info(f"Image proxy failed for {url}: {e}")
        raise HTTPException(status_code=502, detail="Proxy error") from e

    content_type = upstream.headers.get("content-type", "")
    if upstream.is_error:
        raise HTTPException(
            status_code=502,
            detail=f"Upstream error {upstream.status_code}. content-type={content_type}",
        )
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=415, detail=f"Not an image. content-type={content_type}")

    return Response(
        content=upstream.content,
        media_type=content_type,
        headers={"Cache-Control": "public, max-age=86400, s-maxage=86400"},
    )


def _fetch_public(client: httpx.Client, url: str, headers: dict[str, str]) -> httpx.Response:
    """GET url, following redirects by hand so no hop lands on a local host."""
    current = url
    for _ in range(MAX_PROXY_REDIRECTS + 1):
        response = client.get(current, headers=headers, follow_redirects=False)
        if not response.is_redirect:
            return response

        current = urljoin(str(response.url), response.headers["location"])
        if not is_public_http_url(current):
            logger.info(f"Image proxy refused redirect from {url} to {current}")
            raise HTTPException(status_code=400, detail="Redirect to a non-public url")

    raise HTTPException(status_code=502, detail="Too many redirects")


def _parsed_response(line: str) -> ParsedIngredientResponse:
    parsed = parse_ingredient(line)
    return ParsedIngredientResponse(amount=parsed.amount, name=parsed.name, raw_text=line)
