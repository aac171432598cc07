"""Main recipe extraction orchestration."""

import ipaddress
import logging
import re
from urllib.parse import urlparse

import httpx

from .fetch import fetch_page
from .json_ld import find_recipe_in_json_ld, map_recipe_node
from .microdata import find_recipe_in_microdata
from .models import (
    ExtractedRecipe,
    ExtractionErrorKind,
    ExtractionMethod,
    ExtractionResult,
    FetchError,
)

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch recipe page. Check the URL and try again."
NO_RECIPE_MESSAGE = (
    "Could not extract recipe from this URL. "
    "The site may not support automatic import."
)

# Default fallback message when extraction fails
DEFAULT_FALLBACK_MESSAGE = (
    "Copy the recipe text from the website and add it as a new recipe by hand."
)
LOGIN_FALLBACK_MESSAGE = (
    "This recipe is behind a login wall. "
    "Copy the recipe text and add it as a new recipe by hand."
)

_LOCAL_HOSTNAMES = {"localhost", "0.0.0.0"}


def extract_recipe(url: str, client: httpx.Client | None = None) -> ExtractionResult:
    """
    Extract recipe from URL.

    Extraction pipeline:
    1. Validate URL format
    2. Fetch the page
    3. Look for a Recipe node in JSON-LD blocks, then in microdata
    4. Map it to an ExtractedRecipe

    Never raises: every outcome is an ExtractionResult.

    Args:
        url: The URL of the recipe page to extract
        client: Optional HTTP client (tests, connection reuse)

    Returns:
        ExtractionResult with the recipe on success, error details on failure
    """
    validation_error = validate_url(url)
    if validation_error:
        return ExtractionResult(
            success=False,
            method=ExtractionMethod.FAILED,
            error_kind=ExtractionErrorKind.INVALID_URL,
            error=validation_error,
        )

    url = url.strip()
    logger.info(f"Attempting recipe extraction for {url}")

    try:
        page = fetch_page(url, client=client)
    except FetchError as e:
        return ExtractionResult(
            success=False,
            method=ExtractionMethod.FAILED,
            error_kind=ExtractionErrorKind.FETCH_ERROR,
            error=_fetch_error_message(e),
            fallback_message=DEFAULT_FALLBACK_MESSAGE,
        )

    node = find_recipe_in_json_ld(page.html)
    method = ExtractionMethod.JSON_LD
    if node is None:
        node = find_recipe_in_microdata(page.html, base_url=page.final_url)
        method = ExtractionMethod.MICRODATA

    if node is None:
        logger.info(f"No recipe data found for {url}")
        return ExtractionResult(
            success=False,
            method=ExtractionMethod.FAILED,
            error_kind=ExtractionErrorKind.NO_RECIPE_FOUND,
            error=NO_RECIPE_MESSAGE,
            fallback_message=(
                LOGIN_FALLBACK_MESSAGE if is_login_page(page.html) else DEFAULT_FALLBACK_MESSAGE
            ),
        )

    # The submitted URL is kept as the source, even after redirects
    recipe = map_recipe_node(node, source_url=url, base_url=page.final_url)
    logger.info(
        f"Extracted '{recipe.title}' via {method.value}: "
        f"{len(recipe.ingredient_lines)} ingredients, "
        f"{len(recipe.instruction_steps)} steps, {len(recipe.image_urls)} images"
    )
    return ExtractionResult(success=True, method=method, recipe=recipe)


def extract_from_html(html: str, source_url: str) -> ExtractedRecipe | None:
    """
    Extract a recipe from HTML that has already been fetched.

    Returns None when the page holds no recognizable recipe.
    """
    node = find_recipe_in_json_ld(html) or find_recipe_in_microdata(html, base_url=source_url)
    if node is None:
        return None
    return map_recipe_node(node, source_url=source_url)


def _fetch_error_message(error: FetchError) -> str:
    if error.status_code == 403:
        return "This website blocked our request."
    if error.status_code == 404:
        return "Recipe page not found. Check the URL and try again."
    if "timed out" in str(error).lower():
        return "The website took too long to respond. Please try again."
    return FETCH_ERROR_MESSAGE


def validate_url(url: str | None) -> str | None:
    """
    Validate URL format.

    Returns error message if invalid, None if valid.
    """
    if not url or not url.strip():
        return "URL is required"

    url = url.strip()

    # Basic URL pattern check
    if not re.match(r"^https?://", url, re.IGNORECASE):
        return "URL must start with http:// or https://"

    try:
        parsed = urlparse(url)
    except ValueError:
        return "Invalid URL format"

    if not parsed.netloc or not parsed.hostname:
        return "Invalid URL format"

    return None


def is_public_http_url(url: str | None) -> bool:
    """
    True for http(s) URLs that do not point at this machine or the local network.

    Used before proxying arbitrary image URLs.
    """
    if validate_url(url) is not None:
        return False

    host = (urlparse(url.strip()).hostname or "").lower()
    if host in _LOCAL_HOSTNAMES or host.endswith(".local"):
        return False

    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return True
    return not (address.is_loopback or address.is_private or address.is_unspecified)


def is_login_page(html: str) -> bool:
    """Detect if the page is a login/paywall page."""
    login_indicators = [
        "sign in to continue",
        "log in to view",
        "subscribe to read",
        "subscription required",
        "create an account",
        "please log in",
        "members only",
    ]
    html_lower = html.lower()
    return any(indicator in html_lower for indicator in login_indicators)
