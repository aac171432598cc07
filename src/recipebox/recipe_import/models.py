"""Data models for recipe import."""

from dataclasses import dataclass
from enum import Enum

# Upper bound on photos kept per imported recipe
MAX_IMAGE_URLS = 3


class ExtractionMethod(str, Enum):
    """Method used to extract recipe data."""

    JSON_LD = "json_ld"
    MICRODATA = "microdata"
    FAILED = "failed"


class ExtractionErrorKind(str, Enum):
    """Why an extraction attempt produced no recipe."""

    INVALID_URL = "invalid_url"
    FETCH_ERROR = "fetch_error"
    NO_RECIPE_FOUND = "no_recipe_found"


class FetchError(Exception):
    """The recipe page could not be retrieved."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ImageUploadFailure(Exception):
    """A candidate image could not be fetched, validated or re-hosted."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


@dataclass(frozen=True)
class ParsedIngredient:
    """An ingredient line split into a display amount and a name."""

    amount: str | None
    name: str

    def display(self) -> str:
        """Rejoin amount and name the way the line was written."""
        if self.amount:
            return f"{self.amount} {self.name}".strip()
        return self.name


@dataclass(frozen=True)
class ImageCandidate:
    """A raw image URL with its grouping key and quality score."""

    url: str
    folder_key: str
    score: int


@dataclass(frozen=True)
class ExtractedRecipe:
    """
    Canonical recipe record pulled from a web page.

    Optional fields are None when the source did not provide them,
    so "unknown" stays distinguishable from zero.
    """

    title: str
    source_url: str
    image_urls: tuple[str, ...] = ()
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    total_time_minutes: int | None = None
    servings: int | None = None
    ingredient_lines: tuple[str, ...] = ()
    instruction_steps: tuple[str, ...] = ()
    cuisine: str | None = None
    category: str | None = None
    calories: int | None = None
    protein_grams: int | None = None
    carbs_grams: int | None = None
    fat_grams: int | None = None
    description: str | None = None
    notes: str | None = None

    def __post_init__(self):
        if len(self.image_urls) > MAX_IMAGE_URLS:
            raise ValueError(
                f"At most {MAX_IMAGE_URLS} image URLs allowed, got {len(self.image_urls)}"
            )


@dataclass
class ExtractionResult:
    """Result of recipe extraction attempt."""

    success: bool
    method: ExtractionMethod
    recipe: ExtractedRecipe | None = None
    error_kind: ExtractionErrorKind | None = None
    error: str | None = None
    fallback_message: str | None = None
