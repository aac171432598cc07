"""
Image candidate selection.

Recipe publishers often list the same photo several times at different
sizes and crops, all served from one directory. Candidates are grouped
by that directory ("folder key") and only the best-scoring URL of each
group is kept. Image bytes are never fetched here.
"""

import logging
import re
from collections.abc import Callable
from typing import Any
from urllib.parse import urljoin, urlsplit

from .models import MAX_IMAGE_URLS, ImageCandidate

logger = logging.getLogger(__name__)

ImageScorer = Callable[[str], int]

# Each group counts once: its first matching (substring, weight) wins.
# Checked against the lowercased URL.
SIZE_SIGNALS: list[list[tuple[str, int]]] = [
    [("superjumbo", 5), ("jumbo", 4)],
    [("large@2x", 3), ("@2x", 2)],
    [("threebytwo", 3), ("three-by-two", 3), ("3x2", 3)],
    [("thumbnail", -3), ("thumb", -3)],
    [("square", -1)],
    [("small", -2)],
]

# WordPress crop suffix: photo-300x200.jpg
_WP_CROP_RE = re.compile(r"-\d{2,4}x\d{2,4}\.(?:jpe?g|png|webp)$")


def score_image_url(url: str) -> int:
    """
    Score a URL by substring signals of resolution and crop.

    Higher is better. Only the URL text is inspected.
    """
    lowered = url.lower()
    try:
        path = urlsplit(lowered).path
    except ValueError:
        path = lowered

    score = 0
    for group in SIZE_SIGNALS:
        for token, weight in group:
            if token in lowered:
                score += weight
                break

    if path.endswith((".jpg", ".jpeg")):
        score += 1

    if _WP_CROP_RE.search(path):
        score -= 2

    return score


def flatten_image_field(image: Any, base_url: str | None = None) -> list[str]:
    """
    Flatten a schema.org image field into URL strings.

    Handles:
        - Plain URL string
        - Dict with 'url' or 'contentUrl' field
        - List of either
    """
    if not image:
        return []

    if isinstance(image, list):
        urls = []
        for item in image:
            urls.extend(flatten_image_field(item, base_url))
        return urls

    if isinstance(image, dict):
        image = image.get("url") or image.get("contentUrl")
        if isinstance(image, list):
            return flatten_image_field(image, base_url)

    if not isinstance(image, str) or not image.strip():
        return []

    url = image.strip()
    if base_url and "://" not in url:
        url = urljoin(base_url, url)
    return [url]


def folder_key(url: str) -> str:
    """
    Origin plus directory path of a URL.

    Examples:
        https://cdn.example.com/photos/tacos-600.jpg -> https://cdn.example.com/photos/
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        parts = None

    # data: and other opaque URIs group alone
    if parts is not None and parts.scheme not in ("", "http", "https") and not parts.netloc:
        return url

    if parts is None or not parts.scheme or not parts.netloc:
        return url[: url.rfind("/") + 1] if "/" in url else url

    directory = parts.path[: parts.path.rfind("/") + 1] or "/"
    return f"{parts.scheme}://{parts.netloc}{directory}"


def build_candidates(urls: list[str], scorer: ImageScorer = score_image_url) -> list[ImageCandidate]:
    """Attach folder key and score to every URL."""
    return [ImageCandidate(url=url, folder_key=folder_key(url), score=scorer(url)) for url in urls]


def pick_best_per_folder(candidates: list[ImageCandidate]) -> list[ImageCandidate]:
    """Keep the highest scoring candidate of each folder, in first-seen folder order."""
    best: dict[str, ImageCandidate] = {}
    for candidate in candidates:
        current = best.get(candidate.folder_key)
        # Strictly greater, so ties keep the first seen
        if current is None or candidate.score > current.score:
            best[candidate.folder_key] = candidate
    return list(best.values())


def select_image_urls(
    image: Any,
    limit: int = MAX_IMAGE_URLS,
    scorer: ImageScorer = score_image_url,
    base_url: str | None = None,
) -> list[str]:
    """
    Choose up to `limit` distinct photos from a recipe's image field.

    Args:
        image: The recipe node's image field, in any supported shape
        limit: Maximum number of URLs returned
        scorer: score(url) -> int, higher is better
        base_url: Page URL used to resolve relative image paths

    Returns:
        One URL per folder, in the order folders were first seen
    """
    urls = flatten_image_field(image, base_url)
    if not urls:
        return []

    picks = pick_best_per_folder(build_candidates(urls, scorer))
    logger.debug(f"Image selection: {len(urls)} urls, {len(picks)} folders, keeping {min(len(picks), limit)}")
    return [candidate.url for candidate in picks[:limit]]
