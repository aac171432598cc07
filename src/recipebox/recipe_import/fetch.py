"""Page fetching for recipe import."""

import logging
from dataclasses import dataclass

import httpx

from recipebox.config import settings

from .models import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    """HTML of a page and the URL it ended up at after redirects."""

    html: str
    final_url: str


def browser_headers(accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8") -> dict[str, str]:
    """Headers that look like a desktop browser, which many recipe sites require."""
    return {
        "User-Agent": settings.user_agent,
        "Accept": accept,
        "Accept-Language": "en-US,en;q=0.5",
    }


def build_client() -> httpx.Client:
    """HTTP client with the configured timeout and redirect following."""
    return httpx.Client(follow_redirects=True, timeout=settings.fetch_timeout_seconds)


def fetch_page(url: str, client: httpx.Client | None = None) -> FetchedPage:
    """
    Fetch a recipe page.

    Args:
        url: Absolute http(s) URL
        client: Optional client to reuse; one is created and closed otherwise

    Returns:
        FetchedPage with the decoded HTML

    Raises:
        FetchError: On transport failure, timeout or non-success status
    """
    owns_client = client is None
    if client is None:
        client = build_client()

    try:
        response = client.get(url, headers=browser_headers())
        response.raise_for_status()
        return FetchedPage(html=response.text, final_url=str(response.url))
    except httpx.TimeoutException as e:
        logger.info(f"Timed out fetching {url}: {e}")
        raise FetchError("Request timed out") from e
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        logger.info(f"HTTP {status} fetching {url}")
        raise FetchError(f"Failed to fetch page: HTTP {status}", status_code=status) from e
    except httpx.HTTPError as e:
        logger.info(f"Network error fetching {url}: {e}")
        raise FetchError(f"Failed to fetch page: {e}") from e
    finally:
        if owns_client:
            client.close()
