"""
Image re-hosting.

Selected recipe photos are copied from the publisher to a durable store
so saved recipes do not depend on the original site. The store is
reached through the ImageUploader protocol: upload bytes, get a URL.
"""

import logging
from typing import Protocol
from urllib.parse import urlsplit

import httpx

from recipebox.config import settings

from .fetch import browser_headers, build_client
from .models import ImageUploadFailure

logger = logging.getLogger(__name__)

IMAGE_ACCEPT = "image/avif,image/webp,image/apng,image/*,*/*;q=0.8"


class ImageUploader(Protocol):
    """Durable image store."""

    def upload(self, data: bytes, filename: str, content_type: str) -> str:
        """Store the bytes and return their hosted URL."""
        ...


class HttpImageUploader:
    """
    Uploads images with a multipart POST to a file hosting endpoint.

    The endpoint must answer with JSON holding the hosted URL in
    "url" (or "ufsUrl").
    """

    def __init__(self, endpoint: str, token: str | None = None, client: httpx.Client | None = None):
        self.endpoint = endpoint
        self.token = token
        self._client = client

    def upload(self, data: bytes, filename: str, content_type: str) -> str:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        files = {"file": (filename, data, content_type)}

        client = self._client or build_client()
        try:
            response = client.post(self.endpoint, files=files, headers=headers)
            response.raise_for_status()
            payload = response.json()
        finally:
            if self._client is None:
                client.close()

        hosted_url = (payload.get("ufsUrl") or payload.get("url")) if isinstance(payload, dict) else None
        if not hosted_url:
            raise ValueError(f"Upload response has no URL: {payload!r}")
        return hosted_url


def get_image_uploader() -> ImageUploader | None:
    """Uploader from settings, or None when no store is configured."""
    if not settings.image_upload_url:
        return None
    return HttpImageUploader(settings.image_upload_url, settings.image_upload_token)


def extension_for(content_type: str) -> str:
    """File extension for an image content type."""
    if "png" in content_type:
        return "png"
    if "webp" in content_type:
        return "webp"
    if "gif" in content_type:
        return "gif"
    return "jpg"


def fetch_image(url: str, client: httpx.Client) -> tuple[bytes, str]:
    """
    Download an image.

    Returns:
        (bytes, content type)

    Raises:
        ImageUploadFailure: On HTTP failure or a non-image response
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise ImageUploadFailure(url, "Invalid image URL") from e
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ImageUploadFailure(url, "Invalid image URL")

    headers = browser_headers(accept=IMAGE_ACCEPT)
    headers["Referer"] = f"{parts.scheme}://{parts.netloc}"

    try:
        response = client.get(url, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ImageUploadFailure(url, f"Image fetch failed: HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise ImageUploadFailure(url, f"Image fetch failed: {e}") from e

    content_type = response.headers.get("content-type", "")
    if not content_type.startswith("image/"):
        raise ImageUploadFailure(url, f"Not an image (content-type: {content_type})")

    return response.content, content_type


def rehost_image(url: str, uploader: ImageUploader, client: httpx.Client | None = None) -> str:
    """
    Copy one remote image to the durable store.

    Raises:
        ImageUploadFailure: If the image cannot be fetched, is not an
            image, or the upload fails
    """
    owns_client = client is None
    if client is None:
        client = build_client()

    try:
        data, content_type = fetch_image(url, client)
    finally:
        if owns_client:
            client.close()

    filename = f"recipe.{extension_for(content_type)}"
    try:
        return uploader.upload(data, filename, content_type)
    except (httpx.HTTPError, ValueError) as e:
        raise ImageUploadFailure(url, f"Upload failed: {e}") from e


def rehost_images(
    urls: list[str] | tuple[str, ...],
    uploader: ImageUploader,
    client: httpx.Client | None = None,
) -> list[str]:
    """
    Re-host every selected image, skipping the ones that fail.

    A failed image only loses its own slot; the rest (and the recipe
    itself) still go through.

    Returns:
        Hosted URLs in the order of the input
    """
    hosted = []
    for url in urls:
        try:
            hosted.append(rehost_image(url, uploader, client=client))
        except ImageUploadFailure as e:
            logger.warning(f"Image re-host skipped: {e}")

    logger.info(f"Re-hosted {len(hosted)}/{len(urls)} images")
    return hosted
