"""Tests for the recipe import HTTP API."""

import httpx
import pytest
from fastapi.testclient import TestClient

from recipebox.recipe_import import get_image_uploader
from recipebox.recipe_import.models import (
    ExtractedRecipe,
    ExtractionErrorKind,
    ExtractionMethod,
    ExtractionResult,
    ImageUploadFailure,
)
from recipebox.web import recipe_import_routes
from recipebox.web.app import app


class FakeUploader:
    def __init__(self):
        self.count = 0

    def upload(self, data: bytes, filename: str, content_type: str) -> str:
        self.count += 1
        return f"https://files.example.com/{self.count}/{filename}"


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def uploader():
    fake = FakeUploader()
    app.dependency_overrides[get_image_uploader] = lambda: fake
    return fake


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "1.0.0"}


class TestImportEndpoint:
    def test_success_returns_preview(self, client, monkeypatch):
        recipe = ExtractedRecipe(
            title="Tacos",
            source_url="https://example.com/tacos",
            image_urls=("https://cdn.example.com/a/tacos.jpg",),
            servings=4,
            ingredient_lines=("2 cups pasta", "Salt to taste"),
            instruction_steps=("Cook it.",),
        )
        seen = []

        def fake_extract(url):
            seen.append(url)
            return ExtractionResult(success=True, method=ExtractionMethod.JSON_LD, recipe=recipe)

        monkeypatch.setattr(recipe_import_routes, "extract_recipe", fake_extract)

        response = client.post("/api/recipes/import", json={"url": "https://example.com/tacos"})

        assert response.status_code == 200
        body = response.json()
        assert seen == ["https://example.com/tacos"]
        assert body["success"] is True
        assert body["method"] == "json_ld"
        preview = body["preview"]
        assert preview["title"] == "Tacos"
        assert preview["servings"] == 4
        assert preview["image_urls"] == ["https://cdn.example.com/a/tacos.jpg"]
        assert preview["ingredients_raw"] == ["2 cups pasta", "Salt to taste"]
        assert preview["ingredients_parsed"] == [
            {"amount": "2 cups", "name": "pasta", "raw_text": "2 cups pasta"},
            {"amount": None, "name": "Salt to taste", "raw_text": "Salt to taste"},
        ]
        assert preview["instructions"] == ["Cook it."]

    def test_failure_is_not_an_error_status(self, client, monkeypatch):
        def fake_extract(url):
            return ExtractionResult(
                success=False,
                method=ExtractionMethod.FAILED,
                error_kind=ExtractionErrorKind.NO_RECIPE_FOUND,
                error="Could not extract recipe from this URL.",
                fallback_message="Copy the recipe text.",
            )

        monkeypatch.setattr(recipe_import_routes, "extract_recipe", fake_extract)

        response = client.post("/api/recipes/import", json={"url": "https://example.com/about"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["method"] == "failed"
        assert body["error_kind"] == "no_recipe_found"
        assert body["preview"] is None
        assert body["fallback_message"] == "Copy the recipe text."

    def test_invalid_url(self, client):
        response = client.post("/api/recipes/import", json={"url": "not a url"})

        body = response.json()
        assert body["success"] is False
        assert body["error_kind"] == "invalid_url"


class TestConfirmEndpoint:
    PAYLOAD = {
        "source_url": "https://example.com/tacos",
        "title": "  Tacos  ",
        "image_urls": ["https://cdn.example.com/a/tacos.jpg", "https://cdn.example.com/b/tacos.jpg"],
        "prep_time_minutes": 10,
        "cook_time_minutes": 20,
        "servings": 4,
        "ingredients": ["2 cups pasta", "", "Salt to taste"],
        "instructions": ["Boil water.", "  ", "Cook it."],
    }

    def test_builds_draft_with_hosted_images(self, client, uploader, monkeypatch):
        def fake_fetch_image(url, http_client):
            if "/b/" in url:
                raise ImageUploadFailure(url, "Not an image")
            return b"jpeg-bytes", "image/jpeg"

        monkeypatch.setattr("recipebox.recipe_import.rehost.fetch_image", fake_fetch_image)

        response = client.post("/api/recipes/import/confirm", json=self.PAYLOAD)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["images_requested"] == 2
        assert body["images_hosted"] == 1
        draft = body["draft"]
        assert draft["title"] == "Tacos"
        assert draft["image_urls"] == ["https://files.example.com/1/recipe.jpg"]
        assert draft["total_time_minutes"] == 30
        assert draft["ingredients"] == [
            {"amount": "2 cups", "name": "pasta", "raw_text": None},
            {"amount": None, "name": "Salt to taste", "raw_text": None},
        ]
        assert draft["instructions"] == ["Boil water.", "Cook it."]

    def test_without_image_store_imports_without_images(self, client):
        response = client.post("/api/recipes/import/confirm", json=self.PAYLOAD)

        body = response.json()
        assert body["success"] is True
        assert body["images_hosted"] == 0
        assert body["draft"]["image_urls"] == []

    def test_blank_title(self, client):
        response = client.post("/api/recipes/import/confirm", json=dict(self.PAYLOAD, title="   "))

        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Recipe title is required"

    def test_too_many_images_rejected(self, client):
        urls = [f"https://cdn.example.com/{c}/x.jpg" for c in "abcd"]
        response = client.post("/api/recipes/import/confirm", json=dict(self.PAYLOAD, image_urls=urls))
        assert response.status_code == 422

    def test_non_positive_servings_rejected(self, client):
        response = client.post("/api/recipes/import/confirm", json=dict(self.PAYLOAD, servings=0))
        assert response.status_code == 422


class TestIngredientEndpoints:
    def test_parse(self, client):
        response = client.post(
            "/api/ingredients/parse",
            json={"lines": ["1 ½ cups flour", "  ", "2 eggs", "Salt to taste"]},
        )

        assert response.status_code == 200
        assert response.json()["ingredients"] == [
            {"amount": "1 1/2 cups", "name": "flour", "raw_text": None},
            {"amount": "2", "name": "eggs", "raw_text": None},
            {"amount": None, "name": "Salt to taste", "raw_text": None},
        ]

    def test_scale(self, client):
        response = client.post(
            "/api/ingredients/scale",
            json={
                "multiplier": 2,
                "amounts": ["1/2 cup", None, "a pinch"],
                "lines": ["2 cups flour", "Salt to taste"],
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "amounts": ["1 cup", None, "a pinch"],
            "lines": ["4 cups flour", "Salt to taste"],
        }

    def test_scale_rejects_zero_multiplier(self, client):
        response = client.post("/api/ingredients/scale", json={"multiplier": 0, "amounts": ["1"]})
        assert response.status_code == 422

    def test_scale_rejects_infinite_multiplier(self, client):
        response = client.post(
            "/api/ingredients/scale",
            content='{"multiplier": 1e400, "amounts": ["1 cup"]}',
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 422

    def test_scale_result_too_large(self, client):
        response = client.post("/api/ingredients/scale", json={"multiplier": 1e308, "amounts": ["1000 cups"]})
        assert response.status_code == 422


class TestImageProxy:
    def _use_upstream(self, monkeypatch, handler):
        monkeypatch.setattr(
            recipe_import_routes,
            "build_client",
            lambda: httpx.Client(transport=httpx.MockTransport(handler)),
        )

    def test_serves_image(self, client, monkeypatch):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["referer"] = request.headers.get("referer")
            return httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})

        self._use_upstream(monkeypatch, handler)

        response = client.get("/api/image", params={"url": "https://cdn.example.com/a/photo.png"})

        assert response.status_code == 200
        assert response.content == b"\x89PNG"
        assert response.headers["content-type"] == "image/png"
        assert "max-age=86400" in response.headers["cache-control"]
        assert seen["referer"] == "https://cdn.example.com"

    @pytest.mark.parametrize("url", ["http://localhost/a.png", "http://192.168.0.2/a.png", "file:///etc/passwd"])
    def test_rejects_non_public_urls(self, client, url):
        response = client.get("/api/image", params={"url": url})
        assert response.status_code == 400

    def test_not_an_image(self, client, monkeypatch):
        self._use_upstream(
            monkeypatch, lambda request: httpx.Response(200, text="<html>", headers={"content-type": "text/html"})
        )
        response = client.get("/api/image", params={"url": "https://cdn.example.com/a/photo.png"})
        assert response.status_code == 415

    def test_upstream_error(self, client, monkeypatch):
        self._use_upstream(monkeypatch, lambda request: httpx.Response(404, text="missing"))
        response = client.get("/api/image", params={"url": "https://cdn.example.com/a/photo.png"})
        assert response.status_code == 502

    def test_network_error(self, client, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        self._use_upstream(monkeypatch, handler)
        response = client.get("/api/image", params={"url": "https://cdn.example.com/a/photo.png"})
        assert response.status_code == 502

    def test_follows_public_redirect(self, client, monkeypatch):
        fetched = []

        def handler(request: httpx.Request) -> httpx.Response:
            fetched.append(str(request.url))
            if request.url.path == "/a.jpg":
                return httpx.Response(302, headers={"location": "/photos/a.jpg"})
            return httpx.Response(200, content=b"jpeg", headers={"content-type": "image/jpeg"})

        self._use_upstream(monkeypatch, handler)
        response = client.get("/api/image", params={"url": "https://cdn.example.com/a.jpg"})

        assert response.status_code == 200
        assert response.content == b"jpeg"
        assert fetched == ["https://cdn.example.com/a.jpg", "https://cdn.example.com/photos/a.jpg"]

    def test_refuses_redirect_to_local_host(self, client, monkeypatch):
        fetched = []

        def handler(request: httpx.Request) -> httpx.Response:
            fetched.append(str(request.url))
            if request.url.host == "public.example.com":
                return httpx.Response(302, headers={"location": "http://127.0.0.1:8080/admin.png"})
            return httpx.Response(200, content=b"secret", headers={"content-type": "image/png"})

        self._use_upstream(monkeypatch, handler)
        response = client.get("/api/image", params={"url": "https://public.example.com/a.jpg"})

        assert response.status_code == 400
        assert fetched == ["https://public.example.com/a.jpg"]

    def test_too_many_redirects(self, client, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            hop = int(request.url.params.get("hop", "0"))
            return httpx.Response(302, headers={"location": f"/a.jpg?hop={hop + 1}"})

        self._use_upstream(monkeypatch, handler)
        response = client.get("/api/image", params={"url": "https://cdn.example.com/a.jpg"})

        assert response.status_code == 502
