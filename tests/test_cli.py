"""Tests for the command line interface."""

import json

from typer.testing import CliRunner

from recipebox.main import app
from recipebox.recipe_import.models import ExtractedRecipe, ExtractionMethod, ExtractionResult

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output


def test_parse():
    result = runner.invoke(app, ["parse", "2 cups flour", "Salt to taste"])
    assert result.exit_code == 0
    assert "2 cups" in result.output
    assert "flour" in result.output
    assert "Salt to taste" in result.output


def test_scale():
    result = runner.invoke(app, ["scale", "1 1/2 cups", "2"])
    assert result.exit_code == 0
    assert result.output.strip() == "3 cups"


def test_scale_fraction_multiplier():
    result = runner.invoke(app, ["scale", "3", "1/3"])
    assert result.exit_code == 0
    assert result.output.strip() == "1"


def test_scale_bad_multiplier():
    result = runner.invoke(app, ["scale", "1 cup", "0"])
    assert result.exit_code == 1


def test_import_invalid_url():
    result = runner.invoke(app, ["import", "not-a-url"])
    assert result.exit_code == 1
    assert "URL must start with http:// or https://" in result.output


def test_import_json(monkeypatch):
    recipe = ExtractedRecipe(
        title="Tacos",
        source_url="https://example.com/tacos",
        ingredient_lines=("2 cups pasta",),
        instruction_steps=("Cook it.",),
    )
    monkeypatch.setattr(
        "recipebox.recipe_import.extract_recipe",
        lambda url: ExtractionResult(success=True, method=ExtractionMethod.JSON_LD, recipe=recipe),
    )

    result = runner.invoke(app, ["import", "https://example.com/tacos", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout[result.stdout.index("{") :])
    assert data["title"] == "Tacos"
    assert data["ingredient_lines"] == ["2 cups pasta"]


def test_import_table(monkeypatch):
    recipe = ExtractedRecipe(
        title="Tacos",
        source_url="https://example.com/tacos",
        servings=4,
        ingredient_lines=("2 cups pasta",),
        instruction_steps=("Cook it.",),
    )
    monkeypatch.setattr(
        "recipebox.recipe_import.extract_recipe",
        lambda url: ExtractionResult(success=True, method=ExtractionMethod.JSON_LD, recipe=recipe),
    )

    result = runner.invoke(app, ["import", "https://example.com/tacos"])

    assert result.exit_code == 0
    assert "Tacos" in result.output
    assert "Cook it." in result.output
