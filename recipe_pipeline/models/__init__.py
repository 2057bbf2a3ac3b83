"""Data models for recipe pipeline."""

from recipe_pipeline.models.recipe import (
    ScrapedRecipe,
    Recipe,
    create_recipe_from_scraped,
    UNTITLED_RECIPE,
)

__all__ = [
    "ScrapedRecipe",
    "Recipe",
    "create_recipe_from_scraped",
    "UNTITLED_RECIPE",
]
