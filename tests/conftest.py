"""Shared test fixtures and configuration."""

import pytest

from recipe_pipeline.models import ScrapedRecipe


@pytest.fixture
def recipe_entity() -> dict:
    """A typical Schema.org Recipe entity."""
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Fluffy Pancakes",
        "description": "Weekend breakfast pancakes.",
        "image": ["https://example.com/img/pancakes.jpg", "https://example.com/img/stack.jpg"],
        "recipeIngredient": ["2 cups flour", "2 eggs", "1 1/2 cups milk"],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Whisk the dry ingredients."},
            {"@type": "HowToStep", "text": "Add eggs and milk, then cook."},
        ],
        "prepTime": "PT10M",
        "cookTime": "PT20M",
        "totalTime": "PT30M",
        "recipeYield": "4 servings",
    }


@pytest.fixture
def heuristic_html() -> str:
    """Recipe page without structured data but with recipe classes."""
    return """
    <html>
      <head>
        <title>Pancakes | Cooking Blog</title>
        <meta property="og:description" content="Easy pancakes">
        <meta property="og:image" content="https://example.com/og.jpg">
      </head>
      <body>
        <img src="/static/site-logo.png">
        <h1>Grandma's Pancakes</h1>
        <img src="/images/pancakes.jpg">
        <div class="recipe-ingredients">
          <ul>
            <li>2 cups flour</li>
            <li>2 eggs</li>
          </ul>
        </div>
        <div class="recipe-instructions">
          <ol>
            <li>Mix everything in a large bowl.</li>
            <li>Cook on a hot griddle until golden.</li>
          </ol>
        </div>
      </body>
    </html>
    """


@pytest.fixture
def bare_html() -> str:
    """Page with a title and images but nothing recipe-shaped."""
    return """
    <html>
      <head><title>My Blog Post</title></head>
      <body>
        <p>Some story about my trip.</p>
        <img src="https://cdn.example.com/photo.jpg">
      </body>
    </html>
    """


@pytest.fixture
def empty_heuristic_result() -> ScrapedRecipe:
    return ScrapedRecipe(
        title="Soft Boiled Eggs",
        prep_time="15 minutes",
        extraction_method="heuristics",
    )
