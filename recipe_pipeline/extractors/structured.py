"""Extract recipes from structured data (Schema.org JSON-LD)."""

import json
import re
from typing import Any, Optional

from bs4 import BeautifulSoup
from rich.console import Console

from recipe_pipeline.models import ScrapedRecipe, UNTITLED_RECIPE

console = Console()

# ISO 8601 duration, hours/minutes/seconds only: PT1H30M, PT45M, PT2H
DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")

# Default int/str conversion limit; longer runs are left as written
MAX_DURATION_DIGITS = 4300


def parse_duration(duration: Any) -> Optional[str]:
    """Convert an ISO 8601 duration to human text.

    Seconds are parsed but not rendered. Strings that aren't durations
    are assumed to already be human readable and returned as-is.
    """
    if not isinstance(duration, str):
        return None

    match = DURATION_PATTERN.search(duration)
    if not match:
        return duration

    if any(len(group or "") > MAX_DURATION_DIGITS for group in match.group(1, 2)):
        return duration

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)

    parts = []
    if hours > 0:
        parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
    if minutes > 0:
        parts.append(f"{minutes} minute{'s' if minutes != 1 else ''}")

    return " ".join(parts) or None


def extract_json_ld(soup: BeautifulSoup) -> list[Any]:
    """Extract all parseable JSON-LD blocks from page, in document order."""
    json_ld_blocks = []

    for script in soup.find_all("script", type="application/ld+json"):
        content = script.string or script.get_text()
        if not content or not content.strip():
            continue
        try:
            json_ld_blocks.append(json.loads(content))
        except (json.JSONDecodeError, RecursionError):
            continue  # Malformed blocks are common

    return json_ld_blocks


def is_recipe_type(value: Any) -> bool:
    """Check a JSON-LD @type value (string or list of strings)."""
    if isinstance(value, list):
        return "Recipe" in value
    return value == "Recipe"


def find_recipe_entity(data: Any) -> Optional[dict]:
    """Find the first Recipe entity in a JSON-LD value.

    Lists are searched in order, objects match on @type, and @graph
    containers are searched recursively.
    """
    if isinstance(data, list):
        for item in data:
            found = find_recipe_entity(item)
            if found is not None:
                return found
        return None

    if isinstance(data, dict):
        if is_recipe_type(data.get("@type")):
            return data

        graph = data.get("@graph")
        if isinstance(graph, list):
            return find_recipe_entity(graph)

    return None


def resolve_image(image: Any) -> Optional[str]:
    """Resolve a single image URL from a JSON-LD image value."""
    if isinstance(image, str):
        return image or None

    if isinstance(image, list):
        for item in image:
            resolved = resolve_image(item)
            if resolved:
                return resolved
        return None

    if isinstance(image, dict):
        # ImageObject: prefer url, then @id
        for key in ("url", "@id"):
            value = image.get(key)
            if isinstance(value, str) and value:
                return value

    return None


def resolve_images(image: Any) -> list[str]:
    """Resolve every image URL from a JSON-LD image value, in order."""
    if isinstance(image, list):
        images = []
        for item in image:
            resolved = resolve_image(item)
            if resolved:
                images.append(resolved)
        return images

    resolved = resolve_image(image)
    return [resolved] if resolved else []


def resolve_ingredients(ingredients: Any) -> list[str]:
    """Ingredient lines from recipeIngredient (must be a list)."""
    if not isinstance(ingredients, list):
        return []

    lines = []
    for item in ingredients:
        if item is None:
            continue
        text = item if isinstance(item, str) else str(item)
        text = text.strip()
        if text:
            lines.append(text)
    return lines


def resolve_instructions(instructions: Any) -> list[str]:
    """Flatten recipeInstructions into ordered step text.

    Handles:
    - a single string (one step per line)
    - a list of strings
    - HowToStep objects (their text)
    - HowToSection objects (their itemListElement, recursively)
    """
    if isinstance(instructions, str):
        return [line.strip() for line in instructions.split("\n") if line.strip()]

    if not isinstance(instructions, list):
        return []

    steps: list[str] = []
    for item in instructions:
        if isinstance(item, str):
            steps.append(item)
        elif isinstance(item, dict):
            item_type = item.get("@type")
            if item_type == "HowToStep":
                text = item.get("text")
                if isinstance(text, str) and text:
                    steps.append(text)
            elif item_type == "HowToSection":
                elements = item.get("itemListElement")
                if isinstance(elements, list):
                    steps.extend(resolve_instructions(elements))
    return steps


def yield_text(value: Any) -> str:
    """Stringify a yield value: 4.0 -> "4", True -> "true"."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def resolve_servings(recipe_yield: Any) -> Optional[str]:
    """recipeYield as a string ("4", "4 servings")."""
    if recipe_yield is None:
        return None
    if isinstance(recipe_yield, list):
        return ", ".join(yield_text(y) for y in recipe_yield if y is not None) or None
    return yield_text(recipe_yield)


def recipe_from_schema_org(recipe: dict) -> ScrapedRecipe:
    """Build a ScrapedRecipe from a Schema.org Recipe entity."""
    name = recipe.get("name")
    description = recipe.get("description")

    return ScrapedRecipe(
        title=name if isinstance(name, str) else UNTITLED_RECIPE,
        description=description if isinstance(description, str) else None,
        cover_image=resolve_image(recipe.get("image")),
        images=resolve_images(recipe.get("image")),
        ingredients=resolve_ingredients(recipe.get("recipeIngredient")),
        instructions=resolve_instructions(recipe.get("recipeInstructions")),
        prep_time=parse_duration(recipe.get("prepTime")),
        cook_time=parse_duration(recipe.get("cookTime")),
        total_time=parse_duration(recipe.get("totalTime")),
        servings=resolve_servings(recipe.get("recipeYield")),
        extraction_method="json-ld",
    )


def extract_structured_data(soup: BeautifulSoup) -> Optional[ScrapedRecipe]:
    """Extract a recipe from the page's JSON-LD blocks.

    The first Recipe entity found wins; later blocks are not examined.
    Returns None when there is no Recipe entity or it lists no
    ingredients, so the caller can fall through to heuristics.
    """
    recipe = None
    for block in extract_json_ld(soup):
        try:
            recipe = find_recipe_entity(block)
        except RecursionError:
            continue
        if recipe is not None:
            break

    if recipe is None:
        return None

    data = recipe_from_schema_org(recipe)
    if not data.ingredients:
        console.print("[dim]JSON-LD recipe has no ingredients, skipping[/dim]")
        return None

    return data
