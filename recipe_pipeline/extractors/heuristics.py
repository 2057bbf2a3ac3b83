"""HTML heuristics for recipe extraction.

When a page has no usable structured data, guess ingredients and
instructions from class names, containers and measurement words.
"""

from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from rich.console import Console

from recipe_pipeline.models import ScrapedRecipe, UNTITLED_RECIPE

console = Console()

MAX_IMAGES = 10
MAX_INGREDIENT_LENGTH = 200  # Longer lines are prose, not ingredients
MIN_INSTRUCTION_LENGTH = 10  # Shorter lines are labels ("Step 1")

# Matched case-sensitively, so "Logo.png" gets through
IMAGE_EXCLUDE_MARKERS = ["icon", "logo"]

# Priority order: the first selector with accepted matches wins, no merging
INGREDIENT_SELECTORS = [
    '[class*="ingredient"] li',
    '[class*="Ingredient"] li',
    ".ingredients li",
    "[data-ingredient]",
    # Generic fallbacks: list items mentioning a unit
    'ul li:-soup-contains("cup")',
    'ul li:-soup-contains("tablespoon")',
    'ul li:-soup-contains("teaspoon")',
]

INSTRUCTION_SELECTORS = [
    '[class*="instruction"] li',
    '[class*="Instruction"] li',
    '[class*="direction"] li',
    '[class*="Direction"] li',
    '[class*="step"] li',
    ".instructions li",
    ".directions li",
    ".steps li",
    # Paragraph layouts
    '[class*="instruction"] p',
    '[class*="step"] p',
]


def get_meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    """Content of the first meta tag matching attrs, if non-empty."""
    meta = soup.find("meta", attrs=attrs)
    if meta:
        content = meta.get("content")
        if content:
            return content
    return None


def extract_title(soup: BeautifulSoup) -> str:
    """Title from h1, og:title, then <title>."""
    h1 = soup.find("h1")
    h1_text = h1.get_text().strip() if h1 else ""

    title_tag = soup.find("title")
    title_text = title_tag.get_text().strip() if title_tag else ""

    return (
        h1_text
        or get_meta_content(soup, property="og:title")
        or title_text
        or UNTITLED_RECIPE
    )


def extract_images(soup: BeautifulSoup, url: str) -> list[str]:
    """All content images, resolved against the page URL."""
    images = []
    for img in soup.find_all("img"):
        src = img.get("src")
        if not src:
            continue
        if any(marker in src for marker in IMAGE_EXCLUDE_MARKERS):
            continue
        images.append(src if src.startswith("http") else urljoin(url, src))
    return images[:MAX_IMAGES]


def select_first_match(
    soup: BeautifulSoup,
    selectors: list[str],
    min_length: int = 0,
    max_length: Optional[int] = None,
) -> list[str]:
    """Text of the first selector that yields accepted lines.

    Lines are trimmed and must be non-empty, longer than min_length and
    (if given) shorter than max_length.
    """
    for selector in selectors:
        lines = []
        for el in soup.select(selector):
            text = el.get_text().strip()
            if not text or len(text) <= min_length:
                continue
            if max_length is not None and len(text) >= max_length:
                continue
            lines.append(text)
        if lines:
            return lines
    return []


def extract_heuristics(soup: BeautifulSoup, url: str) -> ScrapedRecipe:
    """Extract a recipe using markup heuristics.

    This is the fallback when structured data is not available. Never
    fails: worst case ingredients and instructions come back empty.
    Timing and servings are left unset.
    """
    first_img = soup.find("img")

    return ScrapedRecipe(
        title=extract_title(soup),
        description=(
            get_meta_content(soup, property="og:description")
            or get_meta_content(soup, name="description")
        ),
        cover_image=(
            get_meta_content(soup, property="og:image")
            or (first_img.get("src") if first_img else None)
            or None
        ),
        images=extract_images(soup, url),
        ingredients=select_first_match(
            soup, INGREDIENT_SELECTORS, max_length=MAX_INGREDIENT_LENGTH
        ),
        instructions=select_first_match(
            soup, INSTRUCTION_SELECTORS, min_length=MIN_INSTRUCTION_LENGTH
        ),
        extraction_method="heuristics",
    )
