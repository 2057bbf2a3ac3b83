"""Data models for the recipe pipeline."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

UNTITLED_RECIPE = "Untitled Recipe"


class ScrapedRecipe(BaseModel):
    """Structured recipe pulled out of a single page.

    Built fresh per extraction and handed to recipe construction.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = UNTITLED_RECIPE
    description: Optional[str] = None

    # Images
    cover_image: Optional[str] = Field(default=None, alias="coverImage")
    images: list[str] = Field(default_factory=list)  # Discovery order, may repeat

    # Order matters for both: never sort or dedupe
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)

    # Timing (human readable, e.g. "1 hour 30 minutes")
    prep_time: Optional[str] = Field(default=None, alias="prepTime")
    cook_time: Optional[str] = Field(default=None, alias="cookTime")
    total_time: Optional[str] = Field(default=None, alias="totalTime")
    servings: Optional[str] = None

    # Source info
    extraction_method: str = "unknown"  # json-ld, heuristics, heuristics+ai

    @property
    def is_complete(self) -> bool:
        """Both ingredients and instructions were found."""
        return bool(self.ingredients) and bool(self.instructions)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class Recipe(BaseModel):
    """Saved recipe record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str
    title: str
    description: Optional[str] = None
    cover_image: Optional[str] = Field(default=None, alias="coverImage")
    images: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    prep_time: Optional[str] = Field(default=None, alias="prepTime")
    cook_time: Optional[str] = Field(default=None, alias="cookTime")
    total_time: Optional[str] = Field(default=None, alias="totalTime")
    servings: Optional[str] = None
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    def to_record(self) -> dict:
        """Convert to the camelCase dict stored by the record store."""
        record = self.model_dump(by_alias=True)
        # Drop absent optionals, keep empty lists (they are meaningful here)
        return {k: v for k, v in record.items() if v is not None}


def create_recipe_from_scraped(
    url: str,
    scraped: ScrapedRecipe,
    tags: Optional[list[str]] = None,
) -> Recipe:
    """Assign an id and timestamps to a scraped recipe."""
    now = utc_now_iso()
    return Recipe(
        id=str(uuid.uuid4()),
        url=url,
        title=scraped.title,
        description=scraped.description,
        cover_image=scraped.cover_image,
        images=list(scraped.images),
        ingredients=list(scraped.ingredients),
        instructions=list(scraped.instructions),
        tags=list(tags or []),
        prep_time=scraped.prep_time,
        cook_time=scraped.cook_time,
        total_time=scraped.total_time,
        servings=scraped.servings,
        created_at=now,
        updated_at=now,
    )
