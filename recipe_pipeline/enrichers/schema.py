"""Recipe data returned by the AI fallback."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AIRecipeData(BaseModel):
    """Partial recipe extracted by the LLM from a recipe URL."""

    model_config = ConfigDict(populate_by_name=True)

    ingredients: list[str] = Field(
        default_factory=list,
        description="Ingredient lines with quantities, e.g. '1 lb asparagus'"
    )
    instructions: list[str] = Field(
        default_factory=list,
        description="Cooking steps in order, not article headings"
    )
    prep_time: Optional[str] = Field(default=None, alias="prepTime")
    cook_time: Optional[str] = Field(default=None, alias="cookTime")
    servings: Optional[str] = None
