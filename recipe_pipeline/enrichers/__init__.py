"""AI fallback for recipe extraction."""

from recipe_pipeline.enrichers.llm import (
    LLMClient,
    extract_recipe_with_ai,
    parse_ai_recipe,
    get_openai_api_key,
)
from recipe_pipeline.enrichers.schema import AIRecipeData

__all__ = [
    "LLMClient",
    "AIRecipeData",
    "extract_recipe_with_ai",
    "parse_ai_recipe",
    "get_openai_api_key",
]
