"""URL → recipe extraction engine.

This module provides a unified extraction pipeline that:
1. Fetches HTML from recipe URLs
2. Extracts recipe data using layered strategies:
   - Schema.org JSON-LD (Recipe entities)
   - HTML heuristics (ingredient/instruction selectors, meta tags)
   - AI fallback when the page gives too little
3. Returns a ScrapedRecipe
"""

from recipe_pipeline.extractors.fetch import fetch_url, FetchError
from recipe_pipeline.extractors.structured import extract_structured_data, parse_duration
from recipe_pipeline.extractors.heuristics import extract_heuristics
from recipe_pipeline.extractors.pipeline import (
    extract_recipe,
    extract_recipe_from_url,
    extract_recipes_batch,
    merge_ai_result,
    BatchResult,
)

__all__ = [
    "fetch_url",
    "FetchError",
    "extract_structured_data",
    "parse_duration",
    "extract_heuristics",
    "extract_recipe",
    "extract_recipe_from_url",
    "extract_recipes_batch",
    "merge_ai_result",
    "BatchResult",
]
