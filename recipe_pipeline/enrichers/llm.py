"""AI fallback for recipe extraction (OpenAI Responses API + web search).

Only used when structured data and HTML heuristics both come up short.
The client is built explicitly and passed in, so tests can swap in a
fake that returns canned text. Every failure here is absorbed: callers
get None and carry on with whatever the HTML gave them.
"""

import json
import os
from typing import Any, Optional

import httpx
from rich.console import Console

from recipe_pipeline.enrichers.schema import AIRecipeData

console = Console()

# OpenAI config
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-5-nano-2025-08-07"
DEFAULT_TIMEOUT = 120.0

# What the model answers when it can't find a recipe
NO_RESULT = "null"


def get_openai_api_key() -> str:
    """Get OpenAI API key from environment."""
    key = os.environ.get("OPENAI_API_KEY")
    if not key:
        raise ValueError("OPENAI_API_KEY environment variable not set")
    return key


class LLMClient:
    """Thin async client for a text completion with web search.

    One request per call, no retries.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0),
        )

    @classmethod
    def from_env(cls) -> "LLMClient":
        """Build a client from OPENAI_API_KEY / OPENAI_BASE_URL / OPENAI_MODEL."""
        return cls(
            api_key=get_openai_api_key(),
            model=os.environ.get("OPENAI_MODEL", DEFAULT_MODEL),
            base_url=os.environ.get("OPENAI_BASE_URL", DEFAULT_BASE_URL),
        )

    async def complete(self, prompt: str) -> str:
        """Send prompt, return the model's output text.

        Raises httpx errors on transport/auth failure.
        """
        payload = {
            "model": self.model,
            "tools": [{"type": "web_search"}],
            "input": prompt,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        response = await self._client.post(
            f"{self.base_url}/responses", json=payload, headers=headers
        )
        response.raise_for_status()
        return get_output_text(response.json())

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()


def get_output_text(data: dict) -> str:
    """Concatenate output_text parts from a Responses API payload."""
    if isinstance(data.get("output_text"), str):
        return data["output_text"]

    parts = []
    for item in data.get("output") or []:
        if item.get("type") != "message":
            continue
        for content in item.get("content") or []:
            if content.get("type") == "output_text" and isinstance(content.get("text"), str):
                parts.append(content["text"])
    return "".join(parts)


def build_recipe_prompt(url: str) -> str:
    return f"""Visit this recipe URL and extract the recipe data:

URL: {url}

Extract and return a JSON object with:
{{
  "ingredients": ["ingredient 1 with quantity", "ingredient 2 with quantity", ...],
  "instructions": ["Step 1 actual cooking instruction", "Step 2 actual cooking instruction", ...],
  "prepTime": "X minutes" or null,
  "cookTime": "X minutes" or null,
  "servings": "X servings" or null
}}

IMPORTANT:
- Extract actual ingredient quantities (e.g., "1 lb asparagus", "12 slices bacon")
- Extract actual cooking steps, NOT article section headings
- If ingredients are in prose text, extract them
- If there is no recipe at this URL, reply with null

Return ONLY the JSON object."""


def find_json_object(content: str) -> Optional[dict]:
    """First well-formed JSON object embedded in text.

    Surrounding prose and markdown code fences are ignored.
    """
    decoder = json.JSONDecoder()
    start = content.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(content, start)
        except json.JSONDecodeError:
            start = content.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = content.find("{", start + 1)
    return None


def coerce_string_list(value: Any) -> list[str]:
    """List of non-blank strings; anything that isn't a list becomes []."""
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items


def coerce_optional_string(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def parse_ai_recipe(content: Optional[str]) -> Optional[AIRecipeData]:
    """Parse the model's raw reply into AIRecipeData.

    Returns None for an empty reply, the literal "null" (any case), or a
    reply with no JSON object in it.
    """
    if not content:
        return None

    if content.strip().lower() == NO_RESULT:
        return None

    data = find_json_object(content)
    if data is None:
        return None

    return AIRecipeData(
        ingredients=coerce_string_list(data.get("ingredients")),
        instructions=coerce_string_list(data.get("instructions")),
        prep_time=coerce_optional_string(data.get("prepTime")),
        cook_time=coerce_optional_string(data.get("cookTime")),
        servings=coerce_optional_string(data.get("servings")),
    )


async def extract_recipe_with_ai(url: str, llm: LLMClient) -> Optional[AIRecipeData]:
    """Ask the LLM to extract the recipe at url.

    Network, auth and parse failures are logged and reported as None.
    """
    try:
        content = await llm.complete(build_recipe_prompt(url))
    except httpx.HTTPStatusError as e:
        console.print(f"[yellow]AI extraction failed: HTTP {e.response.status_code}[/yellow]")
        return None
    except Exception as e:
        console.print(f"[yellow]AI extraction failed: {e}[/yellow]")
        return None

    try:
        result = parse_ai_recipe(content)
    except Exception as e:
        console.print(f"[yellow]Could not parse AI response: {e}[/yellow]")
        return None

    if result is None:
        console.print("[dim]AI returned no recipe[/dim]")
    return result
