"""Main extraction pipeline orchestrator.

Runs the strategies in order of trust:
1. Structured data (Schema.org JSON-LD)
2. HTML heuristics
3. AI fallback, merged over the heuristic result

Each strategy runs at most once per URL.
"""

import asyncio
from typing import Optional

import httpx
from bs4 import BeautifulSoup
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn

from recipe_pipeline.models import ScrapedRecipe
from recipe_pipeline.extractors.fetch import fetch_url, FetchError, DEFAULT_TIMEOUT
from recipe_pipeline.extractors.structured import extract_structured_data
from recipe_pipeline.extractors.heuristics import extract_heuristics
from recipe_pipeline.enrichers.llm import LLMClient, extract_recipe_with_ai
from recipe_pipeline.enrichers.schema import AIRecipeData

console = Console()


def merge_ai_result(html_data: ScrapedRecipe, ai_data: AIRecipeData) -> ScrapedRecipe:
    """Merge AI output over a heuristic result.

    Ingredients and instructions are replaced wholesale. Timing and
    servings only fill gaps: a value the page already gave is kept.
    """
    merged = html_data.model_copy(deep=True)
    merged.ingredients = list(ai_data.ingredients)
    merged.instructions = list(ai_data.instructions)
    merged.prep_time = html_data.prep_time or ai_data.prep_time
    merged.cook_time = html_data.cook_time or ai_data.cook_time
    merged.servings = html_data.servings or ai_data.servings
    merged.extraction_method = "heuristics+ai"
    return merged


async def extract_recipe(
    html: str,
    url: str,
    llm: Optional[LLMClient] = None,
) -> ScrapedRecipe:
    """Extract a recipe from already-fetched HTML.

    Args:
        html: Page markup
        url: Page URL (for resolving relative image URLs and the AI prompt)
        llm: AI fallback client; None disables the fallback

    Returns:
        The best available ScrapedRecipe. May have empty ingredients and
        instructions if nothing worked; that is not an error here.
    """
    soup = BeautifulSoup(html, "lxml")

    # Structured data first (most reliable)
    structured_data = extract_structured_data(soup)
    if structured_data and structured_data.ingredients:
        console.print(f"[dim]JSON-LD recipe found for {url}[/dim]")
        return structured_data

    # HTML heuristics
    heuristic_data = extract_heuristics(soup, url)
    console.print(
        f"[dim]HTML heuristics: {len(heuristic_data.ingredients)} ingredients, "
        f"{len(heuristic_data.instructions)} instructions[/dim]"
    )
    if heuristic_data.is_complete:
        return heuristic_data

    if llm is None:
        return heuristic_data

    # AI fallback for sites without usable markup
    console.print(f"[cyan]Falling back to AI extraction for {url}[/cyan]")
    ai_data = await extract_recipe_with_ai(url, llm)
    if ai_data and ai_data.ingredients:
        return merge_ai_result(heuristic_data, ai_data)

    console.print("[yellow]AI extraction gave nothing, using HTML result[/yellow]")
    return heuristic_data


async def extract_recipe_from_url(
    url: str,
    llm: Optional[LLMClient] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ScrapedRecipe:
    """Fetch a recipe page and extract it.

    Raises:
        FetchError: if the page itself could not be fetched
    """
    html = await fetch_url(url, timeout=timeout, client=client)
    recipe = await extract_recipe(html, url, llm=llm)

    console.print(
        f"[green]Extracted:[/green] {recipe.title[:50]} "
        f"[dim](method: {recipe.extraction_method})[/dim]"
    )
    return recipe


class BatchResult:
    """Outcome of one URL in a batch extraction."""
    def __init__(
        self,
        url: str,
        recipe: Optional[ScrapedRecipe] = None,
        error: Optional[Exception] = None,
    ):
        self.url = url
        self.recipe = recipe
        self.error = error

    @property
    def ok(self) -> bool:
        return self.recipe is not None


async def extract_recipes_batch(
    urls: list[str],
    llm: Optional[LLMClient] = None,
    max_concurrent: int = 5,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[BatchResult]:
    """Extract recipes from multiple URLs in parallel.

    Extractions are independent; one failing URL doesn't affect the rest.

    Returns:
        One BatchResult per URL, in input order
    """
    semaphore = asyncio.Semaphore(max_concurrent)

    async def process_url(url: str, client: httpx.AsyncClient) -> BatchResult:
        async with semaphore:
            try:
                recipe = await extract_recipe_from_url(
                    url, llm=llm, client=client, timeout=timeout
                )
                return BatchResult(url, recipe=recipe)
            except FetchError as e:
                return BatchResult(url, error=e)
            except Exception as e:
                console.print(f"[red]Error extracting {url}: {e}[/red]")
                return BatchResult(url, error=e)

    results: list[BatchResult] = []

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=console,
        ) as progress:
            task = progress.add_task("Extracting recipes...", total=len(urls))

            async def tracked(url: str) -> BatchResult:
                result = await process_url(url, client)
                progress.advance(task)
                return result

            results = await asyncio.gather(*[tracked(url) for url in urls])

    succeeded = sum(1 for r in results if r.ok)
    console.print(f"\n[green]Successfully extracted {succeeded}/{len(urls)} recipes[/green]")

    return list(results)
