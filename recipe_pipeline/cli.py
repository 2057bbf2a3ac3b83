"""CLI for the recipe pipeline."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from recipe_pipeline.enrichers.llm import LLMClient
from recipe_pipeline.extractors.fetch import FetchError, DEFAULT_TIMEOUT
from recipe_pipeline.extractors.pipeline import extract_recipe_from_url, extract_recipes_batch
from recipe_pipeline.models import ScrapedRecipe, create_recipe_from_scraped

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

app = typer.Typer(
    name="recipe-pipeline",
    help="Recipe extraction pipeline",
    add_completion=False,
)
console = Console()


def get_llm(use_ai: bool) -> Optional[LLMClient]:
    """Build the AI fallback client, or None if disabled/unconfigured."""
    if not use_ai:
        return None
    try:
        return LLMClient.from_env()
    except ValueError as e:
        console.print(f"[yellow]AI fallback disabled: {e}[/yellow]")
        return None


def print_recipe(recipe: ScrapedRecipe) -> None:
    """Print a readable summary of an extracted recipe."""
    console.print(f"\n[bold]{recipe.title}[/bold]")
    if recipe.description:
        console.print(f"[dim]{recipe.description[:200]}[/dim]")

    for label, value in [
        ("Prep", recipe.prep_time),
        ("Cook", recipe.cook_time),
        ("Total", recipe.total_time),
        ("Servings", recipe.servings),
    ]:
        if value:
            console.print(f"  {label}: {value}")

    console.print(f"\n[bold]Ingredients ({len(recipe.ingredients)})[/bold]")
    for line in recipe.ingredients:
        console.print(f"  • {line}")

    console.print(f"\n[bold]Instructions ({len(recipe.instructions)})[/bold]")
    for i, step in enumerate(recipe.instructions, 1):
        console.print(f"  {i}. {step}")

    console.print(f"\n[dim]Images: {len(recipe.images)} | Method: {recipe.extraction_method}[/dim]")


@app.command()
def extract(
    url: str = typer.Argument(..., help="Recipe page URL"),
    use_ai: bool = typer.Option(True, "--ai/--no-ai", help="Use AI fallback when HTML is incomplete"),
    as_json: bool = typer.Option(False, "--json", help="Print the recipe record as JSON"),
    tags: list[str] = typer.Option([], "--tag", "-t", help="Tag to attach (repeatable)"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Fetch timeout (seconds)"),
):
    """Extract a recipe from a URL."""
    llm = get_llm(use_ai)

    async def run() -> ScrapedRecipe:
        try:
            return await extract_recipe_from_url(url, llm=llm, timeout=timeout)
        finally:
            if llm:
                await llm.aclose()

    try:
        scraped = asyncio.run(run())
    except FetchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not scraped.ingredients and not scraped.instructions:
        console.print(
            "[yellow]Could not find ingredients or instructions on this page. "
            "Extracted only the title and images that could be found.[/yellow]"
        )

    if as_json:
        recipe = create_recipe_from_scraped(url, scraped, tags=tags)
        typer.echo(json.dumps(recipe.to_record(), indent=2, ensure_ascii=False))
    else:
        print_recipe(scraped)


@app.command()
def batch(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File with one URL per line"),
    use_ai: bool = typer.Option(True, "--ai/--no-ai", help="Use AI fallback when HTML is incomplete"),
    concurrency: int = typer.Option(5, "--concurrency", "-c", help="Concurrent extractions"),
):
    """Extract recipes from a list of URLs."""
    urls = [
        line.strip()
        for line in file.read_text().splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    if not urls:
        console.print("[yellow]No URLs to extract[/yellow]")
        raise typer.Exit(0)

    llm = get_llm(use_ai)

    async def run():
        try:
            return await extract_recipes_batch(urls, llm=llm, max_concurrent=concurrency)
        finally:
            if llm:
                await llm.aclose()

    results = asyncio.run(run())

    table = Table(title="Extraction Results")
    table.add_column("URL", style="cyan", max_width=50)
    table.add_column("Status")
    table.add_column("Method", style="dim")
    table.add_column("Ingredients", justify="right")
    table.add_column("Steps", justify="right")

    for result in results:
        if result.ok:
            recipe = result.recipe
            status = "[green]ok[/green]" if recipe.is_complete else "[yellow]partial[/yellow]"
            table.add_row(
                result.url,
                status,
                recipe.extraction_method,
                str(len(recipe.ingredients)),
                str(len(recipe.instructions)),
            )
        else:
            table.add_row(result.url, f"[red]{result.error}[/red]", "-", "-", "-")

    console.print(table)


if __name__ == "__main__":
    app()
