"""Test helpers shared across test modules."""

import json

from bs4 import BeautifulSoup


PAGE_URL = "https://example.com/recipes/pancakes"


class FakeLLM:
    """Stand-in for LLMClient returning a canned reply (or raising)."""

    def __init__(self, reply: str = "null", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        pass


def make_json_ld_page(*blocks, body: str = "") -> str:
    """HTML page with each block dumped into its own JSON-LD script."""
    scripts = "\n".join(
        f'<script type="application/ld+json">{b if isinstance(b, str) else json.dumps(b)}</script>'
        for b in blocks
    )
    return f"<html><head><title>Page</title>{scripts}</head><body>{body}</body></html>"


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")
