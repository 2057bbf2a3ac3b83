"""HTTP page fetcher for recipe URLs.

Single attempt per call: a failed fetch ends the extraction, so errors
are raised as FetchError with the HTTP status or transport reason.
"""

import random
from typing import Optional

import httpx
from rich.console import Console

console = Console()

# Realistic browser User-Agents
USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14.7; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (X11; Linux x86_64; rv:134.0) Gecko/20100101 Firefox/134.0",
]

DEFAULT_TIMEOUT = 30.0


class FetchError(Exception):
    """Page could not be fetched (non-2xx status or transport error)."""

    def __init__(
        self,
        url: str,
        http_status: Optional[int] = None,
        error_reason: Optional[str] = None,
    ):
        self.url = url
        self.http_status = http_status  # HTTP status code
        self.error_reason = error_reason  # "timeout", "connection", etc.
        detail = http_status if http_status is not None else error_reason
        super().__init__(f"Failed to fetch URL: {detail}")


def build_headers() -> dict[str, str]:
    return {
        "User-Agent": random.choice(USER_AGENTS),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


async def fetch_url(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Fetch page HTML.

    Args:
        url: Page URL
        timeout: Request timeout in seconds
        client: Optional shared client (a short-lived one is used otherwise)

    Returns:
        HTML content

    Raises:
        FetchError: on non-2xx status or transport failure
    """
    try:
        if client is not None:
            response = await client.get(
                url, headers=build_headers(), timeout=timeout, follow_redirects=True
            )
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                response = await own_client.get(url, headers=build_headers())
        response.raise_for_status()
        return response.text

    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        console.print(f"[red]HTTP {status} fetching {url}[/red]")
        raise FetchError(url, http_status=status) from e
    except httpx.TimeoutException as e:
        console.print(f"[red]Timeout fetching {url}[/red]")
        raise FetchError(url, error_reason="timeout") from e
    except httpx.ConnectError as e:
        console.print(f"[red]Connection failed for {url}[/red]")
        raise FetchError(url, error_reason="connection") from e
    except httpx.InvalidURL as e:
        console.print(f"[red]Invalid URL: {url}[/red]")
        raise FetchError(url, error_reason="invalid_url") from e
    except httpx.HTTPError as e:
        reason = type(e).__name__.lower()
        console.print(f"[red]Failed to fetch {url}: {reason}[/red]")
        raise FetchError(url, error_reason=reason) from e
