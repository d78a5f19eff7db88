from __future__ import annotations

import httpx

from app.config import settings
from app.errors import ProviderUnavailable
from app.tools.tavily_search import SearchResult

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


def scoped_query(query: str, include_domains: list[str] | None) -> str:
    """Restrict a Brave query to the given domains with ``site:`` operators."""
    if not include_domains:
        return query
    sites = " OR ".join(f"site:{domain}" for domain in include_domains)
    return f"{query} ({sites})"


def map_results(payload: dict) -> list[SearchResult]:
    """Brave has no relevance score, so rank position is turned into one."""
    items = (payload.get("web") or {}).get("results") or []
    count = max(len(items), 1)
    return [
        SearchResult(
            title=item.get("title") or "",
            url=item.get("url") or "",
            content=(item.get("description") or "").strip()
            or " ".join(item.get("extra_snippets") or []).strip(),
            score=max(0.0, 1.0 - position / count),
        )
        for position, item in enumerate(items)
    ]


async def search(
    query: str,
    *,
    max_results: int = 10,
    include_domains: list[str] | None = None,
) -> list[SearchResult]:
    if not settings.brave_api_key:
        raise ProviderUnavailable("brave", "BRAVE_API_KEY is not configured")

    async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
        response = await client.get(
            BRAVE_SEARCH_URL,
            params={"q": scoped_query(query, include_domains), "count": max_results},
            headers={"Accept": "application/json", "X-Subscription-Token": settings.brave_api_key},
        )
        response.raise_for_status()
        return map_results(response.json())
