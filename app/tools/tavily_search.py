from __future__ import annotations

from dataclasses import dataclass

from tavily import AsyncTavilyClient

from app.config import settings
from app.errors import ProviderUnavailable


@dataclass
class SearchResult:
    """One web hit, shared by the Brave and Tavily backends."""

    title: str
    url: str
    content: str
    score: float


def _to_result(hit: dict) -> SearchResult | None:
    url = hit.get("url") or ""
    if not url:
        return None
    return SearchResult(
        title=hit.get("title") or "",
        url=url,
        content=hit.get("content") or "",
        score=float(hit.get("score") or 0.0),
    )


async def search(
    query: str,
    *,
    search_depth: str = "basic",
    max_results: int = 10,
    include_domains: list[str] | None = None,
) -> list[SearchResult]:
    """Tavily search, optionally restricted to a set of CRE publisher domains."""
    if not settings.tavily_api_key:
        raise ProviderUnavailable("tavily", "TAVILY_API_KEY is not configured")

    request = {
        "query": query,
        "search_depth": search_depth,
        "max_results": max_results,
        "topic": "general",
        "include_domains": include_domains or None,
        "timeout": settings.provider_timeout_seconds,
    }
    response = await AsyncTavilyClient(api_key=settings.tavily_api_key).search(
        **{k: v for k, v in request.items() if v is not None}
    )

    hits = (_to_result(hit) for hit in response.get("results", []))
    return [hit for hit in hits if hit is not None][:max_results]
