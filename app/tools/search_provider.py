from __future__ import annotations

from dataclasses import dataclass

from app.config import settings
from app.models.research import RecordKind, ResearchRecord
from app.services import logger as log_service
from app.tools import brave_search, tavily_search, web_utils
from app.tools.tavily_search import SearchResult


@dataclass
class SearchResponse:
    results: list[SearchResult]
    provider: str
    fallback_from: str | None = None
    fallback_reason: str | None = None


def is_configured() -> bool:
    """True when at least one web search backend has credentials."""
    return bool(settings.brave_api_key or settings.tavily_api_key)


def _tavily_fallback_enabled() -> bool:
    return bool(settings.search_fallback_to_tavily and settings.tavily_api_key)


async def search(
    query: str,
    *,
    max_results: int | None = None,
    include_domains: list[str] | None = None,
) -> SearchResponse:
    provider = settings.search_provider.lower().strip()
    limit = max_results or settings.search_max_results

    if provider == "tavily":
        results = await tavily_search.search(
            query=query,
            max_results=limit,
            include_domains=include_domains,
        )
        return SearchResponse(results=results, provider="tavily")

    if provider == "brave":
        try:
            results = await brave_search.search(
                query=query,
                max_results=limit,
                include_domains=include_domains,
            )
            if results or not _tavily_fallback_enabled():
                return SearchResponse(results=results, provider="brave")

            fallback_results = await tavily_search.search(
                query=query,
                max_results=limit,
                include_domains=include_domains,
            )
            return SearchResponse(
                results=fallback_results,
                provider="tavily",
                fallback_from="brave",
                fallback_reason="brave returned zero results",
            )
        except Exception as e:
            if not _tavily_fallback_enabled():
                raise
            fallback_results = await tavily_search.search(
                query=query,
                max_results=limit,
                include_domains=include_domains,
            )
            return SearchResponse(
                results=fallback_results,
                provider="tavily",
                fallback_from="brave",
                fallback_reason=str(e),
            )

    raise ValueError(f"Unsupported SEARCH_PROVIDER: {settings.search_provider}")


def results_to_records(
    results: list[SearchResult],
    *,
    kind: RecordKind = RecordKind.WEB_CONTENT,
    source: str | None = None,
) -> list[ResearchRecord]:
    """Normalize search hits into research records."""
    today = web_utils.display_date()
    records: list[ResearchRecord] = []
    for r in results:
        if not r.url or not web_utils.is_valid_url(r.url):
            continue
        domain = web_utils.extract_domain(r.url)
        records.append(
            ResearchRecord(
                title=r.title or domain,
                authors=domain,
                date=today,
                source=source or domain,
                link=r.url,
                summary=web_utils.clean_content(web_utils.strip_html(r.content), 1000),
                kind=kind,
            )
        )
    return records


async def search_records(
    query: str,
    *,
    kind: RecordKind = RecordKind.WEB_CONTENT,
    include_domains: list[str] | None = None,
    source: str | None = None,
    max_results: int | None = None,
) -> list[ResearchRecord]:
    response = await search(query, max_results=max_results, include_domains=include_domains)
    if response.fallback_from:
        log_service.log_provider_call(
            "web_search", response.fallback_from, f"fell back to {response.provider}", error=response.fallback_reason
        )
    return results_to_records(response.results, kind=kind, source=source)
