from __future__ import annotations

from app.adapters.base import BaseAdapter
from app.config import settings
from app.models.research import AdapterResult, RecordKind, ResearchRecord
from app.tools import jina_scraper, search_provider, web_utils, wikipedia_search


class FallbackAdapter(BaseAdapter):
    """Background evidence run for every query regardless of category."""

    name = "fallback"
    topic = None
    dispatch_step = "Searching general knowledge sources"
    dispatch_source = "Wikipedia and general databases"
    start_step = "Searching general knowledge sources"
    start_source = "Fallback Service"

    async def collect(self, query: str, session_id: str | None, result: AdapterResult) -> None:
        await self.call_provider(
            result,
            session_id,
            provider="Wikipedia",
            step="Searching Wikipedia",
            fetch=lambda: wikipedia_search.search(query),
        )

        if search_provider.is_configured() and self.needs_more(result):
            await self.call_provider(
                result,
                session_id,
                provider="Web search",
                step="Searching the web",
                fetch=lambda: search_provider.search_records(f"{query} commercial real estate"),
            )

        if settings.jina_api_key and self.needs_more(result):
            await self.call_provider(
                result,
                session_id,
                provider="Web scraper",
                step="Scraping commercial real estate market insights",
                fetch=lambda: jina_scraper.scrape_records(),
            )

    def general_info(self) -> ResearchRecord:
        return ResearchRecord(
            title="General Commercial Real Estate Information",
            authors="CRE Research Team",
            date=web_utils.display_date(),
            source="Internal Database",
            link="#",
            summary=(
                "Commercial real estate encompasses a range of property types including office, "
                "retail, industrial, multifamily, and specialty sectors. Each property type has "
                "unique characteristics, investment considerations, and market dynamics. "
                "Investment decisions typically consider factors such as location, tenant "
                "quality, lease terms, property condition, and broader economic trends."
            ),
            kind=RecordKind.WEB_CONTENT,
        )
