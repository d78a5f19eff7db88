from __future__ import annotations

from app.adapters.base import BaseAdapter
from app.models.research import AdapterResult, CategoryLabel, RecordKind, ResearchRecord
from app.tools import arxiv_search, search_provider, web_utils

CERTIFICATION_DOMAINS = ["usgbc.org", "energystar.gov"]


class SustainabilityAdapter(BaseAdapter):
    """Academic papers from arXiv, then LEED / ENERGY STAR certification data."""

    name = "sustainability"
    topic = CategoryLabel.SUSTAINABILITY
    dispatch_step = "Gathering sustainability research data"
    dispatch_source = "Sustainability databases"
    start_step = "Searching academic papers on sustainability"
    start_source = "arXiv"

    async def collect(self, query: str, session_id: str | None, result: AdapterResult) -> None:
        await self.call_provider(
            result,
            session_id,
            provider="arXiv",
            step="Querying arXiv for sustainability research",
            fetch=lambda: arxiv_search.search(query),
        )

        if self.needs_more(result) and search_provider.is_configured():
            await self.call_provider(
                result,
                session_id,
                provider="USGBC LEED Database",
                step="Searching LEED certification databases",
                fetch=lambda: search_provider.search_records(
                    f"{query} certification",
                    kind=RecordKind.CERTIFICATION_DATA,
                    include_domains=CERTIFICATION_DOMAINS,
                ),
            )

    def general_info(self) -> ResearchRecord:
        return ResearchRecord(
            title="Sustainability in Commercial Real Estate",
            authors="CRE Research Team",
            date=web_utils.display_date(),
            source="Internal Analysis",
            link="#",
            summary=(
                "Sustainability has become a core value driver in commercial real estate. "
                "Green certifications such as LEED and ENERGY STAR are associated with rent "
                "and occupancy premiums, energy efficiency retrofits lower operating costs, "
                "and investors increasingly screen assets for carbon emissions and climate risk."
            ),
            kind=RecordKind.MARKET_REPORT,
        )
