from __future__ import annotations

from app.adapters.base import BaseAdapter
from app.models.research import AdapterResult, CategoryLabel, RecordKind, ResearchRecord
from app.tools import search_provider, web_utils

LISTING_DOMAINS = ["loopnet.com", "crexi.com", "zillow.com"]
ANALYTICS_DOMAINS = ["costar.com", "cbre.com", "jll.com", "cushmanwakefield.com"]


class LeasingAdapter(BaseAdapter):
    """Property listings first, then brokerage market analytics."""

    name = "leasing"
    topic = CategoryLabel.LEASING
    dispatch_step = "Analyzing leasing market information"
    dispatch_source = "Leasing databases"
    start_step = "Searching for leasing market information"
    start_source = "Leasing Service"

    async def collect(self, query: str, session_id: str | None, result: AdapterResult) -> None:
        if not search_provider.is_configured():
            return

        await self.call_provider(
            result,
            session_id,
            provider="Property listings",
            step="Searching commercial property listings",
            fetch=lambda: search_provider.search_records(
                f"{query} commercial lease",
                kind=RecordKind.MARKET_REPORT,
                include_domains=LISTING_DOMAINS,
            ),
        )

        if self.needs_more(result):
            await self.call_provider(
                result,
                session_id,
                provider="Market analytics",
                step="Searching leasing market analytics reports",
                fetch=lambda: search_provider.search_records(
                    f"{query} leasing report",
                    kind=RecordKind.MARKET_REPORT,
                    include_domains=ANALYTICS_DOMAINS,
                ),
            )

    def general_info(self) -> ResearchRecord:
        return ResearchRecord(
            title="Current Commercial Real Estate Leasing Trends",
            authors="CRE Research Team",
            date=web_utils.display_date(),
            source="Internal Analysis",
            link="#",
            summary=(
                "Commercial real estate leasing continues to evolve with several key trends: "
                "flexible lease terms are becoming more common, especially for smaller tenants; "
                "sustainability features now command premium rates; and technology-enabled "
                "spaces with strong connectivity infrastructure are in higher demand across "
                "all market segments."
            ),
            kind=RecordKind.MARKET_REPORT,
        )
