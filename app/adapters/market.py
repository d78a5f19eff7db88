from __future__ import annotations

from app.adapters.base import BaseAdapter
from app.config import settings
from app.models.research import AdapterResult, CategoryLabel, RecordKind, ResearchRecord
from app.tools import fred, google_trends, news_feeds, web_utils

NEWS_THRESHOLD = 4
ECONOMIC_THRESHOLD = 5


class MarketAdapter(BaseAdapter):
    """Search trends, CRE news feeds and FRED economic indicators."""

    name = "market"
    topic = CategoryLabel.MARKET
    dispatch_step = "Retrieving market trend data"
    dispatch_source = "Market analytics providers"
    start_step = "Analyzing market trend information"
    start_source = "Market Service"

    async def collect(self, query: str, session_id: str | None, result: AdapterResult) -> None:
        await self.call_provider(
            result,
            session_id,
            provider="Google Trends",
            step="Analyzing search interest trends",
            fetch=lambda: google_trends.search(query),
        )

        if self.needs_more(result, NEWS_THRESHOLD):
            await self.call_provider(
                result,
                session_id,
                provider="CRE news feeds",
                step="Scanning commercial real estate news feeds",
                fetch=lambda: news_feeds.search(query),
            )

        if settings.fred_api_key and self.needs_more(result, ECONOMIC_THRESHOLD):
            await self.call_provider(
                result,
                session_id,
                provider="FRED",
                step="Retrieving economic indicators",
                fetch=lambda: fred.search(query),
            )

    def general_info(self) -> ResearchRecord:
        return ResearchRecord(
            title="Current Commercial Real Estate Market Overview",
            authors="CRE Market Analysis Team",
            date=web_utils.display_date(),
            source="Internal Analysis",
            link="#",
            summary=(
                "The commercial real estate market continues to adapt to post-pandemic "
                "realities with notable sector-specific trends. Industrial and logistics "
                "properties remain the strongest performers with record-low cap rates and "
                "continued rent growth. Multifamily remains resilient with strong demand in "
                "suburban and sunbelt markets. Office continues to face challenges with high "
                "vacancy rates but is seeing selective recovery in Class A properties and "
                "amenity-rich developments. Retail is witnessing a bifurcation with "
                "grocery-anchored and experiential retail outperforming traditional mall spaces."
            ),
            kind=RecordKind.MARKET_REPORT,
        )
