"""Google Trends interest for a query framed as a CRE topic."""
from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

from pytrends.request import TrendReq

from app.config import settings
from app.models.research import RecordKind, ResearchRecord
from app.tools import web_utils

TIMEFRAME = "today 5-y"
GEO = "US"


def trend_direction(values: list[float]) -> str | None:
    """Compare the mean of the last 12 points against the 12 before them."""
    if not values:
        return None
    recent = values[-12:]
    older = values[-24:-12]
    if not older:
        return "stable"
    recent_avg = sum(recent) / len(recent)
    older_avg = sum(older) / len(older)
    if older_avg == 0:
        return "stable"
    change = (recent_avg - older_avg) / older_avg * 100
    if change > 15:
        return "strongly increasing"
    if change > 5:
        return "moderately increasing"
    if change < -15:
        return "strongly decreasing"
    if change < -5:
        return "moderately decreasing"
    return "stable"


def _fetch(keyword: str) -> tuple[list[float], list[str]]:
    """Blocking pytrends calls; run in a worker thread."""
    timeout = settings.provider_timeout_seconds
    client = TrendReq(hl="en-US", tz=360, timeout=(timeout, timeout))
    client.build_payload([keyword], timeframe=TIMEFRAME, geo=GEO)

    interest = client.interest_over_time()
    values: list[float] = []
    if interest is not None and not interest.empty and keyword in interest:
        values = [float(v) for v in interest[keyword].tolist()]

    related: list[str] = []
    try:
        ranked: dict[str, Any] = client.related_queries() or {}
    except (IndexError, KeyError):
        # pytrends raises on an empty related-queries widget
        ranked = {}
    top = (ranked.get(keyword) or {}).get("top")
    if top is not None and not top.empty:
        related = [str(q) for q in top["query"].tolist()[:5]]

    return values, related


def build_record(query: str, values: list[float], related: list[str]) -> ResearchRecord | None:
    enhanced_query = f"{query} commercial real estate"
    direction = trend_direction(values)
    if direction is None and not related:
        return None

    summary = "Analysis of Google Trends data shows "
    if direction is not None:
        summary += f'that interest in "{enhanced_query}" has been {direction} over the past year. '
    if related:
        summary += "Top related search queries include: "
        summary += ", ".join(f'"{q}"' for q in related) + ". "
    summary += (
        "This trend data provides insight into current market interest and potential emerging "
        f'topics in the commercial real estate sector related to "{query}".'
    )

    return ResearchRecord(
        title=f"Google Trends Analysis: {query} in Commercial Real Estate",
        authors="Google Trends",
        date=web_utils.display_date(),
        source="Google Trends",
        link=f"https://trends.google.com/trends/explore?q={quote(enhanced_query)}&geo={GEO}",
        summary=summary,
        kind=RecordKind.MARKET_REPORT,
    )


async def search(query: str) -> list[ResearchRecord]:
    values, related = await asyncio.to_thread(_fetch, f"{query} commercial real estate")
    record = build_record(query, values, related)
    return [record] if record else []
