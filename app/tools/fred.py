"""Federal Reserve Economic Data (FRED) indicators for CRE queries."""
from __future__ import annotations

from datetime import datetime

import httpx

from app.config import settings
from app.errors import ProviderUnavailable
from app.models.research import RecordKind, ResearchRecord
from app.tools import web_utils

FRED_SERIES_URL = "https://api.stlouisfed.org/fred/series"
FRED_OBSERVATIONS_URL = "https://api.stlouisfed.org/fred/series/observations"
OBSERVATION_LIMIT = 12

CRE_INDICATORS: dict[str, str] = {
    "office": "OFFVACUSQ176N",
    "retail": "RETAILIRSA",
    "industrial": "INDPRO",
    "construction": "TTLCONS",
    "mortgage": "MORTGAGE30US",
    "commercial mortgage": "DRTSCIS",
    "property price": "BOGZ1FL075035503Q",
}
DEFAULT_INDICATORS: tuple[str, ...] = ("office", "construction")


def match_indicators(query: str) -> list[tuple[str, str]]:
    """Return ``(keyword, series_id)`` pairs whose keyword occurs in the query."""
    lowered = (query or "").lower()
    matched = [(k, s) for k, s in CRE_INDICATORS.items() if k in lowered]
    if matched:
        return matched
    return [(k, CRE_INDICATORS[k]) for k in DEFAULT_INDICATORS]


def _as_float(value: object) -> float | None:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def trend_label(latest: object, oldest: object) -> str:
    """Coarse direction from the percent change between two observations."""
    latest_value = _as_float(latest)
    oldest_value = _as_float(oldest)
    if latest_value is None or oldest_value is None or oldest_value == 0:
        return "stable"
    change = (latest_value - oldest_value) / oldest_value * 100
    if change > 10:
        return "significantly increased"
    if change > 2:
        return "increased"
    if change < -10:
        return "significantly decreased"
    if change < -2:
        return "decreased"
    return "stable"


def _observation_date(raw: str) -> str:
    try:
        return web_utils.display_date(datetime.strptime(raw, "%Y-%m-%d"))
    except (TypeError, ValueError):
        return raw or ""


async def _fetch_indicator(
    client: httpx.AsyncClient, keyword: str, series_id: str
) -> ResearchRecord | None:
    base_params = {
        "series_id": series_id,
        "api_key": settings.fred_api_key,
        "file_type": "json",
    }
    series_response = await client.get(FRED_SERIES_URL, params=base_params)
    series_response.raise_for_status()
    seriess = series_response.json().get("seriess") or []
    if not seriess:
        return None
    series = seriess[0]

    observations_response = await client.get(
        FRED_OBSERVATIONS_URL,
        params={**base_params, "sort_order": "desc", "limit": OBSERVATION_LIMIT},
    )
    observations_response.raise_for_status()
    observations = observations_response.json().get("observations") or []
    if not observations:
        return None

    trend = "stable"
    if len(observations) > 1:
        trend = trend_label(observations[0].get("value"), observations[-1].get("value"))

    title = series.get("title", series_id)
    latest = observations[0]
    summary = (
        f"{title} has {trend} to {latest.get('value')} as of "
        f"{_observation_date(latest.get('date', ''))}. "
        f"This indicator is relevant to commercial real estate {keyword} trends "
        "and provides insight into current market conditions."
    )
    return ResearchRecord(
        title=title,
        authors="Federal Reserve Economic Data (FRED)",
        date=web_utils.display_date(),
        source="FRED",
        link=f"https://fred.stlouisfed.org/series/{series_id}",
        summary=summary,
        kind=RecordKind.ECONOMIC_DATA,
    )


async def search(query: str) -> list[ResearchRecord]:
    if not settings.fred_api_key:
        raise ProviderUnavailable("fred", "FRED_API_KEY is not configured")

    records: list[ResearchRecord] = []
    async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
        for keyword, series_id in match_indicators(query):
            record = await _fetch_indicator(client, keyword, series_id)
            if record is not None:
                records.append(record)
    return records
