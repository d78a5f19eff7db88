from __future__ import annotations

import httpx

from app.config import settings
from app.models.research import RecordKind, ResearchRecord
from app.tools import web_utils

WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
MAX_EXTRACT_CHARS = 1000


async def search(query: str) -> list[ResearchRecord]:
    """Return the intro of the best Wikipedia match for the query in a CRE context."""
    enhanced_query = f"{query} commercial real estate"

    async with httpx.AsyncClient(
        timeout=settings.provider_timeout_seconds,
        headers={"User-Agent": settings.user_agent},
    ) as client:
        search_response = await client.get(
            WIKIPEDIA_API_URL,
            params={
                "action": "query",
                "list": "search",
                "srsearch": enhanced_query,
                "format": "json",
                "srlimit": 3,
            },
        )
        search_response.raise_for_status()
        hits = search_response.json().get("query", {}).get("search", [])
        if not hits:
            return []

        page_id = hits[0].get("pageid")
        content_response = await client.get(
            WIKIPEDIA_API_URL,
            params={
                "action": "query",
                "prop": "extracts|info",
                "exintro": 1,
                "explaintext": 1,
                "inprop": "url",
                "pageids": page_id,
                "format": "json",
            },
        )
        content_response.raise_for_status()
        pages = content_response.json().get("query", {}).get("pages", {})

    page = pages.get(str(page_id)) or {}
    extract = page.get("extract")
    if not extract:
        return []

    return [
        ResearchRecord(
            title=page.get("title", ""),
            authors="Wikipedia Contributors",
            date=web_utils.display_date(),
            source="Wikipedia",
            link=page.get("fullurl") or f"https://en.wikipedia.org/?curid={page_id}",
            summary=web_utils.clean_content(extract, MAX_EXTRACT_CHARS),
            kind=RecordKind.WEB_CONTENT,
        )
    ]
