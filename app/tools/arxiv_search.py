from __future__ import annotations

from datetime import datetime
from urllib.parse import quote

import feedparser
import httpx

from app.config import settings
from app.models.research import RecordKind, ResearchRecord
from app.tools import web_utils

ARXIV_API_URL = "http://export.arxiv.org/api/query"
SUSTAINABILITY_TERMS = '(sustainability OR "green building" OR "energy efficiency")'
CATEGORY_FILTERS = "cat:physics.geo-ph OR cat:econ.GN OR cat:q-fin.GN"


def build_search_url(query: str, max_results: int = 5) -> str:
    search_terms = quote(f"{query} AND {SUSTAINABILITY_TERMS}", safe="")
    categories = quote(CATEGORY_FILTERS, safe="")
    return (
        f"{ARXIV_API_URL}?search_query={search_terms}+AND+({categories})"
        f"&max_results={max_results}&sortBy=relevance"
    )


def _entry_link(entry) -> str:
    for link in entry.get("links", []) or []:
        if link.get("title") == "pdf" and link.get("href"):
            return link["href"]
    return entry.get("id") or entry.get("link") or "#"


def _entry_date(entry) -> str:
    parsed = entry.get("published_parsed")
    if parsed:
        return web_utils.display_date(datetime(*parsed[:6]))
    return web_utils.display_date()


def parse_feed(payload: str) -> list[ResearchRecord]:
    """Map an arXiv Atom response onto academic-paper records."""
    feed = feedparser.parse(payload)
    records: list[ResearchRecord] = []
    for entry in feed.entries:
        title = " ".join((entry.get("title") or "").split())
        if not title:
            continue
        names = [a.get("name", "").strip() for a in entry.get("authors", []) or []]
        names = [n for n in names if n]
        summary = " ".join((entry.get("summary") or "").split())
        records.append(
            ResearchRecord(
                title=title,
                authors=", ".join(names) if names else "Unknown Author",
                date=_entry_date(entry),
                source="arXiv",
                link=_entry_link(entry),
                summary=summary or "No summary available",
                kind=RecordKind.ACADEMIC_PAPER,
            )
        )
    return records


async def search(query: str, *, max_results: int = 5) -> list[ResearchRecord]:
    """Search arXiv for sustainability-adjacent papers matching the query."""
    async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
        response = await client.get(build_search_url(query, max_results))
        response.raise_for_status()
        return parse_feed(response.text)
