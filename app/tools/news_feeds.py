"""CRE news from syndicated RSS/Atom feeds, ranked by query relevance."""
from __future__ import annotations

from datetime import datetime
from typing import Any

import feedparser
import httpx

from app.config import settings
from app.models.research import RecordKind, ResearchRecord
from app.services import logger as log_service
from app.tools import web_utils

TOP_ITEMS_PER_FEED = 2
DOMAIN_PHRASES = ("commercial real estate", "cre")
DOMAIN_BONUS = 2


def score_relevance(query_terms: list[str], title: str, description: str) -> int:
    """One point per query term found in the text, plus a bonus for CRE phrases."""
    text = f"{title} {description}".lower()
    score = sum(1 for term in query_terms if term and term in text)
    if any(phrase in text for phrase in DOMAIN_PHRASES):
        score += DOMAIN_BONUS
    return score


def _entry_date(entry: Any) -> str:
    for field in ("published_parsed", "updated_parsed"):
        parsed = entry.get(field)
        if parsed:
            return web_utils.display_date(datetime(*parsed[:6]))
    return web_utils.display_date()


def rank_entries(
    entries: list[Any], query: str, feed: dict[str, str]
) -> list[ResearchRecord]:
    """Score, sort and keep the top entries of one parsed feed."""
    query_terms = query.lower().split(" ")
    scored: list[tuple[int, Any]] = []
    for entry in entries:
        title = entry.get("title") or ""
        description = entry.get("description") or entry.get("summary") or ""
        score = score_relevance(query_terms, title, description)
        if score > 0:
            scored.append((score, entry))

    scored.sort(key=lambda pair: pair[0], reverse=True)

    records: list[ResearchRecord] = []
    for _, entry in scored[:TOP_ITEMS_PER_FEED]:
        description = entry.get("description") or entry.get("summary") or ""
        authors = entry.get("author") or feed["name"]
        link = entry.get("link")
        records.append(
            ResearchRecord(
                title=entry.get("title") or "",
                authors=authors if isinstance(authors, str) else "News Staff",
                date=_entry_date(entry),
                source=feed["source"],
                link=link if isinstance(link, str) and link else "#",
                summary=web_utils.strip_html(description) or "No description available",
                kind=RecordKind.NEWS_ARTICLE,
            )
        )
    return records


async def _fetch_feed(client: httpx.AsyncClient, feed: dict[str, str]) -> list[Any]:
    response = await client.get(feed["url"])
    response.raise_for_status()
    parsed = feedparser.parse(response.text)
    if parsed.bozo and not parsed.entries:
        raise ValueError(f"Unparseable feed: {parsed.get('bozo_exception')}")
    return list(parsed.entries)


async def search(query: str, feeds: list[dict[str, str]] | None = None) -> list[ResearchRecord]:
    """Search every configured feed; a failing feed is skipped."""
    results: list[ResearchRecord] = []
    async with httpx.AsyncClient(
        timeout=settings.feed_timeout_seconds,
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    ) as client:
        for feed in feeds if feeds is not None else settings.news_feed_list:
            try:
                entries = await _fetch_feed(client, feed)
            except Exception as e:
                log_service.log_provider_call(
                    adapter="market",
                    provider=f"feed:{feed['source']}",
                    status="failed",
                    error=str(e),
                )
                continue
            results.extend(rank_entries(entries, query, feed))
    return results
