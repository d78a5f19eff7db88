from __future__ import annotations

from dataclasses import dataclass

import httpx

from app.config import settings
from app.errors import ProviderUnavailable
from app.models.research import RecordKind, ResearchRecord
from app.tools import web_utils

JINA_READER_URL = "https://r.jina.ai/"
SUMMARY_CHARS = 1200


@dataclass
class ScrapeResult:
    """Result from Jina AI web scraping."""
    url: str
    content: str
    title: str = ""


def _split_title(content: str) -> tuple[str, str]:
    """Jina Reader prefixes markdown output with ``Title: ...`` metadata."""
    title = ""
    body_lines: list[str] = []
    for line in content.splitlines():
        if not title and line.startswith("Title:"):
            title = line[len("Title:"):].strip()
            continue
        if line.startswith(("URL Source:", "Published Time:", "Markdown Content:")):
            continue
        body_lines.append(line)
    return title, "\n".join(body_lines)


async def scrape(url: str) -> ScrapeResult:
    """Scrape a URL using Jina AI Reader API.

    API: GET https://r.jina.ai/<url>
    Headers:
        - Authorization: Bearer <api_key>
        - X-Return-Format: markdown
    """
    if not settings.jina_api_key:
        raise ProviderUnavailable("jina", "JINA_API_KEY is not configured")

    headers = {
        "Authorization": f"Bearer {settings.jina_api_key}",
        "X-Return-Format": "markdown",
    }

    async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
        response = await client.get(f"{JINA_READER_URL}{url}", headers=headers)
        response.raise_for_status()
        title, body = _split_title(response.text)

    return ScrapeResult(url=url, content=body, title=title)


async def scrape_records(url: str | None = None) -> list[ResearchRecord]:
    """Scrape the configured CRE insights page into a web-content record."""
    target = url or settings.scrape_target_url
    if not target:
        return []
    result = await scrape(target)
    summary = web_utils.clean_content(result.content, SUMMARY_CHARS)
    if not summary:
        return []
    domain = web_utils.extract_domain(target)
    return [
        ResearchRecord(
            title=result.title or f"Commercial Real Estate Insights from {domain}",
            authors=domain,
            date=web_utils.display_date(),
            source=domain,
            link=target,
            summary=summary,
            kind=RecordKind.WEB_CONTENT,
        )
    ]
