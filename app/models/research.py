from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RecordKind(str, Enum):
    ACADEMIC_PAPER = "academic_paper"
    MARKET_REPORT = "market_report"
    WEB_CONTENT = "web_content"
    CERTIFICATION_DATA = "certification_data"
    NEWS_ARTICLE = "news_article"
    ECONOMIC_DATA = "economic_data"


class CategoryLabel(str, Enum):
    SUSTAINABILITY = "sustainability"
    LEASING = "leasing"
    MARKET = "market"
    GENERAL = "general"


@dataclass
class ResearchRecord:
    """A normalized unit of evidence returned by a source adapter."""

    title: str
    authors: str
    date: str
    source: str
    link: str
    summary: str
    kind: RecordKind

    def citation(self) -> dict[str, str]:
        return {
            "title": self.title,
            "authors": self.authors,
            "source": self.source,
            "link": self.link,
            "date": self.date,
        }

    def to_dict(self) -> dict[str, Any]:
        return {**self.citation(), "summary": self.summary, "type": self.kind.value}


@dataclass
class DocumentContext:
    """Shape produced by the document analyzer from extracted text."""

    summary: str
    topics: list[str] = field(default_factory=list)
    word_count: int = 0


@dataclass
class AdapterResult:
    """Records from one adapter plus the provider failures it absorbed."""

    adapter: str
    records: list[ResearchRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "degraded" if self.warnings else "ok"


@dataclass
class SynthesizedResponse:
    response: str
    citations: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"response": self.response, "citations": self.citations}
