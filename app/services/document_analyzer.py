from __future__ import annotations

import re
from dataclasses import dataclass, field

from app.models.research import DocumentContext

SUMMARY_CHARS = 500

TOPIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Sustainability": ("sustainability", "green", "energy efficiency", "environmental", "leed"),
    "Leasing": ("lease", "tenant", "landlord", "rental", "occupancy"),
    "Market Trends": ("market", "trend", "forecast", "growth", "investment"),
}


@dataclass
class DocumentAnalysis:
    summary: str
    word_count: int
    paragraph_count: int
    topics: list[str] = field(default_factory=list)

    def to_context(self) -> DocumentContext:
        return DocumentContext(summary=self.summary, topics=list(self.topics), word_count=self.word_count)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "wordCount": self.word_count,
            "paragraphCount": self.paragraph_count,
            "topics": self.topics,
        }


def extract_topics(text: str) -> list[str]:
    lowered = text.lower()
    return [topic for topic, keywords in TOPIC_KEYWORDS.items() if any(k in lowered for k in keywords)]


def analyze(text: str) -> DocumentAnalysis:
    """Heuristic analysis of already-extracted document text."""
    text = text or ""
    summary = text[:SUMMARY_CHARS]
    if len(text) > SUMMARY_CHARS:
        summary += "..."
    return DocumentAnalysis(
        summary=summary,
        word_count=len(text.split()),
        paragraph_count=len([p for p in re.split(r"\n\s*\n", text) if p.strip()]),
        topics=extract_topics(text),
    )
