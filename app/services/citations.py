"""Citation strings and the non-LLM research summary used by reports."""
from __future__ import annotations

from typing import Any, Mapping

from app.models.research import RecordKind, ResearchRecord
from app.tools.web_utils import display_date

NO_RESULTS_MESSAGE = (
    "I couldn't find any relevant information for your query. "
    "Would you like to try a different search term or approach?"
)


def _fields(item: ResearchRecord | Mapping[str, Any]) -> dict[str, str]:
    if isinstance(item, ResearchRecord):
        return {**item.citation(), "type": item.kind.value}
    return {key: str(item.get(key) or "") for key in ("title", "authors", "source", "link", "date", "type")}


def format_citation(item: ResearchRecord | Mapping[str, Any], index: int) -> str:
    c = _fields(item)
    prefix = f"[{index}] "
    kind = c["type"]
    if kind == RecordKind.ACADEMIC_PAPER.value:
        return f'{prefix}{c["authors"]} ({c["date"]}). "{c["title"]}". {c["source"]}. Available at: {c["link"]}'
    if kind in (RecordKind.MARKET_REPORT.value, RecordKind.CERTIFICATION_DATA.value):
        return f'{prefix}{c["source"]} ({c["date"]}). "{c["title"]}". Available at: {c["link"]}'
    if kind == RecordKind.WEB_CONTENT.value:
        return (
            f'{prefix}{c["source"]} ({c["date"]}). "{c["title"]}". '
            f'Retrieved on {display_date()} from {c["link"]}'
        )
    authors = f'{c["authors"]}. ' if c["authors"] else ""
    return f'{prefix}{authors}"{c["title"]}". {c["source"]}. {c["date"]}. {c["link"]}'


def format_citations(items: list[ResearchRecord] | list[Mapping[str, Any]]) -> list[str]:
    return [format_citation(item, i) for i, item in enumerate(items, 1)]


def format_results(records: list[ResearchRecord]) -> dict[str, Any]:
    """Plain numbered summary of records followed by a references section."""
    if not records:
        return {"response": NO_RESULTS_MESSAGE, "citations": []}

    parts = ["Based on my research, I found the following information:\n\n"]
    for i, record in enumerate(records, 1):
        parts.append(f"{i}. **{record.title}**\n")
        if record.summary:
            parts.append(f"{record.summary}\n\n")
        parts.append(f"[{i}]\n\n")

    citations = format_citations(records)
    parts.append("\n**References:**\n")
    parts.extend(f"{c}\n" for c in citations)
    return {"response": "".join(parts), "citations": citations}


def build_report_payload(
    response: str,
    citations: list[Mapping[str, Any]],
    document_analysis: str | None = None,
) -> dict[str, Any]:
    """Shape consumed by the report renderer."""
    return {
        "queryResults": response,
        "documentAnalysis": document_analysis,
        "citations": format_citations(citations),
    }
