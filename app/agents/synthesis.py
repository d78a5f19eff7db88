from __future__ import annotations

import time

from app.errors import ProviderUnavailable
from app.llm_client import ModelProvider, get_provider
from app.models.research import DocumentContext, ResearchRecord, SynthesizedResponse
from app.services import logger as log_service
from app.services.prompt_store import get_prompt, render_prompt
from app.services.session_store import SessionStore, get_session_store


def format_records(records: list[ResearchRecord]) -> str:
    return "\n".join(
        render_prompt(
            "synthesis.record_block",
            index=i,
            title=r.title,
            authors=r.authors,
            date=r.date,
            source=r.source,
            link=r.link,
            summary=r.summary,
        )
        for i, r in enumerate(records, 1)
    )


def format_document(document: DocumentContext | None) -> str:
    if document is None:
        return ""
    return render_prompt(
        "synthesis.document_block",
        summary=document.summary,
        topics=", ".join(document.topics) if document.topics else "None identified",
        word_count=document.word_count or "N/A",
    )


def build_messages(
    query: str,
    records: list[ResearchRecord],
    document_context: DocumentContext | None = None,
) -> list[dict[str, str]]:
    """System prompt plus one user message carrying the numbered evidence."""
    user_message = render_prompt(
        "synthesis.user_prompt",
        query=query,
        research=format_records(records),
        document=format_document(document_context),
    )
    return [
        {"role": "system", "content": get_prompt("synthesis.system_prompt")},
        {"role": "user", "content": user_message},
    ]


class SynthesisPipeline:
    """Turns gathered records into a cited markdown answer.

    Citation ``[n]`` in the response corresponds to ``citations[n-1]``. The
    document context is rendered into the prompt but never cited.
    """

    name = "synthesis"

    def __init__(
        self,
        provider: ModelProvider | None = None,
        session_store: SessionStore | None = None,
    ):
        self._provider = provider
        self.session_store = session_store or get_session_store()

    @property
    def provider(self) -> ModelProvider:
        if self._provider is None:
            self._provider = get_provider()
        return self._provider

    def _log(self, session_id: str | None, step: str, source: str | None = None) -> None:
        if session_id:
            self.session_store.log(session_id, step, source)

    async def synthesize(
        self,
        query: str,
        records: list[ResearchRecord],
        document_context: DocumentContext | None = None,
        session_id: str | None = None,
    ) -> SynthesizedResponse:
        self._log(session_id, "Summarizing research findings", "AI Service")
        self._log(session_id, f"Found {len(records)} relevant sources for research", "AI Service")

        messages = build_messages(query, records, document_context)

        try:
            provider = self.provider
        except ProviderUnavailable as e:
            self._log(session_id, f"Error in AI processing: {e}", "AI Service")
            log_service.log_llm_call(e.provider, "", self.name, status="error", error=e.reason)
            raise

        self._log(session_id, f"Querying AI model ({provider.name})", "AI Service")
        t0 = time.monotonic()
        try:
            response = await provider.complete(messages)
        except ProviderUnavailable as e:
            elapsed_ms = int((time.monotonic() - t0) * 1000)
            log_service.log_llm_call(
                provider.name, provider.model, self.name, elapsed_ms, status="error", error=e.reason
            )
            self._log(session_id, f"Error in AI processing: {e}", "AI Service")
            raise
        elapsed_ms = int((time.monotonic() - t0) * 1000)
        log_service.log_llm_call(provider.name, provider.model, self.name, elapsed_ms)

        self._log(session_id, "AI analysis complete, formatting response", "AI Service")
        return SynthesizedResponse(response=response, citations=[r.citation() for r in records])
