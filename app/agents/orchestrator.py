from __future__ import annotations

import asyncio
import time

from app.adapters.base import BaseAdapter
from app.adapters.fallback import FallbackAdapter
from app.adapters.leasing import LeasingAdapter
from app.adapters.market import MarketAdapter
from app.adapters.sustainability import SustainabilityAdapter
from app.agents.synthesis import SynthesisPipeline
from app.config import settings
from app.errors import InvalidRequest
from app.models.events import SessionProgress
from app.models.research import (
    AdapterResult,
    CategoryLabel,
    DocumentContext,
    ResearchRecord,
    SynthesizedResponse,
)
from app.services import categorizer
from app.services import logger as log_service
from app.services.session_store import SessionStore, get_session_store


class ResearchOrchestrator:
    """Categorizes a query, fans out to source adapters and synthesizes an answer.

    Topical adapters are kept in invocation order (sustainability, leasing,
    market); the fallback adapter always runs last. Adapter failures and
    timeouts degrade the evidence set but never fail the request. Only
    validation and synthesis errors reach the caller.
    """

    def __init__(
        self,
        session_store: SessionStore | None = None,
        adapters: list[BaseAdapter] | None = None,
        fallback: BaseAdapter | None = None,
        synthesis: SynthesisPipeline | None = None,
        adapter_timeout: float | None = None,
        tie_policy: str | None = None,
    ):
        self.session_store = session_store or get_session_store()
        self.adapters = adapters if adapters is not None else [
            SustainabilityAdapter(self.session_store),
            LeasingAdapter(self.session_store),
            MarketAdapter(self.session_store),
        ]
        self.fallback = fallback or FallbackAdapter(self.session_store)
        self.synthesis = synthesis or SynthesisPipeline(session_store=self.session_store)
        self.adapter_timeout = float(
            settings.adapter_timeout_seconds if adapter_timeout is None else adapter_timeout
        )
        self.tie_policy = (tie_policy or settings.category_tie_policy or "general").lower()

    def select_adapters(self, query: str, category: CategoryLabel) -> list[BaseAdapter]:
        """Topical adapters for a category, in invocation order."""
        if category != CategoryLabel.GENERAL:
            return [a for a in self.adapters if a.topic == category]

        if self.tie_policy == "union":
            leaders = categorizer.top_categories(categorizer.score_query(query))
            if len(leaders) > 1:
                return [a for a in self.adapters if a.topic in leaders]
        return list(self.adapters)

    async def _run_adapter(self, adapter: BaseAdapter, query: str, session_id: str) -> AdapterResult:
        try:
            return await asyncio.wait_for(adapter.get_research(query, session_id), timeout=self.adapter_timeout)
        except asyncio.TimeoutError:
            warning = f"{adapter.name} adapter timed out after {self.adapter_timeout:g}s"
            self.session_store.log(session_id, warning, adapter.start_source)
            log_service.log_provider_call(adapter.name, adapter.name, "timeout", error=warning)
            return AdapterResult(adapter=adapter.name, warnings=[warning])

    async def gather_research(self, query: str, session_id: str, adapters: list[BaseAdapter]) -> list[AdapterResult]:
        for adapter in adapters:
            self.session_store.log(session_id, adapter.dispatch_step, adapter.dispatch_source)

        outcomes = await asyncio.gather(
            *(self._run_adapter(a, query, session_id) for a in adapters),
            return_exceptions=True,
        )

        results: list[AdapterResult] = []
        for adapter, outcome in zip(adapters, outcomes):
            if isinstance(outcome, AdapterResult):
                results.append(outcome)
            elif isinstance(outcome, Exception):
                # get_research contains its own failures; this only guards against bugs.
                log_service.logger.opt(exception=outcome).error(f"{adapter.name} adapter raised")
                results.append(AdapterResult(adapter=adapter.name, warnings=[f"{adapter.name} adapter failed: {outcome}"]))
            else:
                raise outcome
        return results

    @staticmethod
    def flatten(results: list[AdapterResult]) -> list[ResearchRecord]:
        return [record for result in results for record in result.records if record]

    async def run_research(
        self,
        query: str | None,
        session_id: str | None,
        document_context: DocumentContext | None = None,
    ) -> SynthesizedResponse:
        if not query or not query.strip():
            raise InvalidRequest("Query is required")
        if not session_id or not session_id.strip():
            raise InvalidRequest("Session ID is required")
        query = query.strip()

        t0 = time.monotonic()
        store = self.session_store
        store.begin(session_id)
        log_service.log_event("research_started", f"Research started: {query[:100]}", session_id=session_id)

        try:
            store.log(session_id, "Starting research query categorization")
            category = categorizer.categorize(query)
            store.log(session_id, f"Query categorized as: {category.value}")
            log_service.log_research_step(session_id, "categorize", "completed", {"category": category.value})

            adapters = [*self.select_adapters(query, category), self.fallback]
            results = await self.gather_research(query, session_id, adapters)
            for result in results:
                if result.warnings:
                    log_service.log_research_step(
                        session_id, result.adapter, result.status, {"warnings": result.warnings}
                    )
            records = self.flatten(results)

            if document_context is not None:
                store.log(session_id, "Analyzing uploaded document context", "Document Analysis")

            store.log(session_id, "Processing research with AI analysis", "AI Service")
            response = await self.synthesis.synthesize(
                query, records, document_context=document_context, session_id=session_id
            )
        finally:
            store.complete(session_id)

        log_service.log_event(
            "research_completed",
            f"Research completed with {len(response.citations)} citations",
            session_id=session_id,
            category=category.value,
            runtime_ms=int((time.monotonic() - t0) * 1000),
        )
        return response

    def get_status(self, session_id: str) -> SessionProgress:
        return self.session_store.get(session_id)
