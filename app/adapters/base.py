from __future__ import annotations

from typing import Awaitable, Callable

from app.config import settings
from app.models.research import AdapterResult, CategoryLabel, ResearchRecord
from app.services import logger as log_service
from app.services.session_store import SessionStore, get_session_store

Fetch = Callable[[], Awaitable[list[ResearchRecord]]]


class BaseAdapter:
    """Wraps one topical cluster of data providers.

    Subclasses set the class attributes and implement `collect`, calling
    `call_provider` for each provider in priority order. `get_research` never
    raises: provider failures become warnings on the result, and an empty
    result is replaced by the adapter's canned `general_info` record.
    """

    name: str = "base"
    topic: CategoryLabel | None = None
    # Orchestrator-level event logged before the adapter is dispatched.
    dispatch_step: str = ""
    dispatch_source: str | None = None
    # Adapter-level "starting search" event.
    start_step: str = ""
    start_source: str | None = None

    def __init__(self, session_store: SessionStore | None = None, min_results: int | None = None):
        self.session_store = session_store or get_session_store()
        self.min_results = max(
            int(settings.adapter_min_results if min_results is None else min_results), 1
        )

    def log(self, session_id: str | None, step: str, source: str | None = None) -> None:
        if session_id:
            self.session_store.log(session_id, step, source)

    async def call_provider(
        self,
        result: AdapterResult,
        session_id: str | None,
        *,
        provider: str,
        step: str,
        fetch: Fetch,
    ) -> int:
        """Run one provider call, folding its records or its failure into `result`."""
        self.log(session_id, step, provider)
        try:
            records = await fetch()
        except Exception as e:
            warning = f"{provider} search failed: {e}"
            result.warnings.append(warning)
            self.log(session_id, warning, provider)
            log_service.log_provider_call(self.name, provider, "failed", error=str(e))
            return 0

        records = [r for r in records if r]
        log_service.log_provider_call(self.name, provider, "success", results=len(records))
        if records:
            result.records.extend(records)
            self.log(session_id, f"Found {len(records)} results", provider)
        return len(records)

    def needs_more(self, result: AdapterResult, threshold: int | None = None) -> bool:
        return len(result.records) < (threshold or self.min_results)

    async def collect(self, query: str, session_id: str | None, result: AdapterResult) -> None:
        raise NotImplementedError

    def general_info(self) -> ResearchRecord:
        raise NotImplementedError

    async def get_research(self, query: str, session_id: str | None = None) -> AdapterResult:
        result = AdapterResult(adapter=self.name)
        self.log(session_id, self.start_step, self.start_source)
        try:
            await self.collect(query, session_id, result)
            if not result.records:
                result.records.append(self.general_info())
                self.log(session_id, "Using general background information", self.start_source)
        except Exception as e:
            log_service.logger.exception(f"{self.name} adapter failed")
            message = f"Error in {self.name} research: {e}"
            self.log(session_id, message, self.start_source)
            return AdapterResult(adapter=self.name, warnings=[*result.warnings, message])
        return result
