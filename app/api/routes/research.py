from __future__ import annotations

import asyncio
import json as _json
import time

from fastapi import APIRouter, Depends, HTTPException
from sse_starlette.sse import EventSourceResponse

from app.agents.orchestrator import ResearchOrchestrator
from app.api import deps
from app.config import settings
from app.errors import ResearchError
from app.models.schemas import ResearchRequest, ResearchResponse, StatusResponse
from app.services import logger as log_service
from app.services.session_store import SessionStore

router = APIRouter(prefix="/api/query", tags=["research"])

STREAM_POLL_SECONDS = 0.5


@router.post("/research", response_model=ResearchResponse)
async def research(
    request: ResearchRequest,
    orchestrator: ResearchOrchestrator = Depends(deps.orchestrator),
):
    """Run one research request and return the cited answer."""
    document = request.document_context.to_context() if request.document_context else None
    try:
        result = await orchestrator.run_research(request.query, request.session_id, document)
    except ResearchError as e:
        log_service.log_event(
            event_type="research_failed",
            message=str(e),
            session_id=request.session_id,
            status_code=e.status_code,
        )
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
    except Exception as e:
        log_service.logger.exception("Unhandled error processing research query")
        raise HTTPException(
            status_code=500, detail="An error occurred while processing your query"
        ) from e
    return result.to_dict()


@router.get("/status/{session_id}", response_model=StatusResponse)
async def status(session_id: str, store: SessionStore = Depends(deps.session_store)):
    """Progress log for a session. Unknown ids report no steps and not complete."""
    return store.get(session_id).to_dict(session_id)


@router.get("/status/{session_id}/stream")
async def stream_status(session_id: str, store: SessionStore = Depends(deps.session_store)):
    """SSE stream of progress events, closed once the session completes."""
    idle_limit = max(float(settings.adapter_timeout_seconds) * 4, 60.0)

    async def event_generator():
        sent = 0
        last_activity = time.monotonic()
        while True:
            progress = store.get(session_id)
            for event in progress.events[sent:]:
                yield {"event": "progress", "data": _json.dumps(event.to_dict())}
            if len(progress.events) > sent:
                sent = len(progress.events)
                last_activity = time.monotonic()

            if progress.complete:
                yield {"event": "complete", "data": _json.dumps(progress.to_dict(session_id))}
                return
            if time.monotonic() - last_activity > idle_limit:
                yield {"event": "timeout", "data": _json.dumps({"sessionId": session_id})}
                return
            await asyncio.sleep(STREAM_POLL_SECONDS)

    return EventSourceResponse(event_generator())
