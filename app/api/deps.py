from __future__ import annotations

from app.agents.orchestrator import ResearchOrchestrator
from app.services.session_store import SessionStore, get_session_store

_orchestrator: ResearchOrchestrator | None = None


def session_store() -> SessionStore:
    return get_session_store()


def orchestrator() -> ResearchOrchestrator:
    """Process-wide orchestrator sharing the session store used by status routes."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = ResearchOrchestrator(session_store=get_session_store())
    return _orchestrator
