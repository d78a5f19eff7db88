from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ProgressEvent:
    step: str
    source: str | None = None
    timestamp: str = field(default_factory=_utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"step": self.step, "timestamp": self.timestamp}
        if self.source:
            data["source"] = self.source
        return data


@dataclass
class SessionProgress:
    events: list[ProgressEvent] = field(default_factory=list)
    complete: bool = False

    def to_dict(self, session_id: str) -> dict[str, Any]:
        return {
            "sessionId": session_id,
            "steps": [e.to_dict() for e in self.events],
            "complete": self.complete,
        }
