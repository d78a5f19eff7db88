"""Request-level errors raised by the research core."""
from __future__ import annotations


class ResearchError(Exception):
    """Base class for errors that reach the caller of a research request."""

    status_code: int = 500


class InvalidRequest(ResearchError):
    """The query or session id is missing."""

    status_code = 400


class ProviderUnavailable(ResearchError):
    """A provider credential is missing or the provider call failed.

    Source adapters recover from this locally. For the synthesis model it is
    fatal to the request.
    """

    status_code = 502

    def __init__(self, provider: str, reason: str):
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason
