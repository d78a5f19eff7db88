"""Model providers used by the synthesis pipeline.

Every provider exposes ``complete(messages) -> str`` where ``messages`` is a
list of ``{"role", "content"}`` dicts whose first entry may be the system
prompt. Missing credentials and failed calls surface as ProviderUnavailable.
"""
from __future__ import annotations

import re
from typing import Any, Protocol

from app.config import settings
from app.errors import ProviderUnavailable
from app.services.prompt_store import render_prompt

SUPPORTED_PROVIDERS = ("openai", "anthropic", "local")

_RECORD_PATTERN = re.compile(
    r"^Source \[(?P<index>\d+)\]: (?P<title>.*)\n"
    r"Authors: (?P<authors>.*)\n"
    r"Date: (?P<date>.*)\n"
    r"Source Type: (?P<source>.*)\n"
    r"URL: (?P<link>.*)$",
    re.MULTILINE,
)
_QUERY_PATTERN = re.compile(r"# Research Query\n(?P<query>.*?)\n\s*\n# Research Results", re.DOTALL)


class ModelProvider(Protocol):
    name: str
    model: str

    async def complete(self, messages: list[dict[str, str]]) -> str: ...


def _split_system(messages: list[dict[str, str]]) -> tuple[str, list[dict[str, str]]]:
    system_parts = [m["content"] for m in messages if m["role"] == "system"]
    rest = [m for m in messages if m["role"] != "system"]
    return "\n\n".join(system_parts), rest


class OpenAIProvider:
    """Chat completions against OpenAI or any OpenAI-compatible gateway."""

    name = "openai"

    def __init__(self, api_key: str | None = None, base_url: str | None = None, model: str | None = None):
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        if not self.api_key:
            raise ProviderUnavailable(self.name, "OPENAI_API_KEY is not configured")
        self.base_url = (base_url or settings.openai_base_url).strip() or "https://api.openai.com/v1"
        self.model = model or settings.openai_model
        self._client: Any | None = None

    def client(self) -> Any:
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(
                api_key=self.api_key, base_url=self.base_url, timeout=settings.llm_timeout_seconds
            )
        return self._client

    async def complete(self, messages: list[dict[str, str]]) -> str:
        try:
            response = await self.client().chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
            )
            content = response.choices[0].message.content if response.choices else None
        except Exception as e:
            raise ProviderUnavailable(self.name, str(e)) from e
        if not content:
            raise ProviderUnavailable(self.name, "empty completion")
        return content


class AnthropicProvider:
    """Anthropic messages API. The system prompt goes in the ``system`` parameter."""

    name = "anthropic"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self.api_key = api_key if api_key is not None else settings.anthropic_api_key
        if not self.api_key:
            raise ProviderUnavailable(self.name, "ANTHROPIC_API_KEY is not configured")
        self.model = model or settings.anthropic_model
        self._client: Any | None = None

    def client(self) -> Any:
        if self._client is None:
            from anthropic import AsyncAnthropic

            self._client = AsyncAnthropic(api_key=self.api_key, timeout=settings.llm_timeout_seconds)
        return self._client

    async def complete(self, messages: list[dict[str, str]]) -> str:
        system, conversation = _split_system(messages)
        try:
            response = await self.client().messages.create(
                model=self.model,
                system=system,
                messages=conversation,
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
            )
            text = "".join(
                getattr(block, "text", "") for block in response.content or [] if getattr(block, "type", "") == "text"
            )
        except Exception as e:
            raise ProviderUnavailable(self.name, str(e)) from e
        if not text:
            raise ProviderUnavailable(self.name, "empty completion")
        return text


class LocalProvider:
    """Deterministic markdown stub for development without API keys."""

    name = "local"
    model = "local-stub"

    async def complete(self, messages: list[dict[str, str]]) -> str:
        user_message = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")
        match = _QUERY_PATTERN.search(user_message)
        query = match.group("query").strip() if match else user_message.strip()[:200]

        records = [m.groupdict() for m in _RECORD_PATTERN.finditer(user_message)]
        if records:
            findings = "\n".join(f"- {r['title']} [{r['index']}]" for r in records)
            sources = "\n".join(
                f"{r['index']}. {r['authors']}, \"{r['title']}\", {r['source']}, {r['date']}, "
                f"[{r['link']}]({r['link']})"
                for r in records
            )
        else:
            findings = "- No research sources were available for this query."
            sources = "No sources available."

        return render_prompt(
            "synthesis.local_response",
            query=query,
            count=len(records),
            findings=findings,
            sources=sources,
        )


def get_provider(name: str | None = None) -> ModelProvider:
    """Build the provider named by ``name`` or ``settings.ai_provider``."""
    provider = (name or settings.ai_provider or "local").strip().lower()
    if provider == "openai":
        return OpenAIProvider()
    if provider == "anthropic":
        return AnthropicProvider()
    if provider == "local":
        return LocalProvider()
    raise ProviderUnavailable(provider, f"Unsupported AI provider. Expected one of {', '.join(SUPPORTED_PROVIDERS)}")
