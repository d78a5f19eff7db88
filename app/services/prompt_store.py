"""Prompt catalog backed by app/prompts/prompts.json.

Entries are addressed by dotted keys (``synthesis.user_prompt``) and rendered
with ``string.Template`` so that ``${name}`` placeholders are filled from
keyword arguments. The file is re-read when its mtime changes.
"""
from __future__ import annotations

import json
from pathlib import Path
from string import Template
from typing import Any

PROMPTS_PATH = Path(__file__).resolve().parents[1] / "prompts" / "prompts.json"

_cache: dict[str, Any] = {"mtime_ns": None, "catalog": None}


def _catalog() -> dict[str, Any]:
    mtime_ns = PROMPTS_PATH.stat().st_mtime_ns
    if _cache["catalog"] is None or _cache["mtime_ns"] != mtime_ns:
        payload = json.loads(PROMPTS_PATH.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Prompt catalog at {PROMPTS_PATH} must be a JSON object")
        _cache.update(mtime_ns=mtime_ns, catalog=payload)
    return _cache["catalog"]


def get_prompt(key: str) -> str:
    """Return the raw template text stored under a dotted key."""
    node: Any = _catalog()
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            raise KeyError(f"Prompt key not found: {key}")
        node = node[part]
    if not isinstance(node, str):
        raise TypeError(f"Prompt key must map to a string: {key}")
    return node


def render_prompt(key: str, **values: Any) -> str:
    template = Template(get_prompt(key))
    try:
        return template.substitute(**values)
    except KeyError as exc:
        raise KeyError(f"Missing template value {exc.args[0]!r} for prompt {key!r}") from exc


def clear_prompt_cache() -> None:
    _cache.update(mtime_ns=None, catalog=None)
