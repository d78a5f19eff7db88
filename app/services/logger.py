"""Loguru setup plus structured helpers for research, provider and model events.

Each helper emits one line of the form ``KIND: {payload}`` so the log file can
be grepped by kind (``PROVIDER_CALL_FAILED``, ``LLM_CALL`` ...).
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from app.config import settings

LOG_DIR = Path(settings.log_dir)

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "fastapi",
    "sse_starlette.sse",
    "httpx",
    "httpcore",
    "hpack",
    "urllib3",
    "openai._base_client",
    "anthropic._base_client",
    "asyncio",
)


def configure() -> None:
    """Console at APP_LOG_LEVEL, daily-rotated DEBUG file under LOG_DIR."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=settings.app_log_level.upper(), colorize=True)
    logger.add(
        LOG_DIR / "cre_research_{time:YYYY-MM-DD}.log",
        format=FILE_FORMAT,
        level="DEBUG",
        rotation="00:00",
        retention="7 days",
        compression="zip",
    )
    # stdlib loggers of framework and network libraries
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(settings.noisy_log_level.upper())


configure()


def _emit(kind: str, level: str, **payload: Any) -> None:
    record = {"timestamp": datetime.now(timezone.utc).isoformat(), **payload}
    logger.log(level, f"{kind}: {record}")


def log_llm_call(
    provider: str,
    model: str,
    caller: str,
    duration_ms: int = 0,
    status: str = "success",
    error: Optional[str] = None,
) -> None:
    """Log one synthesis model call with its latency."""
    kind, level = ("LLM_CALL_FAILED", "ERROR") if error else ("LLM_CALL", "INFO")
    _emit(kind, level, provider=provider, model=model, caller=caller,
          duration_ms=duration_ms, status=status, error=error)


def log_provider_call(
    adapter: str,
    provider: str,
    status: str,
    results: int = 0,
    error: Optional[str] = None,
) -> None:
    """Failed provider calls are warnings; successful ones only show up at DEBUG."""
    kind, level = ("PROVIDER_CALL_FAILED", "WARNING") if error else ("PROVIDER_CALL", "DEBUG")
    _emit(kind, level, adapter=adapter, provider=provider, status=status, results=results, error=error)


def log_research_step(
    session_id: str,
    step_type: str,
    status: str,
    data: Optional[dict] = None,
) -> None:
    _emit("RESEARCH_STEP", "INFO", session_id=session_id, step_type=step_type, status=status, data=data)


def log_event(event_type: str, message: str, **kwargs: Any) -> None:
    _emit("EVENT", "INFO", event_type=event_type, message=message, **kwargs)
