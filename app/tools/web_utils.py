from __future__ import annotations

import re
from datetime import date, datetime
from urllib.parse import urlparse

from bs4 import BeautifulSoup


def is_valid_url(url: str) -> bool:
    """Basic URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except Exception:
        return False


def clean_content(text: str, max_length: int = 8000) -> str:
    """Collapse whitespace and trim to max length."""
    text = re.sub(r"\s+", " ", text or "").strip()
    if len(text) > max_length:
        text = text[: max_length - 3] + "..."
    return text


def strip_html(markup: str) -> str:
    """Drop tags from feed descriptions and search snippets."""
    if not markup or "<" not in markup:
        return (markup or "").strip()
    return BeautifulSoup(markup, "html.parser").get_text(" ", strip=True)


def extract_domain(url: str) -> str:
    """Extract domain from URL for display."""
    try:
        return urlparse(url).netloc or url
    except Exception:
        return url


def display_date(value: date | datetime | None = None) -> str:
    """Render a date the way records show it, e.g. ``3/7/2024``."""
    value = value or datetime.now()
    return f"{value.month}/{value.day}/{value.year}"
