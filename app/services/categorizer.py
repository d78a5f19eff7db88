"""Keyword-overlap query categorization."""
from __future__ import annotations

from app.models.research import CategoryLabel

CATEGORY_KEYWORDS: dict[CategoryLabel, frozenset[str]] = {
    CategoryLabel.SUSTAINABILITY: frozenset(
        {
            "sustainability",
            "sustainable",
            "green",
            "eco",
            "environmental",
            "energy",
            "efficiency",
            "leed",
            "certification",
            "carbon",
            "footprint",
            "renewable",
            "solar",
            "climate",
            "emissions",
            "energy star",
            "net zero",
            "esg",
        }
    ),
    CategoryLabel.LEASING: frozenset(
        {
            "lease",
            "leasing",
            "rent",
            "rental",
            "tenant",
            "landlord",
            "occupancy",
            "vacancy",
            "square foot",
            "sq ft",
            "commercial space",
            "office space",
            "retail space",
            "industrial space",
            "warehouse",
            "contract",
            "agreement",
        }
    ),
    CategoryLabel.MARKET: frozenset(
        {
            "market",
            "trend",
            "analysis",
            "forecast",
            "outlook",
            "prediction",
            "projection",
            "growth",
            "decline",
            "demand",
            "supply",
            "investment",
            "cap rate",
            "yield",
            "return",
            "value",
            "price",
            "pricing",
            "economic",
            "appreciation",
            "office",
            "vacancy rate",
            "interest rate",
        }
    ),
}


def count_keyword_matches(query: str, keywords: frozenset[str]) -> int:
    """Count distinct keywords contained in an already lower-cased query."""
    return sum(1 for keyword in keywords if keyword in query)


def score_query(query: str) -> dict[CategoryLabel, int]:
    lowered = (query or "").lower()
    return {
        category: count_keyword_matches(lowered, keywords)
        for category, keywords in CATEGORY_KEYWORDS.items()
    }


def top_categories(scores: dict[CategoryLabel, int]) -> list[CategoryLabel]:
    """Return every category sharing the highest non-zero score."""
    best = max(scores.values(), default=0)
    if best <= 0:
        return []
    return [category for category, score in scores.items() if score == best]


def categorize(query: str) -> CategoryLabel:
    """Pick the category with the strictly highest score, else ``general``."""
    leaders = top_categories(score_query(query))
    if len(leaders) == 1:
        return leaders[0]
    return CategoryLabel.GENERAL
