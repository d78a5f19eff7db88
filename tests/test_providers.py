from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from app.config import settings
from app.errors import ProviderUnavailable
from app.models.research import RecordKind
from app.tools import (
    arxiv_search,
    brave_search,
    fred,
    google_trends,
    jina_scraper,
    news_feeds,
    search_provider,
    tavily_search,
    wikipedia_search,
)
from app.tools.tavily_search import SearchResult


class _FakeResponse:
    def __init__(self, payload: dict | None = None, text: str = "", status_code: int = 200):
        self._payload = payload or {}
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {self.status_code}",
                request=httpx.Request("GET", "https://example.com"),
                response=httpx.Response(self.status_code),
            )

    def json(self) -> dict:
        return self._payload


ARXIV_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>ArXiv Query</title>
  <entry>
    <id>http://arxiv.org/abs/2401.00001v1</id>
    <published>2024-01-05T10:00:00Z</published>
    <title>Green Building
      Certification and Rent Premiums</title>
    <summary>  We study LEED certified offices.  </summary>
    <author><name>Jane Doe</name></author>
    <author><name>John Roe</name></author>
    <link href="http://arxiv.org/abs/2401.00001v1" rel="alternate" type="text/html"/>
    <link title="pdf" href="http://arxiv.org/pdf/2401.00001v1" rel="related" type="application/pdf"/>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2401.00002v1</id>
    <published>2024-02-01T10:00:00Z</published>
    <title>Energy Use in Warehouses</title>
    <link href="http://arxiv.org/abs/2401.00002v1" rel="alternate" type="text/html"/>
  </entry>
</feed>
"""


class TestArxiv:
    def test_build_search_url_adds_sustainability_terms_and_categories(self):
        url = arxiv_search.build_search_url("LEED offices")

        assert url.startswith(arxiv_search.ARXIV_API_URL)
        assert "max_results=5" in url
        assert "sortBy=relevance" in url
        assert "sustainability" in url
        assert "econ.GN" in url

    def test_parse_feed_maps_entries_to_academic_papers(self):
        records = arxiv_search.parse_feed(ARXIV_FEED)

        assert len(records) == 2
        first, second = records
        assert first.title == "Green Building Certification and Rent Premiums"
        assert first.authors == "Jane Doe, John Roe"
        assert first.link == "http://arxiv.org/pdf/2401.00001v1"
        assert first.summary == "We study LEED certified offices."
        assert first.date == "1/5/2024"
        assert first.source == "arXiv"
        assert first.kind == RecordKind.ACADEMIC_PAPER

        assert second.authors == "Unknown Author"
        assert second.summary == "No summary available"
        assert second.link == "http://arxiv.org/abs/2401.00002v1"

    @pytest.mark.asyncio
    async def test_search_raises_on_http_error(self, monkeypatch):
        async def fake_get(self, url, **kwargs):  # noqa: ARG001
            return _FakeResponse(status_code=503)

        monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)

        with pytest.raises(httpx.HTTPStatusError):
            await arxiv_search.search("leed")


class TestNewsFeeds:
    FEED = {"name": "GlobeSt", "url": "https://example.com/feed", "source": "GlobeSt"}

    def test_score_relevance_counts_terms_and_domain_bonus(self):
        assert news_feeds.score_relevance(["office", "vacancy"], "Office vacancy climbs", "") == 2
        assert news_feeds.score_relevance(["office"], "Office demand", "commercial real estate outlook") == 3
        assert news_feeds.score_relevance(["warehouse"], "Stock market update", "") == 0

    def test_rank_entries_drops_irrelevant_and_keeps_top_two(self):
        entries = [
            {"title": "Office demand", "description": "office vacancy falls", "link": "https://a"},
            {"title": "Sports results", "description": "nothing here", "link": "https://b"},
            {"title": "Office vacancy report", "description": "<p>commercial real estate office vacancy</p>", "link": "https://c"},
            {"title": "Vacancy watch", "description": "", "link": "https://d"},
        ]

        records = news_feeds.rank_entries(entries, "office vacancy", self.FEED)

        assert [r.link for r in records] == ["https://c", "https://a"]
        assert records[0].summary == "commercial real estate office vacancy"
        assert records[0].authors == "GlobeSt"
        assert records[0].kind == RecordKind.NEWS_ARTICLE

    @pytest.mark.asyncio
    async def test_search_skips_failing_feeds(self, monkeypatch):
        rss = """<?xml version="1.0"?>
<rss version="2.0"><channel><title>CPE</title>
<item><title>Office vacancy rises</title><link>https://cpe.example/1</link>
<description>Office vacancy in commercial real estate</description>
<pubDate>Tue, 05 Mar 2024 10:00:00 GMT</pubDate></item>
</channel></rss>"""

        async def fake_get(self, url, **kwargs):  # noqa: ARG001
            if "broken" in url:
                raise httpx.ConnectError("boom")
            return _FakeResponse(text=rss)

        monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)
        feeds = [
            {"name": "Broken", "url": "https://broken.example/feed", "source": "Broken"},
            {"name": "CPE", "url": "https://cpe.example/feed", "source": "CPE"},
        ]

        records = await news_feeds.search("office vacancy", feeds=feeds)

        assert len(records) == 1
        assert records[0].source == "CPE"
        assert records[0].date == "3/5/2024"


class TestFred:
    def test_match_indicators_uses_query_keywords(self):
        matched = dict(fred.match_indicators("Retail and construction spending"))

        assert matched == {"retail": "RETAILIRSA", "construction": "TTLCONS"}

    def test_match_indicators_defaults(self):
        assert [k for k, _ in fred.match_indicators("cap rates")] == ["office", "construction"]

    @pytest.mark.parametrize(
        "latest, oldest, expected",
        [
            ("120", "100", "significantly increased"),
            ("105", "100", "increased"),
            ("101", "100", "stable"),
            ("95", "100", "decreased"),
            ("80", "100", "significantly decreased"),
            (".", "100", "stable"),
            ("5", "0", "stable"),
        ],
    )
    def test_trend_label(self, latest, oldest, expected):
        assert fred.trend_label(latest, oldest) == expected

    @pytest.mark.asyncio
    async def test_search_requires_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "fred_api_key", "")

        with pytest.raises(ProviderUnavailable):
            await fred.search("office")

    @pytest.mark.asyncio
    async def test_search_builds_economic_records(self, monkeypatch):
        monkeypatch.setattr(settings, "fred_api_key", "test-key")

        async def fake_get(self, url, params=None, **kwargs):  # noqa: ARG001
            if url == fred.FRED_SERIES_URL:
                return _FakeResponse({"seriess": [{"title": "Office Vacancy Rate"}]})
            return _FakeResponse(
                {
                    "observations": [
                        {"date": "2024-04-01", "value": "15.0"},
                        {"date": "2023-05-01", "value": "12.0"},
                    ]
                }
            )

        monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)

        records = await fred.search("office outlook")

        assert len(records) == 1
        record = records[0]
        assert record.kind == RecordKind.ECONOMIC_DATA
        assert record.link == "https://fred.stlouisfed.org/series/OFFVACUSQ176N"
        assert "significantly increased to 15.0 as of 4/1/2024" in record.summary


class TestGoogleTrends:
    def test_trend_direction(self):
        assert google_trends.trend_direction([]) is None
        assert google_trends.trend_direction([50.0] * 10) == "stable"
        assert google_trends.trend_direction([50.0] * 12 + [60.0] * 12) == "strongly increasing"
        assert google_trends.trend_direction([50.0] * 12 + [54.0] * 12) == "moderately increasing"
        assert google_trends.trend_direction([50.0] * 12 + [40.0] * 12) == "strongly decreasing"
        assert google_trends.trend_direction([0.0] * 12 + [10.0] * 12) == "stable"

    def test_build_record_without_data_returns_none(self):
        assert google_trends.build_record("office", [], []) is None

    def test_build_record_summarizes_direction_and_related(self):
        record = google_trends.build_record("office", [50.0] * 12 + [60.0] * 12, ["office rent", "cowork"])

        assert record.title == "Google Trends Analysis: office in Commercial Real Estate"
        assert "strongly increasing" in record.summary
        assert '"office rent", "cowork"' in record.summary
        assert record.link.startswith("https://trends.google.com/trends/explore?q=office%20commercial")

    @pytest.mark.asyncio
    async def test_search_runs_blocking_fetch_off_loop(self):
        with patch("app.tools.google_trends._fetch", return_value=([10.0] * 24, [])) as fetch:
            records = await google_trends.search("warehouse")

        fetch.assert_called_once_with("warehouse commercial real estate")
        assert len(records) == 1
        assert "stable" in records[0].summary


class TestWebSearch:
    def test_scoped_query(self):
        assert brave_search.scoped_query("q", None) == "q"
        assert brave_search.scoped_query("q", ["a.com", "b.com"]) == "q (site:a.com OR site:b.com)"

    @pytest.mark.asyncio
    async def test_brave_maps_results(self, monkeypatch):
        monkeypatch.setattr(settings, "brave_api_key", "test-key")
        captured = {}

        async def fake_get(self, url, params=None, headers=None, **kwargs):  # noqa: ARG001
            captured["params"] = params
            return _FakeResponse(
                {
                    "web": {
                        "results": [
                            {"title": "A", "url": "https://a.com/x", "description": "desc a"},
                            {"title": "B", "url": "https://b.com/y", "extra_snippets": ["s1", "s2"]},
                        ]
                    }
                }
            )

        monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)

        results = await brave_search.search("cap rates", max_results=2, include_domains=["cbre.com"])

        assert captured["params"]["q"] == "cap rates (site:cbre.com)"
        assert [r.content for r in results] == ["desc a", "s1 s2"]
        assert results[0].score == 1.0
        assert results[1].score == 0.5

    @pytest.mark.asyncio
    async def test_brave_requires_key(self, monkeypatch):
        monkeypatch.setattr(settings, "brave_api_key", "")

        with pytest.raises(ProviderUnavailable):
            await brave_search.search("q")

    @pytest.mark.asyncio
    async def test_search_provider_falls_back_to_tavily_on_empty_brave(self):
        tavily_hits = [SearchResult(title="T", url="https://t.com", content="c", score=0.9)]
        with patch("app.tools.search_provider.settings") as mock_settings, patch(
            "app.tools.search_provider.brave_search.search", new=AsyncMock(return_value=[])
        ), patch(
            "app.tools.search_provider.tavily_search.search", new=AsyncMock(return_value=tavily_hits)
        ):
            mock_settings.search_provider = "brave"
            mock_settings.search_max_results = 5
            mock_settings.search_fallback_to_tavily = True
            mock_settings.tavily_api_key = "tv-key"

            response = await search_provider.search("q")

        assert response.provider == "tavily"
        assert response.fallback_from == "brave"
        assert response.results == tavily_hits

    @pytest.mark.asyncio
    async def test_search_provider_propagates_brave_error_without_fallback(self):
        with patch("app.tools.search_provider.settings") as mock_settings, patch(
            "app.tools.search_provider.brave_search.search",
            new=AsyncMock(side_effect=ProviderUnavailable("brave", "no key")),
        ):
            mock_settings.search_provider = "brave"
            mock_settings.search_max_results = 5
            mock_settings.search_fallback_to_tavily = False
            mock_settings.tavily_api_key = ""

            with pytest.raises(ProviderUnavailable):
                await search_provider.search("q")

    @pytest.mark.asyncio
    async def test_search_provider_raises_when_provider_unsupported(self):
        with patch("app.tools.search_provider.settings") as mock_settings:
            mock_settings.search_provider = "unknown-provider"

            with pytest.raises(ValueError):
                await search_provider.search("query")

    @pytest.mark.asyncio
    async def test_tavily_search_is_bounded_by_provider_timeout(self, monkeypatch):
        monkeypatch.setattr(settings, "tavily_api_key", "tv-key")
        monkeypatch.setattr(settings, "provider_timeout_seconds", 7.0)
        with patch("app.tools.tavily_search.AsyncTavilyClient") as client_cls:
            client_cls.return_value.search = AsyncMock(
                return_value={
                    "results": [
                        {"title": "T", "url": "https://t.com", "content": "c", "score": 0.4},
                        {"title": "no url"},
                    ]
                }
            )

            results = await tavily_search.search("cap rates", include_domains=["cbre.com"])

        kwargs = client_cls.return_value.search.await_args.kwargs
        assert kwargs["timeout"] == 7.0
        assert kwargs["include_domains"] == ["cbre.com"]
        assert [r.url for r in results] == ["https://t.com"]

    @pytest.mark.asyncio
    async def test_search_records_logs_brave_to_tavily_fallback(self):
        response = search_provider.SearchResponse(
            results=[SearchResult(title="T", url="https://t.com", content="c", score=0.9)],
            provider="tavily",
            fallback_from="brave",
            fallback_reason="brave returned zero results",
        )
        with patch("app.tools.search_provider.search", new=AsyncMock(return_value=response)), patch(
            "app.tools.search_provider.log_service.log_provider_call"
        ) as log_provider_call:
            records = await search_provider.search_records("cap rates")

        assert [r.link for r in records] == ["https://t.com"]
        log_provider_call.assert_called_once_with(
            "web_search", "brave", "fell back to tavily", error="brave returned zero results"
        )

    def test_results_to_records_skips_invalid_urls(self):
        results = [
            SearchResult(title="", url="https://www.cbre.com/insights", content="<b>Cap</b> rates", score=1.0),
            SearchResult(title="Bad", url="not-a-url", content="x", score=0.5),
        ]

        records = search_provider.results_to_records(results, kind=RecordKind.MARKET_REPORT)

        assert len(records) == 1
        assert records[0].title == "www.cbre.com"
        assert records[0].source == "www.cbre.com"
        assert records[0].summary == "Cap rates"
        assert records[0].kind == RecordKind.MARKET_REPORT


class TestWikipediaAndScraper:
    @pytest.mark.asyncio
    async def test_wikipedia_returns_intro_of_top_hit(self, monkeypatch):
        async def fake_get(self, url, params=None, **kwargs):  # noqa: ARG001
            if params.get("list") == "search":
                assert params["srsearch"] == "cap rate commercial real estate"
                return _FakeResponse({"query": {"search": [{"pageid": 42}, {"pageid": 7}]}})
            return _FakeResponse(
                {
                    "query": {
                        "pages": {
                            "42": {
                                "title": "Capitalization rate",
                                "extract": "The capitalization rate is " + "x" * 2000,
                                "fullurl": "https://en.wikipedia.org/wiki/Capitalization_rate",
                            }
                        }
                    }
                }
            )

        monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)

        records = await wikipedia_search.search("cap rate")

        assert len(records) == 1
        assert records[0].title == "Capitalization rate"
        assert records[0].authors == "Wikipedia Contributors"
        assert len(records[0].summary) == 1000
        assert records[0].summary.endswith("...")

    @pytest.mark.asyncio
    async def test_wikipedia_without_hits_returns_empty(self, monkeypatch):
        async def fake_get(self, url, params=None, **kwargs):  # noqa: ARG001
            return _FakeResponse({"query": {"search": []}})

        monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)

        assert await wikipedia_search.search("zzz") == []

    @pytest.mark.asyncio
    async def test_scrape_records_strips_reader_metadata(self, monkeypatch):
        monkeypatch.setattr(settings, "jina_api_key", "test-key")
        body = "Title: Market Insights\nURL Source: https://nar.example\nMarkdown Content:\nOffice demand is recovering."

        async def fake_get(self, url, headers=None, **kwargs):  # noqa: ARG001
            assert url == "https://r.jina.ai/https://nar.example/insights"
            return _FakeResponse(text=body)

        monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)

        records = await jina_scraper.scrape_records("https://nar.example/insights")

        assert records[0].title == "Market Insights"
        assert records[0].summary == "Office demand is recovering."
        assert records[0].source == "nar.example"
        assert records[0].kind == RecordKind.WEB_CONTENT
