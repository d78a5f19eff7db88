from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Synthesis model provider
    ai_provider: str = "local"  # openai | anthropic | local
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"  # any OpenAI-compatible gateway
    openai_model: str = "gpt-4o"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 2500
    llm_timeout_seconds: float = 60.0

    # Web search
    search_provider: str = "brave"  # brave | tavily
    brave_api_key: str = ""
    tavily_api_key: str = ""
    search_fallback_to_tavily: bool = True
    search_max_results: int = 5

    # Data providers
    fred_api_key: str = ""
    jina_api_key: str = ""
    scrape_target_url: str = "https://www.nar.realtor/commercial-market-insights"
    news_feeds: str = (
        "Commercial Property Executive|https://www.commercialsearch.com/news/feed/|CPE,"
        "GlobeSt|https://www.globest.com/feed/|GlobeSt,"
        "NAIOP|https://www.naiop.org/feed|NAIOP"
    )
    user_agent: str = "Mozilla/5.0 (compatible; CRE Research Agent Bot/1.0)"

    # Timeouts and fan-out
    provider_timeout_seconds: float = 15.0
    feed_timeout_seconds: float = 5.0
    adapter_timeout_seconds: float = 45.0
    adapter_min_results: int = 3
    category_tie_policy: str = "general"  # general | union

    # Session progress
    session_ttl_seconds: int = 86400  # 0 keeps sessions for the process lifetime

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]

    @property
    def news_feed_list(self) -> list[dict[str, str]]:
        """Parse ``name|url|source`` triples separated by commas."""
        feeds: list[dict[str, str]] = []
        for raw in self.news_feeds.split(","):
            parts = [p.strip() for p in raw.split("|")]
            if len(parts) != 3 or not parts[1]:
                continue
            feeds.append({"name": parts[0], "url": parts[1], "source": parts[2]})
        return feeds


settings = Settings()
