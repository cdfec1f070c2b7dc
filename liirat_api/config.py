from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_WATCHLIST = [
    # Crypto
    "BTC-USD.CC",
    "ETH-USD.CC",
    # Forex
    "EURUSD.FOREX",
    "GBPUSD.FOREX",
    "USDJPY.FOREX",
    "XAUUSD.FOREX",
    # Indices
    "GSPC.INDX",
    "DJI.INDX",
    "IXIC.INDX",
    # US leaders
    "AAPL.US",
    "MSFT.US",
    "NVDA.US",
    "TSLA.US",
    "GOOGL.US",
    "AMZN.US",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="liirat_api/.env",
        env_file_encoding="utf-8",
        extra="allow",
        populate_by_name=True,
    )

    # Application
    APP_NAME: str = "Liirat News API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    PING_MESSAGE: str = "pong"

    # Provider keys (read when a handler runs, never required at startup)
    EODHD_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("EODHD_API_KEY", "EODHD_API_TOKEN"),
    )
    OPENAI_API_KEY: Optional[str] = None
    MARKETAUX_API_KEY: Optional[str] = None
    POLYGON_API_KEY: Optional[str] = None

    # Provider endpoints
    EODHD_BASE_URL: str = "https://eodhd.com/api"
    MARKETAUX_BASE_URL: str = "https://api.marketaux.com/v1"
    POLYGON_BASE_URL: str = "https://api.polygon.io"

    # Timeouts (seconds)
    EODHD_FAST_TIMEOUT_SECONDS: float = 3.0
    EODHD_PRICE_TIMEOUT_SECONDS: float = 10.0
    EODHD_CALENDAR_TIMEOUT_SECONDS: float = 15.0
    EODHD_NEWS_TIMEOUT_SECONDS: float = 15.0
    MARKETAUX_TIMEOUT_SECONDS: float = 10.0
    POLYGON_TIMEOUT_SECONDS: float = 10.0
    OPENAI_TIMEOUT_SECONDS: float = 30.0

    # OpenAI
    OPENAI_CHAT_MODEL: str = "gpt-4"
    OPENAI_QUICK_MODEL: str = "gpt-3.5-turbo"
    OPENAI_MAX_TOKENS: int = 1000
    OPENAI_TEMPERATURE: float = 0.7

    # Quote batching / polling
    QUOTE_BATCH_SIZE: int = 3
    QUOTE_BATCH_DELAY_SECONDS: float = 2.0
    QUOTE_POLL_INTERVAL_SECONDS: float = 60.0
    QUOTE_BATCH_POLL_INTERVAL_SECONDS: float = 15.0
    WATCHLIST: List[str] = Field(default_factory=lambda: list(DEFAULT_WATCHLIST))
    WATCHLIST_POLLING_ENABLED: bool = False

    # Rate Limiting (requests per minute, per client)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMITS: Dict[str, int] = Field(
        default_factory=lambda: {
            "prices": 60,
            "news": 12,
            "calendar": 6,
            "analysis": 20,
        }
    )

    # Redis (empty host disables the upstream response cache)
    REDIS_HOST: str = ""
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None
    CACHE_TTL_SECONDS: Dict[str, int] = Field(
        default_factory=lambda: {
            "prices": 30,
            "news": 300,
            "calendar": 600,
        }
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def redis_enabled(self) -> bool:
        return bool(self.REDIS_HOST)


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""

    return settings
