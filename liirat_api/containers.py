from dependency_injector import containers, providers

from liirat_api.config import settings
from liirat_api.providers.eodhd import EodhdClient
from liirat_api.providers.marketaux import MarketauxClient
from liirat_api.providers.openai_chat import ChatClient
from liirat_api.providers.polygon import PolygonClient
from liirat_api.repositories.alert_store import InMemoryAlertStore
from liirat_api.services.alert_service import AlertService
from liirat_api.services.chat_service import ChatService
from liirat_api.services.quote_cache import QuoteCache
from liirat_api.services.rate_limiter import InMemoryRateLimiter
from liirat_api.services.redis_service import RedisService
from liirat_api.services.watchlist_service import WatchlistService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Object(settings)


class RepositoryModule(containers.DeclarativeContainer):
    """Process-local state shared by every request."""

    config = providers.DependenciesContainer()

    alert_store = providers.Singleton(InMemoryAlertStore)
    quote_cache = providers.Singleton(QuoteCache)
    rate_limiter = providers.Singleton(
        InMemoryRateLimiter, limits=config.config.provided.RATE_LIMITS
    )
    redis_service = providers.Singleton(RedisService, settings=config.config)


class ServiceModule(containers.DeclarativeContainer):
    """Provider clients and services."""

    config = providers.DependenciesContainer()
    repositories = providers.DependenciesContainer()

    eodhd_client = providers.Factory(
        EodhdClient, settings=config.config, redis_service=repositories.redis_service
    )
    marketaux_client = providers.Factory(
        MarketauxClient, settings=config.config, redis_service=repositories.redis_service
    )
    polygon_client = providers.Factory(PolygonClient, settings=config.config)
    chat_client = providers.Factory(ChatClient, settings=config.config)

    alert_service = providers.Factory(AlertService, store=repositories.alert_store)
    chat_service = providers.Factory(
        ChatService,
        settings=config.config,
        chat_client=chat_client,
        eodhd_client=eodhd_client,
    )
    watchlist_service = providers.Singleton(
        WatchlistService,
        settings=config.config,
        cache=repositories.quote_cache,
        client=eodhd_client,
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    config = providers.Container(ConfigModule)
    repositories = providers.Container(RepositoryModule, config=config)
    services = providers.Container(
        ServiceModule, config=config, repositories=repositories
    )
