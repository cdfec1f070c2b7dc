from fastapi import Request

from liirat_api.config import Settings
from liirat_api.providers.eodhd import EodhdClient
from liirat_api.providers.marketaux import MarketauxClient
from liirat_api.providers.polygon import PolygonClient

# Services
from liirat_api.services.alert_service import AlertService
from liirat_api.services.chat_service import ChatService
from liirat_api.services.watchlist_service import WatchlistService


def get_settings_dep(request: Request) -> Settings:
    return request.app.container.config.config()


def get_eodhd_client(request: Request) -> EodhdClient:
    return request.app.container.services.eodhd_client()


def get_marketaux_client(request: Request) -> MarketauxClient:
    return request.app.container.services.marketaux_client()


def get_polygon_client(request: Request) -> PolygonClient:
    return request.app.container.services.polygon_client()


def get_alert_service(request: Request) -> AlertService:
    return request.app.container.services.alert_service()


def get_chat_service(request: Request) -> ChatService:
    return request.app.container.services.chat_service()


def get_watchlist_service(request: Request) -> WatchlistService:
    return request.app.container.services.watchlist_service()
