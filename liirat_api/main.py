import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException

from liirat_api import containers
from liirat_api.config import settings
from liirat_api.core.cors import CORSMiddleware
from liirat_api.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from liirat_api.core.exceptions import BaseAPIException
from liirat_api.core.logging_middleware import LoggingMiddleware
from liirat_api.logging_config import setup_logging
from liirat_api.middleware.rate_limit import RateLimitMiddleware
from liirat_api.routers import (
    alert_router,
    calendar_router,
    chat_router,
    eodhd_router,
    health_router,
    news_router,
    price_router,
    symbol_router,
    watchlist_router,
)
from liirat_api.services.quote_cache import WILDCARD

load_dotenv("liirat_api/.env")
setup_logging(log_level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    watchlist = app.container.services.watchlist_service()
    if settings.WATCHLIST_POLLING_ENABLED:
        watchlist.start()
    yield
    await watchlist.stop()
    await app.container.repositories.redis_service().close()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)
app.container = containers.Container()  # type: ignore

# Quote updates drive the price alert evaluator
app.container.repositories.quote_cache().subscribe(
    WILDCARD, app.container.services.alert_service().on_quote
)

# Last added runs first: CORS -> logging -> rate limit -> routes
app.add_middleware(
    RateLimitMiddleware,
    limiter=app.container.repositories.rate_limiter(),
    settings=settings,
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(CORSMiddleware)

app.add_exception_handler(BaseAPIException, handle_base_api_exception)
app.add_exception_handler(StarletteHTTPException, handle_http_exception)
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.add_exception_handler(Exception, handle_unexpected_error)

for module in (
    eodhd_router,
    price_router,
    calendar_router,
    news_router,
    alert_router,
    chat_router,
    symbol_router,
    watchlist_router,
    health_router,
):
    app.include_router(module.router, prefix=settings.API_PREFIX)

handler = Mangum(app)
