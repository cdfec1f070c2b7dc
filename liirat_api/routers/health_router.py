import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from liirat_api.config import Settings
from liirat_api.core.exceptions import ConfigurationError, UpstreamError
from liirat_api.deps import get_eodhd_client, get_settings_dep
from liirat_api.providers.eodhd import EodhdClient
from liirat_api.schemas.health import (
    HealthCheckResponse,
    PingResponse,
    StatusCheck,
    StatusResponse,
)
from liirat_api.utils.date_utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

STATUS_TEST_SYMBOL = "EURUSD.FOREX"


@router.get("/ping", response_model=PingResponse)
async def ping(settings: Settings = Depends(get_settings_dep)) -> PingResponse:
    return PingResponse(
        message=settings.PING_MESSAGE,
        timestamp=utc_now_iso(),
        environment=settings.ENVIRONMENT,
    )


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings_dep)) -> Any:
    """Health check endpoint. 206 when a provider key is missing."""
    keys = {
        "openai": bool(settings.OPENAI_API_KEY),
        "eodhd": bool(settings.EODHD_API_KEY),
        "marketaux": bool(settings.MARKETAUX_API_KEY),
        "polygon": bool(settings.POLYGON_API_KEY),
    }
    all_good = all(keys.values())
    body = HealthCheckResponse(
        status="healthy" if all_good else "partial",
        timestamp=utc_now_iso(),
        version=settings.VERSION,
        environment={**keys, "environment": settings.ENVIRONMENT},
        endpoints={
            "ping": "/api/ping",
            "quotes": "/api/quotes",
            "calendar": "/api/eodhd-calendar",
            "news": "/api/eodhd-news",
            "alerts": "/api/alerts",
            "chat": "/api/chat",
            "aiChat": "/api/ai-chat",
            "health": "/api/health",
        },
    )
    return JSONResponse(status_code=200 if all_good else 206, content=body.model_dump())


@router.get("/status", response_model=StatusResponse)
async def status_check(
    settings: Settings = Depends(get_settings_dep),
    client: EodhdClient = Depends(get_eodhd_client),
) -> StatusResponse:
    """키 설정 여부와 EODHD 연결 상태 진단"""
    checks = {
        "api": StatusCheck(status="ok", message="API endpoint is responding"),
    }
    for name, key in (
        ("eodhdKey", settings.EODHD_API_KEY),
        ("openaiKey", settings.OPENAI_API_KEY),
        ("marketauxKey", settings.MARKETAUX_API_KEY),
        ("polygonKey", settings.POLYGON_API_KEY),
    ):
        checks[name] = StatusCheck(
            status="ok" if key else "warning",
            message="API key configured" if key else "API key not configured",
        )

    try:
        await client.real_time([STATUS_TEST_SYMBOL])
        checks["eodhd"] = StatusCheck(status="ok", message="EODHD API is accessible", statusCode=200)
    except ConfigurationError as e:
        checks["eodhd"] = StatusCheck(status="warning", message=e.message)
    except UpstreamError as e:
        logger.warning(f"EODHD status check failed: {e}")
        checks["eodhd"] = StatusCheck(
            status="error",
            message=f"EODHD connectivity failed: {e.message}",
            statusCode=e.upstream_status,
        )

    statuses = {check.status for check in checks.values()}
    overall = "error" if "error" in statuses else "warning" if "warning" in statuses else "ok"
    return StatusResponse(
        timestamp=utc_now_iso(),
        service=settings.APP_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        checks=checks,
        overall=overall,
    )
