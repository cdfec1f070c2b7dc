import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from liirat_api.config import get_settings
from liirat_api.core.responses import CORS_HEADERS

logger = logging.getLogger("liirat_api")


def _request_context(request: Request) -> Dict[str, Any]:
    client = request.client.host if request.client else "-"
    return {
        "method": request.method,
        "url": str(request.url),
        "client": client,
    }


def json_with_cors(
    status_code: int, content: Dict[str, Any], headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    # Errors raised past the middleware stack still need the CORS headers
    return JSONResponse(
        status_code=status_code, content=content, headers={**CORS_HEADERS, **(headers or {})}
    )


async def handle_base_api_exception(request, exc):
    ctx = _request_context(request)
    if getattr(exc, "status_code", 500) >= 500:
        logger.error(
            f"[BaseAPIException] {ctx['method']} {ctx['url']} from {ctx['client']} -> {exc.status_code}: {exc.message}"
        )
    else:
        logger.warning(
            f"[BaseAPIException] {ctx['method']} {ctx['url']} from {ctx['client']} -> {exc.status_code}: {exc.message}"
        )
    return json_with_cors(exc.status_code, {"error": exc.message, "code": exc.error_code})


async def handle_http_exception(request, exc):
    ctx = _request_context(request)
    error_msg = f"[HTTPException] {ctx['method']} {ctx['url']} from {ctx['client']} -> {exc.status_code}: {exc.detail}"

    if exc.status_code >= 500:
        tb_str = ''.join(traceback.format_tb(exc.__traceback__))
        logger.error(f"{error_msg}\n\nStack Trace:\n{tb_str}")
    else:
        logger.warning(error_msg)

    if exc.status_code == 405:
        message = "Method not allowed"
    elif exc.status_code == 404:
        message = "Not found"
    else:
        message = str(exc.detail)
    return json_with_cors(exc.status_code, {"error": message})


async def handle_validation_error(request, exc):
    ctx = _request_context(request)
    logger.warning(
        f"[ValidationError] {ctx['method']} {ctx['url']} from {ctx['client']} -> 400: {exc.errors()}"
    )
    fields = sorted(
        {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
    )
    message = "Invalid request parameters"
    if fields:
        message = f"{message}: {', '.join(fields)}"
    return json_with_cors(400, {"error": message})


async def handle_unexpected_error(request, exc):
    ctx = _request_context(request)

    tb_str = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        f"\n{'=' * 80}\n"
        f"[Unhandled Error] {ctx['method']} {ctx['url']} from {ctx['client']}\n"
        f"Exception Type: {type(exc).__name__}\n"
        f"Exception Message: {str(exc)}\n\n"
        f"Full Stack Trace:\n{tb_str}"
        f"{'=' * 80}"
    )

    content: Dict[str, Any] = {"error": "Internal server error"}
    if not get_settings().is_production:
        content["details"] = str(exc)
    return json_with_cors(500, content)
