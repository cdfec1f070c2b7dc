"""Wire envelopes shared by the route families.

EODHD family:  {"ok": true, "items": [...]} / {"ok": false, "code": ..., "detail": ..., "items": []}
Legacy family: route specific success bodies / {"error": ..., <listField>: []}
"""

from typing import Any, Dict, Iterable, Optional

from fastapi.responses import JSONResponse

from liirat_api.core.exceptions import BaseAPIException, UpstreamError


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

NO_STORE = {"Cache-Control": "no-store"}
SHARED_CACHE = {"Cache-Control": "s-maxage=15, stale-while-revalidate=60"}


def items_response(items: Iterable[Any], headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={"ok": True, "items": list(items)},
        headers=headers if headers is not None else SHARED_CACHE,
    )


def envelope_error(status_code: int, code: str, detail: Optional[str] = None) -> JSONResponse:
    content: Dict[str, Any] = {"ok": False, "code": code, "items": []}
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content, headers=NO_STORE)


def envelope_error_from(exc: BaseAPIException) -> JSONResponse:
    detail = exc.message
    if isinstance(exc, UpstreamError) and exc.body:
        detail = f"{exc.message}: {exc.body}"
    return envelope_error(exc.status_code, exc.error_code, detail)


def legacy_error(status_code: int, message: str, **payload: Any) -> JSONResponse:
    """``{"error": message, **payload}``; callers pass the empty list field
    (``events=[]``, ``prices=[]`` ...) so clients can render "no data"."""

    content: Dict[str, Any] = {"error": message}
    content.update(payload)
    return JSONResponse(status_code=status_code, content=content, headers=NO_STORE)


def legacy_error_from(exc: BaseAPIException, **payload: Any) -> JSONResponse:
    return legacy_error(exc.status_code, exc.message, **payload)
