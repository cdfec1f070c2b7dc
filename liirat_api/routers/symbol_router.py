from typing import Any, Optional

from fastapi import APIRouter

from liirat_api.core.tickers import search_symbols

router = APIRouter(tags=["symbols"])


@router.get("/symbol-search")
async def symbol_search(
    q: Optional[str] = None,
    limit: Optional[str] = "20",
    category: Optional[str] = None,
) -> Any:
    """기본 심볼 디렉터리 검색"""
    try:
        size = int(limit) if limit else 20
    except ValueError:
        size = 20
    results = search_symbols(q, category, size or 20)
    return {
        "symbols": results,
        "total": len(results),
        "query": q or "",
        "category": category or "all",
    }
