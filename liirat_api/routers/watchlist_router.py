from typing import Any, Optional

from fastapi import APIRouter, Depends

from liirat_api.core.responses import NO_STORE, items_response
from liirat_api.deps import get_watchlist_service
from liirat_api.providers.eodhd import split_symbols
from liirat_api.services.watchlist_service import WatchlistService

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


@router.get("")
async def get_watchlist(
    symbols: Optional[str] = None,
    refresh: bool = False,
    service: WatchlistService = Depends(get_watchlist_service),
) -> Any:
    """
    워치리스트 마지막 시세와 연결 상태

    refresh=true면 오래된 심볼만 배치로 다시 조회한 뒤 반환합니다.
    실패한 심볼은 이전 시세를 유지하고 status만 degraded/disconnected로 바뀝니다.
    """
    wanted = split_symbols(symbols) or None
    if refresh:
        entries = await service.refresh(wanted)
    else:
        entries = service.snapshot(wanted)
    return items_response((entry.model_dump(mode="json") for entry in entries), headers=NO_STORE)
