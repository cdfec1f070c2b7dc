from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from liirat_api.core.exceptions import NotFoundError
from liirat_api.deps import get_alert_service
from liirat_api.services.alert_service import AlertService

router = APIRouter(prefix="/alerts", tags=["alerts"])

CREATED_MESSAGE = "Alert created successfully! You will be notified when conditions are met."


def _alert_id(raw: Optional[str]) -> int:
    try:
        return int(raw or "")
    except ValueError:
        raise NotFoundError("Alert not found")


@router.get("")
async def list_alerts(service: AlertService = Depends(get_alert_service)) -> Any:
    """활성 알림 목록"""
    alerts = service.list_active()
    return {
        "success": True,
        "alerts": [alert.model_dump(mode="json") for alert in alerts],
        "total": len(alerts),
    }


@router.post("")
async def create_alert(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    service: AlertService = Depends(get_alert_service),
) -> Any:
    alert = service.create(payload or {})
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "success": True,
            "alert": alert.model_dump(mode="json"),
            "message": CREATED_MESSAGE,
        },
    )


@router.put("")
async def update_alert(
    id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    service: AlertService = Depends(get_alert_service),
) -> Any:
    alert = service.update(_alert_id(id), payload or {})
    return {
        "success": True,
        "alert": alert.model_dump(mode="json"),
        "message": "Alert updated successfully",
    }


@router.delete("")
async def delete_alert(
    id: Optional[str] = None,
    service: AlertService = Depends(get_alert_service),
) -> Any:
    service.delete(_alert_id(id))
    return {"success": True, "message": "Alert deleted successfully"}
