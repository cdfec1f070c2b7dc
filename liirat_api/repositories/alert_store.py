import itertools
from typing import Any, Dict, List, Optional

from liirat_api.schemas.alert import Alert, AlertCreate
from liirat_api.utils.date_utils import utc_now_iso

# Fields an update can never change
IMMUTABLE_FIELDS = frozenset({"id", "createdAt", "userId"})


class InMemoryAlertStore:
    """알림 저장소 - 프로세스 메모리에만 존재하며 재시작 시 초기화됩니다."""

    def __init__(self):
        self._alerts: List[Alert] = []
        self._ids = itertools.count(1)

    def create(self, data: AlertCreate, user_id: str = "demo-user") -> Alert:
        alert = Alert(
            id=next(self._ids),
            userId=user_id,
            createdAt=utc_now_iso(),
            isActive=True,
            **data.model_dump(),
        )
        self._alerts.append(alert)
        return alert

    def list_all(self) -> List[Alert]:
        return list(self._alerts)

    def list_active(self) -> List[Alert]:
        return [alert for alert in self._alerts if alert.isActive]

    def get(self, alert_id: int) -> Optional[Alert]:
        for alert in self._alerts:
            if alert.id == alert_id:
                return alert
        return None

    def _replace(self, updated: Alert) -> Alert:
        for index, alert in enumerate(self._alerts):
            if alert.id == updated.id:
                self._alerts[index] = updated
                return updated
        raise KeyError(updated.id)

    def update(self, alert_id: int, changes: Dict[str, Any]) -> Optional[Alert]:
        """Shallow merge of ``changes`` into the stored alert."""
        current = self.get(alert_id)
        if current is None:
            return None
        allowed = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}
        merged = Alert.model_validate({**current.model_dump(), **allowed})
        return self._replace(merged)

    def mark_triggered(self, alert_id: int) -> Optional[Alert]:
        current = self.get(alert_id)
        if current is None:
            return None
        triggered = current.model_copy(update={"triggeredAt": utc_now_iso(), "isActive": False})
        return self._replace(triggered)

    def delete(self, alert_id: int) -> bool:
        for index, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                del self._alerts[index]
                return True
        return False

    def reset(self) -> None:
        self._alerts.clear()
        self._ids = itertools.count(1)
