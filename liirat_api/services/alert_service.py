import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from liirat_api.adapters.fields import parse_number
from liirat_api.core.exceptions import NotFoundError, ValidationError
from liirat_api.repositories.alert_store import InMemoryAlertStore
from liirat_api.schemas.alert import (
    Alert,
    AlertCondition,
    AlertCreate,
    AlertType,
    AlertUpdate,
    NotificationMethod,
)
from liirat_api.schemas.quote import Quote

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("symbol", "type", "condition", "notificationMethod", "contactInfo")
MISSING_FIELDS_MESSAGE = "Missing required fields: " + ", ".join(REQUIRED_FIELDS)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-\(\)]{10,}$")


def _base_ticker(symbol: str) -> str:
    return symbol.upper().split(".", 1)[0]


def symbols_match(alert_symbol: str, quote_symbol: str) -> bool:
    """``AAPL`` matches ``AAPL.US``; exact codes always match."""
    if alert_symbol.upper() == quote_symbol.upper():
        return True
    return "." not in alert_symbol and _base_ticker(alert_symbol) == _base_ticker(quote_symbol)


def should_trigger(alert: Alert, quote: Quote) -> bool:
    """Only price alerts with an above/below condition react to quotes."""
    if alert.type != AlertType.PRICE or alert.targetValue is None or quote.price is None:
        return False
    condition = alert.condition.strip().lower()
    if condition == AlertCondition.ABOVE.value:
        return quote.price >= alert.targetValue
    if condition == AlertCondition.BELOW.value:
        return quote.price <= alert.targetValue
    return False


class AlertService:
    """알림 검증, CRUD, 시세 기반 조건 평가"""

    def __init__(self, store: InMemoryAlertStore):
        self.store = store

    def validate_create(self, body: Mapping[str, Any]) -> AlertCreate:
        if any(not body.get(field) for field in REQUIRED_FIELDS):
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        self._validate_choices(body)

        target = self._parse_target(body.get("targetValue"))
        return AlertCreate(
            symbol=str(body["symbol"]),
            type=AlertType(body["type"]),
            condition=str(body["condition"]),
            targetValue=target,
            notificationMethod=NotificationMethod(body["notificationMethod"]),
            contactInfo=str(body["contactInfo"]),
        )

    @staticmethod
    def _parse_target(value: Any) -> Optional[float]:
        """Blank targets are allowed; anything else has to be numeric."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        target = parse_number(value)
        if target is None:
            raise ValidationError("Invalid target value")
        return target

    @staticmethod
    def _validate_choices(body: Mapping[str, Any]) -> None:
        if "type" in body and body["type"] not in {t.value for t in AlertType}:
            raise ValidationError("Invalid alert type")
        method = body.get("notificationMethod")
        if "notificationMethod" in body and method not in {m.value for m in NotificationMethod}:
            raise ValidationError("Invalid notification method")
        contact = str(body.get("contactInfo") or "")
        if method == NotificationMethod.EMAIL.value and not EMAIL_RE.match(contact):
            raise ValidationError("Invalid email address")
        if method == NotificationMethod.SMS.value and not PHONE_RE.match(contact):
            raise ValidationError("Invalid phone number")

    def list_active(self) -> List[Alert]:
        return self.store.list_active()

    def create(self, body: Mapping[str, Any]) -> Alert:
        alert = self.store.create(self.validate_create(body))
        logger.info(f"Alert {alert.id} created for {alert.symbol} ({alert.type.value})")
        return alert

    def update(self, alert_id: int, body: Mapping[str, Any]) -> Alert:
        current = self.store.get(alert_id)
        if current is None:
            raise NotFoundError("Alert not found")
        changes: Dict[str, Any] = dict(body)
        if "targetValue" in changes:
            changes["targetValue"] = self._parse_target(changes["targetValue"])
        if changes.get("isActive") is None:
            changes.pop("isActive", None)
        # Contact rules apply to the record as it will be stored
        self._validate_choices({**current.model_dump(mode="json"), **changes})
        try:
            update = AlertUpdate.model_validate(changes)
            # Explicit nulls only clear the target value
            fields = {
                key: value
                for key, value in update.model_dump(exclude_unset=True).items()
                if value is not None or key == "targetValue"
            }
            return self.store.update(alert_id, fields)
        except PydanticValidationError as e:
            names = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
            raise ValidationError(f"Invalid alert fields: {names}") from e

    def delete(self, alert_id: int) -> None:
        if not self.store.delete(alert_id):
            raise NotFoundError("Alert not found")

    def check_alert_conditions(self, quotes: Iterable[Quote]) -> List[Alert]:
        """Trigger every active, untriggered alert whose condition holds."""
        latest = list(quotes)
        triggered: List[Alert] = []
        for alert in self.store.list_active():
            if alert.triggeredAt:
                continue
            for quote in latest:
                if symbols_match(alert.symbol, quote.symbol) and should_trigger(alert, quote):
                    triggered.append(self.trigger(alert, quote))
                    break
        return triggered

    def on_quote(self, quote: Quote) -> None:
        """QuoteCache subscriber."""
        self.check_alert_conditions([quote])

    def trigger(self, alert: Alert, quote: Quote) -> Alert:
        updated = self.store.mark_triggered(alert.id) or alert
        logger.info(
            f"{alert.notificationMethod.value.upper()} alert triggered for {alert.symbol}: "
            f"{alert.condition} {alert.targetValue} (price {quote.price})"
        )
        return updated
