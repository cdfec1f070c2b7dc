from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AlertType(str, Enum):
    PRICE = "price"
    NEWS = "news"
    TECHNICAL = "technical"


class NotificationMethod(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class AlertCondition(str, Enum):
    """Conditions the price evaluator understands."""

    ABOVE = "above"
    BELOW = "below"


class AlertCreate(BaseModel):
    symbol: str
    type: AlertType
    condition: str
    targetValue: Optional[float] = None
    notificationMethod: NotificationMethod
    contactInfo: str


class AlertUpdate(BaseModel):
    """Partial update; fields not sent are left untouched."""

    model_config = ConfigDict(extra="ignore")

    symbol: Optional[str] = None
    type: Optional[AlertType] = None
    condition: Optional[str] = None
    targetValue: Optional[float] = None
    isActive: Optional[bool] = None
    notificationMethod: Optional[NotificationMethod] = None
    contactInfo: Optional[str] = None


class Alert(BaseModel):
    """가격 알림 레코드 (프로세스 메모리에만 존재)"""

    id: int = Field(..., description="Monotonic id, resets on restart")
    userId: str = "demo-user"
    symbol: str
    type: AlertType
    condition: str
    targetValue: Optional[float] = None
    isActive: bool = True
    createdAt: str
    triggeredAt: Optional[str] = None
    notificationMethod: NotificationMethod
    contactInfo: str
