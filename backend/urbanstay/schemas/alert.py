"""Alert schemas for request/response validation."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from urbanstay.models.alert import AlertFrequency


class AlertCreate(BaseModel):
    """Raw criteria use the same keys as the search query string."""
    name: str = Field(..., min_length=1, max_length=100)
    criteria: Dict[str, Any]
    frequency: AlertFrequency = AlertFrequency.DAILY
    is_active: bool = True


class AlertUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    criteria: Optional[Dict[str, Any]] = None
    frequency: Optional[AlertFrequency] = None
    is_active: Optional[bool] = None


class AlertResponse(BaseModel):
    id: int
    user_id: int
    name: str
    criteria: Dict[str, Any]
    is_active: bool
    frequency: str
    last_matched_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AlertDetailResponse(BaseModel):
    success: bool = True
    alert: AlertResponse


class AlertListResponse(BaseModel):
    success: bool = True
    count: int
    alerts: List[AlertResponse]
