from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from coursehub.schemas.base import CamelModel


class PlatformStats(CamelModel):
    total_revenue: int
    successful_payments: int
    total_courses: int
    published_courses: int
    total_users: int
    total_enrollments: int
    conversion_rate: float


class EventCreate(CamelModel):
    event_type: str = Field(..., min_length=1, max_length=100)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PageViewCreate(CamelModel):
    page: str = Field(..., min_length=1, max_length=500)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class EventResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    event_type: str
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="event_metadata")
    timestamp: datetime


class PageViewResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    page: str
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="event_metadata")
    timestamp: datetime


class EventListResponse(CamelModel):
    events: List[EventResponse]
    total: int


class PageViewListResponse(CamelModel):
    page_views: List[PageViewResponse]
    total: int
