from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.core.database import get_db
from coursehub.core.dependencies import get_optional_user
from coursehub.models.user import User
from coursehub.schemas.analytics import (
    EventCreate,
    EventResponse,
    PageViewCreate,
    PageViewResponse,
)
from coursehub.services.analytics import AnalyticsService

router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
)


@router.post(
    "/page-views",
    response_model=PageViewResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_page_view(
    data: PageViewCreate,
    current_user: Annotated[Optional[User], Depends(get_optional_user)],
    db: Session = Depends(get_db),
):
    """
    Record a page view. Anonymous visitors are recorded without a user.
    """
    user_id = current_user.id if current_user else None
    return AnalyticsService(db).record_page_view(user_id, data.page, data.metadata)


@router.post(
    "/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED
)
def record_event(
    data: EventCreate,
    current_user: Annotated[Optional[User], Depends(get_optional_user)],
    db: Session = Depends(get_db),
):
    user_id = current_user.id if current_user else None
    return AnalyticsService(db).record_event(user_id, data.event_type, data.metadata)
