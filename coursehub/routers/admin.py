from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.database import get_db
from coursehub.core.dependencies import get_current_admin
from coursehub.integrations.razorpay import RazorpayGateway, get_payment_gateway
from coursehub.models.user import User
from coursehub.schemas.analytics import (
    EventListResponse,
    PageViewListResponse,
    PlatformStats,
)
from coursehub.schemas.course import CourseListResponse
from coursehub.schemas.payment import PaymentListResponse
from coursehub.schemas.user import AdminUserUpdate, UserListResponse, UserResponse
from coursehub.services.analytics import AnalyticsService
from coursehub.services.course import CourseService
from coursehub.services.payment import PaymentService
from coursehub.services.user import UserService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={404: {"description": "Not found"}},
)

PAGE_SIZE = Query(settings.default_page_size, ge=1, le=settings.max_page_size)


@router.get(
    "/stats",
    response_model=PlatformStats,
    description="Revenue, sales and catalogue totals",
)
def get_stats(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return AnalyticsService(db).get_platform_stats()


@router.get(
    "/courses",
    response_model=CourseListResponse,
    description="List all courses, including unpublished ones",
)
def list_courses(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = PAGE_SIZE,
    category: Optional[str] = Query(None),
    featured: Optional[bool] = Query(None),
    published: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Search title or description"),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    courses, pagination = CourseService(db).get_courses(
        page=page,
        size=size,
        category=category,
        featured=featured,
        search=search,
        published=published,
    )
    return CourseListResponse(courses=courses, **pagination)


@router.get(
    "/users",
    response_model=UserListResponse,
    description="List users with filtering and pagination",
)
def list_users(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = PAGE_SIZE,
    search: Optional[str] = Query(None, description="Search by name or email"),
    role: Optional[str] = Query(None, description="Filter by role"),
    is_active: Optional[bool] = Query(None, description="Filter by active status"),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    users, pagination = UserService(db).get_users(
        page=page, size=size, search=search, role=role, is_active=is_active
    )
    return UserListResponse(users=users, **pagination)


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    description="Change a user's role, status or name",
)
def update_user(
    user_id: int,
    data: AdminUserUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Admins cannot demote or deactivate themselves.
    """
    return UserService(db).admin_update_user(user_id, data, current_admin)


@router.get(
    "/payments",
    response_model=PaymentListResponse,
    description="Sales listing",
)
def list_payments(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = PAGE_SIZE,
    status: Optional[str] = Query(None, description="pending, success or failed"),
    user_id: Optional[int] = Query(None),
    course_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
    current_admin: User = Depends(get_current_admin),
):
    payments, pagination = PaymentService(db, gateway).get_payments(
        page=page, size=size, status=status, user_id=user_id, course_id=course_id
    )
    return PaymentListResponse(payments=payments, **pagination)


@router.get("/events", response_model=EventListResponse)
def list_events(
    user_id: Optional[int] = Query(None),
    event_type: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    events, total = AnalyticsService(db).get_events(
        user_id=user_id,
        event_type=event_type,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
    return EventListResponse(events=events, total=total)


@router.get("/page-views", response_model=PageViewListResponse)
def list_page_views(
    user_id: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    page_views, total = AnalyticsService(db).get_page_views(
        user_id=user_id, start_date=start_date, end_date=end_date, limit=limit
    )
    return PageViewListResponse(page_views=page_views, total=total)
