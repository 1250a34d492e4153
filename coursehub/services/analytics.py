import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from coursehub.models.course import Course
from coursehub.models.event import Event, PageView
from coursehub.models.payment import Payment
from coursehub.models.user import User
from coursehub.models.user_course import UserCourse
from coursehub.schemas.analytics import PlatformStats

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self, db: Session):
        self.db = db

    # ==================== Recording ====================

    def record_event(
        self,
        user_id: Optional[int],
        event_type: str,
        metadata: Optional[Dict[str, Any]] = None,
        commit: bool = True,
    ) -> Event:
        """
        Append an analytics event. With ``commit=False`` the row joins the
        caller's transaction.
        """
        event = Event(
            user_id=user_id, event_type=event_type, event_metadata=metadata or {}
        )
        self.db.add(event)
        if commit:
            self.db.commit()
            self.db.refresh(event)
        return event

    def record_page_view(
        self,
        user_id: Optional[int],
        page: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PageView:
        page_view = PageView(user_id=user_id, page=page, event_metadata=metadata or {})
        self.db.add(page_view)
        self.db.commit()
        self.db.refresh(page_view)
        return page_view

    # ==================== Queries ====================

    def get_events(
        self,
        user_id: Optional[int] = None,
        event_type: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
    ) -> Tuple[List[Event], int]:
        query = self.db.query(Event)

        if user_id is not None:
            query = query.filter(Event.user_id == user_id)
        if event_type:
            query = query.filter(Event.event_type == event_type)
        if start_date:
            query = query.filter(Event.timestamp >= start_date)
        if end_date:
            query = query.filter(Event.timestamp <= end_date)

        total = query.count()
        events = query.order_by(Event.timestamp.desc(), Event.id.desc()).limit(limit).all()
        return events, total

    def get_page_views(
        self,
        user_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
    ) -> Tuple[List[PageView], int]:
        query = self.db.query(PageView)

        if user_id is not None:
            query = query.filter(PageView.user_id == user_id)
        if start_date:
            query = query.filter(PageView.timestamp >= start_date)
        if end_date:
            query = query.filter(PageView.timestamp <= end_date)

        total = query.count()
        page_views = (
            query.order_by(PageView.timestamp.desc(), PageView.id.desc())
            .limit(limit)
            .all()
        )
        return page_views, total

    def get_platform_stats(self) -> PlatformStats:
        """
        Dashboard numbers. Revenue only counts successful payments; the
        conversion rate is successful payments per course.
        """
        total_revenue = (
            self.db.query(func.coalesce(func.sum(Payment.amount), 0))
            .filter(Payment.status == "success")
            .scalar()
        )
        successful_payments = (
            self.db.query(Payment).filter(Payment.status == "success").count()
        )
        total_courses = self.db.query(Course).count()
        published_courses = (
            self.db.query(Course).filter(Course.is_published.is_(True)).count()
        )
        total_users = self.db.query(User).count()
        total_enrollments = self.db.query(UserCourse).count()

        conversion_rate = (
            round(successful_payments / total_courses, 4) if total_courses else 0.0
        )

        return PlatformStats(
            total_revenue=int(total_revenue or 0),
            successful_payments=successful_payments,
            total_courses=total_courses,
            published_courses=published_courses,
            total_users=total_users,
            total_enrollments=total_enrollments,
            conversion_rate=conversion_rate,
        )
