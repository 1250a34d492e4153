# coursehub/schemas/user_course.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from coursehub.schemas.base import CamelModel
from coursehub.schemas.course import CourseResponse


class UserCourseResponse(CamelModel):
    id: int
    user_id: int
    course_id: int
    completed_lessons: List[int]
    progress: int
    referral_code: Optional[str] = None
    referred_by: Optional[int] = None
    price: int
    discount: int
    final_price: int
    purchased_at: datetime
    last_accessed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class EnrolledCourseResponse(UserCourseResponse):
    """Enrollment joined with its course."""

    course: CourseResponse


class ProgressUpdate(CamelModel):
    completed_lessons: List[int] = Field(..., description="Completed content ids")
    # Range is enforced by the service so the error says which rule failed
    progress: int
