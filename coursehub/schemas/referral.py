# coursehub/schemas/referral.py
from datetime import datetime

from pydantic import Field

from coursehub.schemas.base import CamelModel
from coursehub.schemas.course import CourseSummary
from coursehub.schemas.user_course import UserCourseResponse


class ReferralCreate(CamelModel):
    course_id: int = Field(..., gt=0)


class ReferralResponse(CamelModel):
    id: int
    user_id: int
    course_id: int
    code: str
    used_count: int
    created_at: datetime


class ReferralWithCourse(ReferralResponse):
    course: CourseSummary


class ReferralValidationResponse(CamelModel):
    valid: bool = True
    referral: ReferralWithCourse


class ReferralApplyResponse(CamelModel):
    success: bool = True
    message: str = "Referral applied successfully"
    user_course: UserCourseResponse
