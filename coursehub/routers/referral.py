# coursehub/routers/referral.py
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from coursehub.core.database import get_db
from coursehub.core.dependencies import (
    ensure_self_or_admin,
    get_current_user,
    get_optional_user,
)
from coursehub.core.limiter import limiter
from coursehub.models.user import User
from coursehub.schemas.referral import (
    ReferralApplyResponse,
    ReferralCreate,
    ReferralResponse,
    ReferralValidationResponse,
    ReferralWithCourse,
)
from coursehub.schemas.user_course import UserCourseResponse
from coursehub.services.referral import ReferralService

router = APIRouter(
    prefix="/referrals",
    tags=["Referrals"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=ReferralResponse, status_code=status.HTTP_201_CREATED)
def create_referral(
    data: ReferralCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    """Issue a referral code for a course, owned by the caller"""
    return ReferralService(db).generate(current_user.id, data.course_id)


@router.get("", response_model=List[ReferralWithCourse])
def list_my_referrals(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return ReferralService(db).list_for_user(current_user.id)


@router.get("/{code}", response_model=ReferralWithCourse)
def get_referral(
    code: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    """Look up a code with its usage. Owner or admin only."""
    referral = ReferralService(db).get_by_code(code)
    ensure_self_or_admin(current_user, referral.user_id)
    return referral


@router.get("/{code}/validate", response_model=ReferralValidationResponse)
@limiter.limit("30/minute")
def validate_referral(
    request: Request,
    code: str,
    current_user: Annotated[Optional[User], Depends(get_optional_user)],
    db: Session = Depends(get_db),
):
    """
    Check a code and show the course it discounts.
    Signed-in callers are told when the code is their own.
    """
    caller_id = current_user.id if current_user else None
    referral, _ = ReferralService(db).validate(code, caller_id)
    return ReferralValidationResponse(
        valid=True, referral=ReferralWithCourse.model_validate(referral)
    )


@router.post("/{code}/apply", response_model=ReferralApplyResponse)
@limiter.limit("10/minute")
def apply_referral(
    request: Request,
    code: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    """Redeem a code: enroll the caller at the discounted price"""
    enrollment = ReferralService(db).apply(code, current_user.id)
    return ReferralApplyResponse(
        user_course=UserCourseResponse.model_validate(enrollment)
    )
