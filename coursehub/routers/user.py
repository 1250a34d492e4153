# coursehub/routers/user.py
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.core.database import get_db
from coursehub.core.dependencies import ensure_self_or_admin, get_current_user
from coursehub.models.user import User
from coursehub.schemas.referral import ReferralWithCourse
from coursehub.schemas.user import ProfileUpdate, UserResponse
from coursehub.schemas.user_course import EnrolledCourseResponse
from coursehub.services.referral import ReferralService
from coursehub.services.user import UserService
from coursehub.services.user_course import UserCourseService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
def get_profile(current_user: Annotated[User, Depends(get_current_user)]):
    return current_user


@router.patch("/me", response_model=UserResponse)
def update_profile(
    data: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return UserService(db).update_profile(current_user, data)


@router.get("/{user_id}/courses", response_model=List[EnrolledCourseResponse])
def get_user_courses(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    """
    Enrollments of a user joined with their courses.
    Users see their own; admins see anyone's.
    """
    ensure_self_or_admin(current_user, user_id)
    return UserCourseService(db).get_user_courses(user_id)


@router.get("/{user_id}/referrals", response_model=List[ReferralWithCourse])
def get_user_referrals(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    ensure_self_or_admin(current_user, user_id)
    return ReferralService(db).list_for_user(user_id)
