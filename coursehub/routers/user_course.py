# coursehub/routers/user_course.py
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.core.database import get_db
from coursehub.core.dependencies import ensure_self_or_admin, get_current_user
from coursehub.models.user import User
from coursehub.schemas.user_course import ProgressUpdate, UserCourseResponse
from coursehub.services.user_course import UserCourseService

router = APIRouter(prefix="/user-courses", tags=["User Courses"])


@router.post("/{user_course_id}/progress", response_model=UserCourseResponse)
def update_progress(
    user_course_id: int,
    data: ProgressUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    """
    Replace the completed lessons and progress of an enrollment.
    Only the enrolled user or an admin may do this.
    """
    service = UserCourseService(db)
    enrollment = service.get_enrollment_by_id(user_course_id)
    ensure_self_or_admin(current_user, enrollment.user_id)

    return service.update_progress(
        user_course_id, data.completed_lessons, data.progress
    )
