# coursehub/services/user_course.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from coursehub.core.exceptions import (
    AlreadyEnrolledError,
    InvalidInputError,
    NotFoundError,
)
from coursehub.models.course import Course
from coursehub.models.user_course import UserCourse
from coursehub.services.course_content import CourseContentService

logger = logging.getLogger(__name__)


class UserCourseService:
    def __init__(self, db: Session):
        self.db = db

    def get_enrollment(self, user_id: int, course_id: int) -> Optional[UserCourse]:
        """Get specific enrollment for a user and course"""
        return (
            self.db.query(UserCourse)
            .filter(
                and_(
                    UserCourse.user_id == user_id,
                    UserCourse.course_id == course_id,
                )
            )
            .first()
        )

    def get_enrollment_by_id(self, enrollment_id: int) -> UserCourse:
        enrollment = (
            self.db.query(UserCourse).filter(UserCourse.id == enrollment_id).first()
        )
        if not enrollment:
            raise NotFoundError("User course not found")
        return enrollment

    def get_user_courses(self, user_id: int) -> List[UserCourse]:
        """All enrollments of a user with their course loaded"""
        return (
            self.db.query(UserCourse)
            .options(joinedload(UserCourse.course))
            .filter(UserCourse.user_id == user_id)
            .order_by(UserCourse.purchased_at.desc(), UserCourse.id.desc())
            .all()
        )

    def add_enrollment(
        self,
        user_id: int,
        course: Course,
        price: int,
        discount: int = 0,
        referral_code: Optional[str] = None,
        referred_by: Optional[int] = None,
    ) -> UserCourse:
        """
        Insert an enrollment into the current transaction without committing.

        The (user_id, course_id) unique constraint is the real guard; when it
        fires the whole transaction is rolled back and AlreadyEnrolledError
        raised, so callers must not have uncommitted work they want to keep.
        """
        if self.get_enrollment(user_id, course.id):
            raise AlreadyEnrolledError()

        enrollment = UserCourse(
            user_id=user_id,
            course_id=course.id,
            completed_lessons=[],
            progress=0,
            referral_code=referral_code,
            referred_by=referred_by,
            price=price,
            discount=discount,
            final_price=price - discount,
        )
        self.db.add(enrollment)

        try:
            self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent enrollment for the same pair
            self.db.rollback()
            logger.info(
                f"Duplicate enrollment rejected by constraint: user {user_id}, course {course.id}"
            )
            raise AlreadyEnrolledError()

        return enrollment

    def update_progress(
        self, enrollment_id: int, completed_lessons: List[int], progress: int
    ) -> UserCourse:
        """Overwrite lesson completion and progress for an enrollment"""
        enrollment = self.get_enrollment_by_id(enrollment_id)

        if progress is None or not 0 <= progress <= 100:
            raise InvalidInputError("Progress must be between 0 and 100")

        # Keep first occurrence order, drop repeats
        lessons = list(dict.fromkeys(completed_lessons))

        course_lessons = CourseContentService(self.db).lesson_ids(enrollment.course_id)
        unknown = [lesson for lesson in lessons if lesson not in course_lessons]
        if unknown:
            raise InvalidInputError(
                f"Lessons {unknown} do not belong to course {enrollment.course_id}"
            )

        now = datetime.now(timezone.utc)
        enrollment.completed_lessons = lessons
        enrollment.progress = progress
        enrollment.last_accessed_at = now

        # Complete once everything is done; a later regression reopens it
        if progress == 100 and set(lessons) >= course_lessons:
            if not enrollment.completed_at:
                enrollment.completed_at = now
        else:
            enrollment.completed_at = None

        self.db.commit()
        self.db.refresh(enrollment)

        return enrollment
