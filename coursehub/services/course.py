# coursehub/services/course.py
import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from coursehub.core.decorator import db_exception
from coursehub.core.exceptions import ConflictError, NotFoundError
from coursehub.models.course import Course
from coursehub.models.payment import Payment
from coursehub.models.user_course import UserCourse
from coursehub.schemas.course import CourseCreate, CourseUpdate

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(self, db: Session):
        self.db = db

    @db_exception
    def create_course(self, course_in: CourseCreate) -> Course:
        """Create a new course (admin only)"""
        course = Course(**course_in.model_dump())

        self.db.add(course)
        self.db.commit()
        self.db.refresh(course)

        logger.info(f"Course created: {course.id} ({course.slug})")
        return course

    def get_course(self, course_id: int) -> Course:
        """Get a course by ID or raise NotFound"""
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise NotFoundError("Course not found")
        return course

    def get_course_by_slug(self, slug: str, published_only: bool = True) -> Course:
        query = self.db.query(Course).filter(Course.slug == slug)
        if published_only:
            query = query.filter(Course.is_published.is_(True))
        course = query.first()
        if not course:
            raise NotFoundError("Course not found")
        return course

    def _filtered_query(
        self,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        published_only: bool = True,
    ):
        query = self.db.query(Course)

        if published_only:
            query = query.filter(Course.is_published.is_(True))

        # "all" is what the catalog filter sends for no filter
        if category and category != "all":
            query = query.filter(Course.category == category)

        if featured is not None:
            query = query.filter(Course.is_featured.is_(featured))

        # Search by title or description
        if search:
            search_pattern = f"%{search}%"
            query = query.filter(
                (Course.title.ilike(search_pattern))
                | (Course.description.ilike(search_pattern))
            )

        return query

    def list_courses(
        self,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[Course]:
        """Public catalog: published courses only, featured first"""
        return (
            self._filtered_query(category, featured, search)
            .order_by(
                Course.is_featured.desc(), Course.created_at.desc(), Course.id.desc()
            )
            .all()
        )

    def get_featured_courses(self) -> List[Course]:
        return self.list_courses(featured=True)

    def get_courses(
        self,
        page: int = 1,
        size: int = 20,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        published: Optional[bool] = None,
    ) -> Tuple[List[Course], dict]:
        """Admin listing, including unpublished courses, with pagination"""
        query = self._filtered_query(category, featured, search, published_only=False)

        if published is not None:
            query = query.filter(Course.is_published.is_(published))

        total = query.count()

        offset = (page - 1) * size
        courses = (
            query.order_by(Course.created_at.desc(), Course.id.desc())
            .offset(offset)
            .limit(size)
            .all()
        )

        total_pages = math.ceil(total / size) if size > 0 else 0
        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": total_pages,
        }

        return courses, pagination

    @db_exception
    def update_course(self, course_id: int, course_in: CourseUpdate) -> Course:
        """Update a course (admin only)"""
        course = self.get_course(course_id)

        for field, value in course_in.model_dump(exclude_unset=True).items():
            setattr(course, field, value)

        self.db.commit()
        self.db.refresh(course)

        return course

    def delete_course(self, course_id: int) -> bool:
        """
        Delete a course with its content and referral codes.

        Refused while anyone is enrolled or any payment references it, since
        those rows are the record of what users paid for.
        """
        course = self.get_course(course_id)

        enrollments = (
            self.db.query(UserCourse).filter(UserCourse.course_id == course_id).count()
        )
        payments = self.db.query(Payment).filter(Payment.course_id == course_id).count()
        if enrollments or payments:
            raise ConflictError(
                "Course has enrollments or payments; unpublish it instead"
            )

        # contents and referrals go with it (cascade="all, delete-orphan")
        self.db.delete(course)
        self.db.commit()

        logger.info(f"Course deleted: {course_id}")
        return True
