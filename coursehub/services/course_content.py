# coursehub/services/course_content.py
from typing import List

from sqlalchemy.orm import Session

from coursehub.core.exceptions import NotFoundError
from coursehub.models.course import Course
from coursehub.models.course_content import CourseContent
from coursehub.schemas.course_content import CourseContentCreate, CourseContentUpdate


class CourseContentService:
    def __init__(self, db: Session):
        self.db = db

    def _ensure_course(self, course_id: int) -> None:
        if not self.db.query(Course.id).filter(Course.id == course_id).first():
            raise NotFoundError("Course not found")

    def get_course_content(self, course_id: int) -> List[CourseContent]:
        """Content items of a course in display order"""
        self._ensure_course(course_id)
        return (
            self.db.query(CourseContent)
            .filter(CourseContent.course_id == course_id)
            .order_by(CourseContent.order.asc(), CourseContent.id.asc())
            .all()
        )

    def get_content(self, content_id: int) -> CourseContent:
        content = (
            self.db.query(CourseContent).filter(CourseContent.id == content_id).first()
        )
        if not content:
            raise NotFoundError("Content not found")
        return content

    def lesson_ids(self, course_id: int) -> set:
        rows = (
            self.db.query(CourseContent.id)
            .filter(CourseContent.course_id == course_id)
            .all()
        )
        return {row.id for row in rows}

    def create_content(self, content_in: CourseContentCreate) -> CourseContent:
        self._ensure_course(content_in.course_id)

        content = CourseContent(**content_in.model_dump())
        self.db.add(content)
        self.db.commit()
        self.db.refresh(content)

        return content

    def update_content(
        self, content_id: int, content_in: CourseContentUpdate
    ) -> CourseContent:
        content = self.get_content(content_id)

        for field, value in content_in.model_dump(exclude_unset=True).items():
            setattr(content, field, value)

        self.db.commit()
        self.db.refresh(content)

        return content

    def delete_content(self, content_id: int) -> bool:
        content = self.get_content(content_id)

        self.db.delete(content)
        self.db.commit()

        return True
