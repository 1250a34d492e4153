# coursehub/models/user_course.py
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from coursehub.core.database import Base


class UserCourse(Base):
    """
    A user's enrollment in a course, created by a verified payment or by
    applying a referral code. One row per (user, course).
    """

    __tablename__ = "user_courses"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_user_courses_user_course"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # User and Course relationship
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)

    # Progress tracking
    completed_lessons = Column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list
    )  # CourseContent ids
    progress = Column(Integer, default=0, nullable=False)  # 0-100

    # Referral attribution
    referral_code = Column(String(64), nullable=True, index=True)
    referred_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Pricing snapshot, minor units
    price = Column(Integer, nullable=False, default=0)
    discount = Column(Integer, nullable=False, default=0)
    final_price = Column(Integer, nullable=False, default=0)

    # Timestamps
    purchased_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    last_accessed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<UserCourse(id={self.id}, user_id={self.user_id}, course_id={self.course_id}, progress={self.progress})>"
