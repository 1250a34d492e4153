# coursehub/models/relations.py

from sqlalchemy.orm import relationship

# Import all relevant models
from .course import Course
from .course_content import CourseContent
from .payment import Payment
from .referral import Referral
from .user import User
from .user_course import UserCourse


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # --- Catalog Relationships ---

    # 1. Course to Contents (One-to-Many), deleted with the course
    Course.contents = relationship(
        "CourseContent",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseContent.order",
    )
    CourseContent.course = relationship("Course", back_populates="contents")

    # 2. Course to Referrals (One-to-Many), deleted with the course
    Course.referrals = relationship(
        "Referral",
        back_populates="course",
        cascade="all, delete-orphan",
    )
    Referral.course = relationship("Course", back_populates="referrals")

    # --- Purchase System Relationships ---

    # 3. User to owned Referrals (One-to-Many)
    User.referrals = relationship("Referral", back_populates="owner")
    Referral.owner = relationship("User", back_populates="referrals")

    # 4. User to Enrollments (One-to-Many)
    User.enrollments = relationship(
        "UserCourse",
        back_populates="user",
        foreign_keys="UserCourse.user_id",
    )
    UserCourse.user = relationship(
        "User",
        back_populates="enrollments",
        foreign_keys="UserCourse.user_id",
    )
    UserCourse.referrer = relationship(
        "User",
        foreign_keys="UserCourse.referred_by",
        viewonly=True,
    )

    # 5. Course to Enrollments (One-to-Many), deletion blocked while present
    Course.enrollments = relationship("UserCourse", back_populates="course")
    UserCourse.course = relationship("Course", back_populates="enrollments")

    # 6. Payments to User and Course (Many-to-One)
    User.payments = relationship("Payment", back_populates="user")
    Payment.user = relationship("User", back_populates="payments")
    Course.payments = relationship("Payment", back_populates="course")
    Payment.course = relationship("Course", back_populates="payments")
