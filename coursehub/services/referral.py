# coursehub/services/referral.py
"""Referral codes: issuing, validating and redeeming them."""

import logging
import secrets
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.exceptions import InternalError, NotFoundError, SelfReferralError
from coursehub.models.course import Course
from coursehub.models.referral import Referral
from coursehub.models.user_course import UserCourse
from coursehub.services.analytics import AnalyticsService
from coursehub.services.user_course import UserCourseService

logger = logging.getLogger(__name__)

# No 0/O, 1/I/l
CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz23456789"
MAX_CODE_ATTEMPTS = 10


def generate_code(length: int = None) -> str:
    length = length or settings.referral_code_length
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def referral_discount(price: int) -> int:
    """Discount in minor units for a referred purchase of ``price``."""
    return price * settings.referral_discount_percent // 100


class ReferralService:
    def __init__(self, db: Session):
        self.db = db
        self.enrollments = UserCourseService(db)
        self.analytics = AnalyticsService(db)

    def _get_course(self, course_id: int) -> Course:
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise NotFoundError("Course not found")
        return course

    def get_by_code(self, code: str) -> Referral:
        referral = self.db.query(Referral).filter(Referral.code == code).first()
        if not referral:
            raise NotFoundError("Invalid referral code")
        return referral

    def generate(self, owner_user_id: int, course_id: int) -> Referral:
        """Issue a new code for ``course_id`` owned by ``owner_user_id``."""
        self._get_course(course_id)

        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            code = generate_code()
            if self.db.query(Referral.id).filter(Referral.code == code).first():
                continue

            referral = Referral(
                user_id=owner_user_id, course_id=course_id, code=code, used_count=0
            )
            self.db.add(referral)
            try:
                self.db.commit()
            except IntegrityError:
                # Same code inserted concurrently
                self.db.rollback()
                logger.warning(f"Referral code collision on attempt {attempt}")
                continue

            self.db.refresh(referral)
            logger.info(
                f"Referral {referral.id} issued to user {owner_user_id} for course {course_id}"
            )
            return referral

        logger.error(f"Could not generate a unique referral code for user {owner_user_id}")
        raise InternalError("Could not generate a unique referral code")

    def list_for_user(self, user_id: int) -> List[Referral]:
        return (
            self.db.query(Referral)
            .filter(Referral.user_id == user_id)
            .order_by(Referral.created_at.desc(), Referral.id.desc())
            .all()
        )

    def validate(
        self, code: str, caller_id: Optional[int] = None
    ) -> Tuple[Referral, Course]:
        """Resolve a code for display. Read-only."""
        referral = self.get_by_code(code)
        course = self._get_course(referral.course_id)

        if caller_id is not None and caller_id == referral.user_id:
            raise SelfReferralError()

        return referral, course

    def apply(self, code: str, applying_user_id: int) -> UserCourse:
        """
        Redeem ``code``: enroll the user at the discounted price, bump the
        code's usage counter and record a ``referral_used`` event, all in one
        transaction.
        """
        referral = self.get_by_code(code)

        if applying_user_id == referral.user_id:
            raise SelfReferralError()

        course = self._get_course(referral.course_id)
        referral_id, referrer_id = referral.id, referral.user_id

        discount = referral_discount(course.price)
        enrollment = self.enrollments.add_enrollment(
            applying_user_id,
            course,
            price=course.price,
            discount=discount,
            referral_code=code,
            referred_by=referrer_id,
        )

        # Atomic in SQL so concurrent redemptions never lose an increment
        self.db.execute(
            update(Referral)
            .where(Referral.id == referral_id)
            .values(used_count=Referral.used_count + 1)
        )

        self.analytics.record_event(
            applying_user_id,
            "referral_used",
            {
                "referralId": referral_id,
                "courseId": course.id,
                "referrerId": referrer_id,
                "discount": discount,
            },
            commit=False,
        )

        self.db.commit()
        self.db.refresh(enrollment)

        logger.info(
            f"Referral {referral_id} applied by user {applying_user_id} for course {course.id}"
        )
        return enrollment
