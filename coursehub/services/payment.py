# coursehub/services/payment.py
"""
Course purchase: gateway order creation and payment verification.

``create_order`` stores a pending Payment priced from the course row, never
from the client. ``verify_and_enroll`` checks the gateway signature and, in
one transaction, marks the payment successful and enrolls the buyer.
"""

import logging
import math
import time
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from coursehub.core.decorator import retry_transient
from coursehub.core.exceptions import (
    AlreadyEnrolledError,
    InvalidInputError,
    MissingFieldsError,
    NotFoundError,
    SignatureMismatchError,
)
from coursehub.integrations.razorpay import GatewayOrder, RazorpayGateway
from coursehub.models.course import Course
from coursehub.models.payment import Payment
from coursehub.models.user import User
from coursehub.models.user_course import UserCourse
from coursehub.services.analytics import AnalyticsService
from coursehub.services.user_course import UserCourseService

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, db: Session, gateway: RazorpayGateway):
        self.db = db
        self.gateway = gateway
        self.enrollments = UserCourseService(db)
        self.analytics = AnalyticsService(db)

    # ==================== Orders ====================

    def create_order(self, course_id: int, user_id: int) -> Tuple[Payment, GatewayOrder]:
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise NotFoundError("Course not found")

        if not self.db.query(User.id).filter(User.id == user_id).first():
            raise NotFoundError("User not found")

        order = self.gateway.create_order(
            amount=course.price, receipt=f"receipt_{int(time.time() * 1000)}"
        )

        payment = Payment(
            user_id=user_id,
            course_id=course.id,
            amount=course.price,
            currency=order.currency,
            status="pending",
            razorpay_order_id=order.id,
        )
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)

        logger.info(
            f"Order {order.id} created: payment {payment.id}, user {user_id}, "
            f"course {course.id}, amount {payment.amount} {payment.currency}"
        )
        return payment, order

    # ==================== Verification ====================

    def verify_and_enroll(
        self,
        payment_id: Optional[int],
        gateway_payment_id: Optional[str],
        gateway_order_id: Optional[str],
        gateway_signature: Optional[str],
    ) -> Tuple[Payment, UserCourse]:
        if not all([payment_id, gateway_payment_id, gateway_order_id, gateway_signature]):
            raise MissingFieldsError("Missing payment verification details")

        payment = self.get_payment(payment_id)

        # A replayed confirmation of an already-verified payment is a no-op
        replay = (
            payment.status == "success"
            and payment.razorpay_payment_id == gateway_payment_id
        )
        if payment.status != "pending" and not replay:
            raise NotFoundError("No pending payment with this id")

        if payment.razorpay_order_id != gateway_order_id:
            raise InvalidInputError("Order id does not match this payment")

        if not self.gateway.verify_signature(
            gateway_order_id, gateway_payment_id, gateway_signature
        ):
            if payment.status == "pending":
                payment.status = "failed"
                payment.razorpay_payment_id = gateway_payment_id
                self.db.commit()
            logger.warning(
                f"Signature mismatch for payment {payment.id} (order {gateway_order_id})"
            )
            raise SignatureMismatchError()

        enrollment = self._settle(payment.id, gateway_payment_id)
        payment = self.get_payment(payment_id)
        return payment, enrollment

    @retry_transient
    def _settle(self, payment_id: int, gateway_payment_id: str) -> UserCourse:
        """
        Mark the payment successful and enroll the buyer in one commit.
        Retried on transient database errors; an existing enrollment is kept.
        """
        try:
            payment = self.db.query(Payment).filter(Payment.id == payment_id).one()
            course = self.db.query(Course).filter(Course.id == payment.course_id).one()

            try:
                enrollment = self.enrollments.add_enrollment(
                    payment.user_id, course, price=payment.amount
                )
                created = True
            except AlreadyEnrolledError:
                # add_enrollment may have rolled back; reload before writing
                payment = self.db.query(Payment).filter(Payment.id == payment_id).one()
                enrollment = self.enrollments.get_enrollment(
                    payment.user_id, payment.course_id
                )
                created = False

            if payment.status != "success":
                payment.status = "success"
                payment.razorpay_payment_id = gateway_payment_id
                self.analytics.record_event(
                    payment.user_id,
                    "course_purchased",
                    {
                        "paymentId": payment.id,
                        "courseId": payment.course_id,
                        "amount": payment.amount,
                        "currency": payment.currency,
                    },
                    commit=False,
                )

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(enrollment)
        if created:
            logger.info(
                f"Payment {payment_id} verified; enrolled user {enrollment.user_id} "
                f"in course {enrollment.course_id}"
            )
        else:
            logger.info(f"Payment {payment_id} verified; enrollment already existed")
        return enrollment

    # ==================== Queries ====================

    def get_payment(self, payment_id: int) -> Payment:
        payment = self.db.query(Payment).filter(Payment.id == payment_id).first()
        if not payment:
            raise NotFoundError("Payment not found")
        return payment

    def get_user_payments(self, user_id: int) -> List[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .all()
        )

    def get_payments(
        self,
        page: int = 1,
        size: int = 20,
        status: Optional[str] = None,
        user_id: Optional[int] = None,
        course_id: Optional[int] = None,
    ) -> Tuple[List[Payment], dict]:
        """Admin sales listing"""
        query = self.db.query(Payment)

        if status:
            query = query.filter(Payment.status == status)
        if user_id is not None:
            query = query.filter(Payment.user_id == user_id)
        if course_id is not None:
            query = query.filter(Payment.course_id == course_id)

        total = query.count()

        offset = (page - 1) * size
        payments = (
            query.order_by(Payment.created_at.desc(), Payment.id.desc())
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

        return payments, pagination
