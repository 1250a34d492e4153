# coursehub/models/payment.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from coursehub.core.database import Base


class Payment(Base):
    """
    One gateway order. Created ``pending``; moves once to ``success`` or
    ``failed`` and never changes afterwards.
    """

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)

    amount = Column(Integer, nullable=False)  # Minor units
    currency = Column(String(3), nullable=False, default="INR")
    status = Column(
        String(20), nullable=False, default="pending", index=True
    )  # pending, success, failed

    # Gateway references
    razorpay_order_id = Column(String(64), unique=True, nullable=False, index=True)
    razorpay_payment_id = Column(String(64), nullable=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<Payment(id={self.id}, order='{self.razorpay_order_id}', status='{self.status}')>"
