# coursehub/schemas/payment.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from coursehub.schemas.base import CamelModel


class CreateOrderRequest(CamelModel):
    course_id: int = Field(..., gt=0)
    user_id: Optional[int] = Field(
        None, gt=0, description="Defaults to the authenticated user"
    )


class OrderResponse(CamelModel):
    order_id: str
    amount: int
    currency: str
    payment_id: int
    key_id: str


class VerifyPaymentRequest(CamelModel):
    """Empty strings are allowed through so the service can report them."""

    payment_id: Optional[int] = None
    gateway_payment_id: Optional[str] = None
    gateway_order_id: Optional[str] = None
    gateway_signature: Optional[str] = None


class VerifyPaymentResponse(CamelModel):
    success: bool
    user_course_id: Optional[int] = None


class PaymentResponse(CamelModel):
    id: int
    user_id: int
    course_id: int
    amount: int
    currency: str
    status: str
    razorpay_order_id: str
    razorpay_payment_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PaymentListResponse(CamelModel):
    payments: List[PaymentResponse]
    total: int
    page: int
    size: int
    total_pages: int
