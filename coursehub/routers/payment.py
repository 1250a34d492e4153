# coursehub/routers/payment.py
from typing import Annotated, List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.database import get_db
from coursehub.core.dependencies import ensure_self_or_admin, get_current_user
from coursehub.core.limiter import limiter
from coursehub.integrations.razorpay import RazorpayGateway, get_payment_gateway
from coursehub.models.user import User
from coursehub.schemas.payment import (
    CreateOrderRequest,
    OrderResponse,
    PaymentResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from coursehub.services.payment import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post(
    "/create-order", response_model=OrderResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit("20/minute")
def create_order(
    request: Request,
    data: CreateOrderRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    """
    Start a course purchase. The amount always comes from the course price;
    admins may create an order on behalf of another user.
    """
    user_id = data.user_id if data.user_id is not None else current_user.id
    ensure_self_or_admin(current_user, user_id)

    payment, order = PaymentService(db, gateway).create_order(data.course_id, user_id)
    return OrderResponse(
        order_id=order.id,
        amount=payment.amount,
        currency=payment.currency,
        payment_id=payment.id,
        key_id=settings.razorpay_key_id,
    )


@router.post("/verify", response_model=VerifyPaymentResponse)
@limiter.limit("30/minute")
def verify_payment(
    request: Request,
    data: VerifyPaymentRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    """Confirm a gateway payment and enroll the buyer"""
    service = PaymentService(db, gateway)
    if data.payment_id is not None:
        ensure_self_or_admin(current_user, service.get_payment(data.payment_id).user_id)

    _, enrollment = service.verify_and_enroll(
        payment_id=data.payment_id,
        gateway_payment_id=data.gateway_payment_id,
        gateway_order_id=data.gateway_order_id,
        gateway_signature=data.gateway_signature,
    )
    return VerifyPaymentResponse(success=True, user_course_id=enrollment.id)


@router.get("/me", response_model=List[PaymentResponse])
def get_my_payments(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    return PaymentService(db, gateway).get_user_payments(current_user.id)
