# coursehub/integrations/razorpay.py
"""
Razorpay client: order creation and payment signature verification.

Checkout signs ``"{order_id}|{payment_id}"`` with the account's key secret
(HMAC-SHA256, hex). A payment is only trusted once that signature matches.
"""

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass

import requests

from coursehub.core.config import settings
from coursehub.core.exceptions import InternalError

logger = logging.getLogger(__name__)


class GatewayError(InternalError):
    default_message = "Payment gateway error"


@dataclass(frozen=True)
class GatewayOrder:
    id: str
    amount: int
    currency: str
    receipt: str


class RazorpayGateway:
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        currency: str = "INR",
        live_orders: bool = False,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: int = 10,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.currency = currency
        self.live_orders = live_orders
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    # ==================== Orders ====================

    def create_order(self, amount: int, receipt: str) -> GatewayOrder:
        """
        Create an order for ``amount`` minor units.

        Without live orders the id is generated locally, which is enough for
        checkout in test mode and for local development.
        """
        if not self.live_orders:
            order_id = f"order_{secrets.token_hex(16)}"
            logger.info(f"Created local order {order_id} for {amount} {self.currency}")
            return GatewayOrder(
                id=order_id, amount=amount, currency=self.currency, receipt=receipt
            )

        try:
            response = requests.post(
                f"{self.api_url}/orders",
                auth=(self.key_id, self.key_secret),
                json={"amount": amount, "currency": self.currency, "receipt": receipt},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"Razorpay order creation failed: {e}")
            raise GatewayError("Payment gateway unavailable")

        logger.info(f"Created Razorpay order {data['id']} for {amount} {self.currency}")
        return GatewayOrder(
            id=data["id"],
            amount=int(data.get("amount", amount)),
            currency=data.get("currency", self.currency),
            receipt=data.get("receipt", receipt),
        )

    # ==================== Signatures ====================

    def sign(self, order_id: str, payment_id: str) -> str:
        if not self.key_secret:
            logger.error("Razorpay key secret is not configured")
            raise GatewayError("Payment gateway is not configured")
        message = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(
            self.key_secret.encode("utf-8"), message, hashlib.sha256
        ).hexdigest()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        expected = self.sign(order_id, payment_id)
        # compare_digest only accepts ASCII str, so compare bytes
        return hmac.compare_digest(
            expected.encode("utf-8"), signature.strip().lower().encode("utf-8")
        )


def get_payment_gateway() -> RazorpayGateway:
    """FastAPI dependency for the configured gateway."""
    return RazorpayGateway(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        currency=settings.payment_currency,
        live_orders=settings.razorpay_live_orders,
        api_url=settings.razorpay_api_url,
        timeout=settings.razorpay_timeout,
    )
