import hashlib
import hmac

import razorpay
from fastapi import Request

from checkout.pricing import CURRENCY


class RazorpayGateway:
    """Thin wrapper over the Razorpay SDK, built once at startup."""

    def __init__(self, key_id: str, key_secret: str):
        self.key_id = key_id
        self._key_secret = key_secret
        self.client = razorpay.Client(auth=(key_id, key_secret))

    def create_order(self, amount: int, currency: str = CURRENCY):
        """Create a gateway order; `amount` is in minor units (paise)."""
        return self.client.order.create(data={
            "amount": amount,
            "currency": currency,
        })

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        message = f"{order_id}|{payment_id}"
        return hmac.new(
            self._key_secret.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not (order_id and payment_id and signature):
            return False
        return hmac.compare_digest(
            self.expected_signature(order_id, payment_id).encode("utf-8"),
            signature.encode("utf-8"),
        )


def get_gateway(request: Request) -> RazorpayGateway:
    return request.app.state.gateway
