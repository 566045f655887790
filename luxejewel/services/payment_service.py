# luxejewel/services/payment_service.py
"""
Simulated payment provider.

Nothing here talks to a real gateway: payments succeed at random after a short
delay so the checkout flow can exercise both outcomes.
"""
import random
import secrets
import string
import time
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel

from luxejewel.utils.settings import MOCK_PAYMENT_DELAY_SECONDS
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

PAYMENT_SUCCESS_RATE = 0.9
CONFIRM_SUCCESS_RATE = 0.95

_ALPHABET = string.ascii_lowercase + string.digits


class PaymentDetails(BaseModel):
    amount: Decimal
    currency: str = "usd"
    description: str = ""
    receipt_email: Optional[str] = None


class PaymentResult(BaseModel):
    id: str
    status: Literal["succeeded", "failed", "processing"]
    amount: Decimal
    currency: str
    receipt_url: Optional[str] = None
    error: Optional[str] = None


class PaymentIntent(BaseModel):
    id: str
    client_secret: str


def _random_id(prefix: str, length: int = 9, rng: random.Random | None = None) -> str:
    rng = rng or random
    return prefix + "".join(rng.choice(_ALPHABET) for _ in range(length))


def process_mock_payment(
    details: PaymentDetails,
    rng: random.Random | None = None,
    delay: float | None = None,
) -> PaymentResult:
    time.sleep(MOCK_PAYMENT_DELAY_SECONDS if delay is None else delay)
    rng = rng or random

    payment_id = _random_id("pay_", rng=rng)

    if rng.random() < PAYMENT_SUCCESS_RATE:
        logger.info(f"Mock payment {payment_id} succeeded: {details.amount} {details.currency}")
        return PaymentResult(
            id=payment_id,
            status="succeeded",
            amount=details.amount,
            currency=details.currency,
            receipt_url=f"https://example.com/receipt/{payment_id}",
        )

    logger.warning(f"Mock payment {payment_id} failed: {details.amount} {details.currency}")
    return PaymentResult(
        id=payment_id,
        status="failed",
        amount=details.amount,
        currency=details.currency,
        error="Insufficient funds",
    )


def create_mock_payment_intent(
    amount: Decimal,
    currency: str,
    receipt_email: str | None = None,
    delay: float | None = None,
) -> PaymentIntent:
    """Stripe-like payment intent."""
    time.sleep(MOCK_PAYMENT_DELAY_SECONDS / 3 if delay is None else delay)
    intent_id = _random_id("pi_")
    return PaymentIntent(id=intent_id, client_secret=f"{intent_id}_secret_{secrets.token_hex(12)}")


def confirm_mock_payment(
    payment_intent_id: str,
    payment_method_id: str,
    rng: random.Random | None = None,
    delay: float | None = None,
) -> PaymentResult:
    time.sleep(MOCK_PAYMENT_DELAY_SECONDS * 2 / 3 if delay is None else delay)
    rng = rng or random
    payment_id = _random_id("pay_", rng=rng)

    if rng.random() < CONFIRM_SUCCESS_RATE:
        return PaymentResult(
            id=payment_id,
            status="succeeded",
            amount=Decimal("0"),
            currency="usd",
            receipt_url=f"https://example.com/receipt/{payment_id}",
        )
    return PaymentResult(
        id=payment_id,
        status="failed",
        amount=Decimal("0"),
        currency="usd",
        error="Payment declined by issuer",
    )
