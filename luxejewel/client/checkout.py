# luxejewel/client/checkout.py
"""
Three-step checkout: shipping -> payment -> complete.

The flow reads the cart store, charges the mock payment provider and posts
the order to the API. A declined payment or a rejected order keeps the flow
on the payment step so the customer can retry.
"""
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from luxejewel.client.api_client import StorefrontAPIError, StorefrontClient
from luxejewel.client.cart_store import CartStore
from luxejewel.domain.errors import ValidationError
from luxejewel.services.payment_service import PaymentDetails, process_mock_payment
from luxejewel.utils.settings import FLAT_SHIPPING_RATE, FREE_SHIPPING_THRESHOLD, TAX_RATE
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")

SHIPPING = "shipping"
PAYMENT = "payment"
COMPLETE = "complete"


class EmptyCartError(Exception):
    pass


class CheckoutStateError(Exception):
    pass


class PaymentDeclinedError(Exception):
    pass


class OrderCreationError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ShippingInfo(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip: str = Field(..., min_length=1)
    phone: str = ""
    country: str = "US"


class CardDetails(BaseModel):
    card_number: str = ""
    expiry: str = ""
    cvc: str = ""
    name_on_card: str = ""


def shipping_for(subtotal: Decimal) -> Decimal:
    return Decimal("0") if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_RATE


def tax_for(subtotal: Decimal) -> Decimal:
    return (subtotal * TAX_RATE).quantize(CENTS)


class CheckoutFlow:
    def __init__(
        self,
        cart: CartStore,
        client: StorefrontClient,
        user_id: int | None = None,
        payment: Callable[..., Any] = process_mock_payment,
        payment_delay: float | None = None,
    ):
        if not cart.items:
            raise EmptyCartError("Cart is empty")

        self.cart = cart
        self.client = client
        self.user_id = user_id
        self.payment = payment
        self.payment_delay = payment_delay

        self.step = SHIPPING
        self.shipping_info: Optional[ShippingInfo] = None
        self.order: Optional[Dict[str, Any]] = None
        self.final_total: Optional[Decimal] = None
        self.final_shipping: Optional[Decimal] = None

    def _require(self, step: str) -> None:
        if self.step != step:
            raise CheckoutStateError(f"Checkout is at '{self.step}', expected '{step}'")

    # ---------- amounts ----------
    @property
    def subtotal(self) -> Decimal:
        return self.cart.get_subtotal()

    @property
    def shipping(self) -> Decimal:
        return shipping_for(self.subtotal)

    @property
    def tax(self) -> Decimal:
        return tax_for(self.subtotal)

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.shipping + self.tax

    # ---------- steps ----------
    def submit_shipping(self, info: Dict[str, Any]) -> None:
        self._require(SHIPPING)
        try:
            self.shipping_info = ShippingInfo(**info)
        except PydanticValidationError as e:
            missing = sorted({str(err["loc"][0]) for err in e.errors()})
            raise ValidationError(f"Missing shipping fields: {', '.join(missing)}")
        self.step = PAYMENT

    def back(self) -> None:
        self._require(PAYMENT)
        self.step = SHIPPING

    def submit_payment(self, card: Dict[str, Any] | None = None) -> Dict[str, Any]:
        self._require(PAYMENT)
        CardDetails(**(card or {}))

        subtotal, shipping, tax = self.subtotal, self.shipping, self.tax
        total = subtotal + shipping + tax

        result = self.payment(
            PaymentDetails(
                amount=total,
                currency="usd",
                description=f"Order for {self.shipping_info.email}",
                receipt_email=self.shipping_info.email,
            ),
            delay=self.payment_delay,
        )
        if result.status != "succeeded":
            logger.warning(f"Payment declined: {result.error}")
            raise PaymentDeclinedError(result.error or "Payment failed")

        address = self.shipping_info.model_dump()
        payload = {
            "user_id": self.user_id,
            "items": [
                {
                    "product_id": item["product_id"],
                    "quantity": item["quantity"],
                    "price": str((item.get("product") or {}).get("price") or 0),
                }
                for item in self.cart.items
            ],
            "shipping_address": address,
            "billing_address": address,
            "subtotal": str(subtotal),
            "tax_amount": str(tax),
            "shipping_amount": str(shipping),
            "discount_amount": "0",
            "total_amount": str(total),
            "payment_method": "mock-card",
        }

        try:
            order = self.client.create_order(payload)
        except StorefrontAPIError as e:
            logger.error(f"Order creation failed after payment {result.id}: {e.detail}")
            raise OrderCreationError(str(e.detail), status_code=e.status_code)

        self.order = order
        self.final_total = total
        self.final_shipping = shipping
        self.cart.clear_cart()
        self.step = COMPLETE

        logger.info(f"Checkout complete: order {order.get('order_number')} total {total}")
        return order
