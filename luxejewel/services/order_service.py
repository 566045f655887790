# luxejewel/services/order_service.py
import random
import time
from typing import List

from sqlalchemy.orm import Session

from luxejewel.data.models.order import OrderModel, OrderItemModel
from luxejewel.domain.errors import NotFoundError, ValidationError
from luxejewel.domain.schemas import OrderCreate
from luxejewel.repos.cart_repo import CartRepo
from luxejewel.repos.order_repo import OrderRepo
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.services.notification_service import NotificationService
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "completed", "cancelled")


def generate_order_number() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 9999)}"


class OrderService:
    """
    Order domain, separate from the cart.
    An order is immutable once created, only its status moves.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.notification_service = NotificationService()

    def create_order(self, payload: OrderCreate) -> OrderModel:
        """
        Use Case: place an order at the end of checkout.

        1. Validates items and total
        2. Inserts the order and its items in one transaction
        3. Clears the user's server cart
        4. Queues the confirmation notification
        """
        if not payload.items or payload.total_amount <= 0:
            raise ValidationError("Valid items and total amount are required")

        for item in payload.items:
            if not self.products.get_product(item.product_id):
                raise ValidationError(f"Unknown product {item.product_id}")

        order = OrderModel(
            user_id=payload.user_id,
            order_number=generate_order_number(),
            status="pending",
            subtotal=payload.subtotal,
            tax_amount=payload.tax_amount,
            shipping_amount=payload.shipping_amount,
            discount_amount=payload.discount_amount,
            total_amount=payload.total_amount,
            shipping_address=payload.shipping_address,
            billing_address=payload.billing_address or payload.shipping_address,
            # mock payments are settled before the order is posted
            payment_status="paid",
            payment_method=payload.payment_method,
            items=[
                OrderItemModel(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    quantity=item.quantity,
                    price_at_purchase=item.price,
                )
                for item in payload.items
            ],
        )

        try:
            self.repo.create_order(order, commit=False)
            if payload.user_id is not None:
                self.carts.clear(payload.user_id, None, commit=False)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        self.db.refresh(order)
        logger.info(f"Order {order.order_number} created, total {order.total_amount}")

        email = (payload.shipping_address or {}).get("email")
        try:
            self.notification_service.send_order_confirmation(order.id, order.order_number, email)
        except Exception as e:
            # the order is already committed
            logger.warning(f"Confirmation for order {order.order_number} not queued: {e}")
        return order

    def get_order(self, order_id: int) -> OrderModel:
        order = self.repo.get_order_with_items(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def list_user_orders(self, user_id: int) -> List[OrderModel]:
        return self.repo.list_orders(user_id=user_id)

    def update_status(self, order_id: int | None, status: str | None) -> OrderModel:
        if not order_id or not status:
            raise ValidationError("Order ID and status are required")

        status = status.lower()
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Unknown order status: {status}")

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        logger.info(f"Order {order.order_number}: {order.status} -> {status}")
        return self.repo.update_order_status(order, status)

    #admin
    def search_orders(self, search: str | None = None, status: str | None = None) -> List[OrderModel]:
        orders = self.repo.list_orders()

        if search:
            term = search.lower()
            orders = [
                o for o in orders
                if term in o.order_number.lower()
                or (o.user and o.user.full_name and term in o.user.full_name.lower())
            ]

        if status and status != "all":
            orders = [o for o in orders if o.status == status]

        return orders
