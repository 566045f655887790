# luxejewel/services/cart_service.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from luxejewel.data.models.cart_item import CartItemModel
from luxejewel.domain.errors import NotFoundError, ValidationError
from luxejewel.repos.cart_repo import CartRepo
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Server-side shopping cart.
    Rows belong to a logged-in user (user_id) or an anonymous visitor (session_id);
    user_id wins when both are given.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query
    def get_cart(self, user_id: int | None, session_id: str | None) -> List[CartItemModel]:
        if user_id is None and not session_id:
            raise ValidationError("User ID or Session ID is required")
        return self.repo.list_items(user_id, session_id)

    #commands
    def add_item(
        self,
        product_id: int | None,
        quantity: int = 1,
        user_id: int | None = None,
        session_id: str | None = None,
        variant_id: int | None = None,
    ) -> CartItemModel:
        if not product_id or quantity <= 0:
            raise ValidationError("Valid product ID and quantity are required")

        if user_id is None and not session_id:
            raise ValidationError("User ID or Session ID is required")

        if not self.products.get_product(product_id):
            raise NotFoundError(f"Product {product_id} not found")

        if user_id is not None:
            session_id = None

        existing = self.repo.find_item(product_id, user_id, session_id, variant_id)
        if existing:
            logger.info(
                f"Product {product_id} already in cart, quantity "
                f"{existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
            existing.updated_at = datetime.now(timezone.utc)
            return self.repo.save_item(existing)

        logger.info(f"Adding product {product_id} to cart of {user_id or session_id}")
        return self.repo.save_item(
            CartItemModel(
                user_id=user_id,
                session_id=session_id,
                product_id=product_id,
                variant_id=variant_id,
                quantity=quantity,
            )
        )

    def update_quantity(self, item_id: int | None, quantity: int) -> CartItemModel | None:
        """Returns the updated row, or None when quantity 0 removed it."""
        if not item_id or quantity < 0:
            raise ValidationError("Valid cart item ID and quantity are required")

        item = self.repo.get_item(item_id)
        if not item:
            raise NotFoundError("Cart item not found")

        if quantity == 0:
            self.repo.delete_item(item)
            logger.info(f"Cart item {item_id} removed")
            return None

        item.quantity = quantity
        item.updated_at = datetime.now(timezone.utc)
        return self.repo.save_item(item)

    def remove(
        self,
        item_id: int | None = None,
        user_id: int | None = None,
        session_id: str | None = None,
    ) -> None:
        if item_id:
            item = self.repo.get_item(item_id)
            if item:
                self.repo.delete_item(item)
            return

        if user_id is None and not session_id:
            raise ValidationError("ID, User ID, or Session ID is required")

        removed = self.repo.clear(user_id, session_id)
        logger.info(f"Cleared {removed} cart rows of {user_id or session_id}")
