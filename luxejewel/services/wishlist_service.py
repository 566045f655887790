# luxejewel/services/wishlist_service.py
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from luxejewel.data.models.wishlist_item import WishlistItemModel
from luxejewel.domain.errors import ConflictError, NotFoundError, ValidationError
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.repos.wishlist_repo import WishlistRepo
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


class WishlistService:
    def __init__(self, db: Session):
        self.repo = WishlistRepo(db)
        self.products = ProductRepo(db)

    def list_items(self, user_id: int | None) -> List[WishlistItemModel]:
        if user_id is None:
            raise ValidationError("User ID is required")
        return self.repo.list_items(user_id)

    def get_status(self, user_id: int | None, product_id: int) -> WishlistItemModel | None:
        if user_id is None:
            raise ValidationError("User ID is required")
        return self.repo.get_item(user_id, product_id)

    def add_item(self, user_id: int | None, product_id: int | None) -> WishlistItemModel:
        if user_id is None or not product_id:
            raise ValidationError("Valid user ID and product ID are required")

        if not self.products.get_product(product_id):
            raise NotFoundError(f"Product {product_id} not found")

        try:
            item = self.repo.add_item(WishlistItemModel(user_id=user_id, product_id=product_id))
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Item already in wishlist")

        logger.info(f"Product {product_id} added to wishlist of user {user_id}")
        return item

    def remove_item(self, user_id: int | None, product_id: int | None) -> None:
        if user_id is None or not product_id:
            raise ValidationError("User ID and Product ID are required")

        item = self.repo.get_item(user_id, product_id)
        if item:
            self.repo.delete_item(item)
            logger.info(f"Product {product_id} removed from wishlist of user {user_id}")
