from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from luxejewel.data.models.wishlist_item import WishlistItemModel


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, user_id: int, product_id: int) -> WishlistItemModel | None:
        return self.db.execute(
            select(WishlistItemModel).where(
                WishlistItemModel.user_id == user_id,
                WishlistItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def list_items(self, user_id: int) -> List[WishlistItemModel]:
        stmt = (
            select(WishlistItemModel)
            .options(selectinload(WishlistItemModel.product))
            .where(WishlistItemModel.user_id == user_id)
            .order_by(WishlistItemModel.created_at.desc(), WishlistItemModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_item(self, item: WishlistItemModel) -> WishlistItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item: WishlistItemModel) -> None:
        self.db.delete(item)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
