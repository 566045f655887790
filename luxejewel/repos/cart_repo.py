# luxejewel/repos/cart_repo.py
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from luxejewel.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def _owner_filter(self, stmt, user_id: int | None, session_id: str | None):
        if user_id is not None:
            return stmt.where(CartItemModel.user_id == user_id)
        return stmt.where(CartItemModel.session_id == session_id)

    def get_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def list_items(self, user_id: int | None, session_id: str | None) -> List[CartItemModel]:
        stmt = select(CartItemModel).options(selectinload(CartItemModel.product))
        stmt = self._owner_filter(stmt, user_id, session_id)
        stmt = stmt.order_by(CartItemModel.added_at.desc(), CartItemModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def find_item(
        self,
        product_id: int,
        user_id: int | None,
        session_id: str | None,
        variant_id: int | None = None,
    ) -> CartItemModel | None:
        stmt = select(CartItemModel).where(CartItemModel.product_id == product_id)
        stmt = self._owner_filter(stmt, user_id, session_id)
        if variant_id is not None:
            stmt = stmt.where(CartItemModel.variant_id == variant_id)
        return self.db.execute(stmt.limit(1)).scalars().first()

    def save_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.commit()

    def clear(self, user_id: int | None, session_id: str | None, commit: bool = True) -> int:
        stmt = self._owner_filter(delete(CartItemModel), user_id, session_id)
        result = self.db.execute(stmt)
        if commit:
            self.db.commit()
        return result.rowcount
