# luxejewel/repos/order_repo.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from luxejewel.data.models.order import OrderModel, OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel, commit: bool = True) -> OrderModel:
        self.db.add(order)
        if commit:
            self.db.commit()
            self.db.refresh(order)
        else:
            self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_with_items(self, order_id: int) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items).selectinload(OrderItemModel.product))
            .where(OrderModel.id == order_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders(self, user_id: int | None = None, limit: int | None = None) -> List[OrderModel]:
        stmt = select(OrderModel).options(selectinload(OrderModel.user))
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        order.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(order)
        return order

    def units_sold_by_product(self) -> List[tuple]:
        """(product_id, units, revenue) over all order items."""
        stmt = (
            select(
                OrderItemModel.product_id,
                func.sum(OrderItemModel.quantity),
                func.sum(OrderItemModel.quantity * OrderItemModel.price_at_purchase),
            )
            .group_by(OrderItemModel.product_id)
        )
        return list(self.db.execute(stmt).all())

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
