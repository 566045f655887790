#luxejewel/data/models/cart_item.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from luxejewel.data.database import Base


class CartItemModel(Base):
    """Server-side cart row, owned either by a user or by an anonymous session."""

    __tablename__ = "shopping_cart"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    session_id = Column(String(128), nullable=True, index=True)

    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    variant_id = Column(Integer, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)

    added_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)

    product = relationship("ProductModel")
