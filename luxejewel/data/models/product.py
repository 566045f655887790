#luxejewel/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from luxejewel.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    short_description = Column(String(500), nullable=False, default="")

    price = Column(Numeric(10, 2), nullable=False)
    compare_price = Column(Numeric(10, 2), nullable=True)

    images = Column(JSON, nullable=False, default=list)
    featured_image = Column(String(500), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    material = Column(String(100), nullable=False, default="")
    gemstone = Column(String(100), nullable=True)

    inventory_quantity = Column(Integer, nullable=False, default=0)
    rating_average = Column(Numeric(3, 2), nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)

    is_new = Column(Boolean, nullable=False, default=False)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_on_sale = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # 768-dim vector, null until the embedding task has run
    embedding = Column(JSON(none_as_null=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=_now)

    category = relationship("CategoryModel", back_populates="products")
