from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from luxejewel.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text)

    products = relationship("ProductModel", back_populates="category")
