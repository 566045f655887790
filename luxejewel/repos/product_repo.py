# luxejewel/repos/product_repo.py
import math
from decimal import Decimal
from typing import List, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from luxejewel.data.models.category import CategoryModel
from luxejewel.data.models.product import ProductModel
from luxejewel.data.models.review import ReviewModel


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b) or not a:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    # ---------- products ----------
    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_by_slug(self, slug: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.slug == slug)
        ).scalar_one_or_none()

    def list_products(
        self,
        active_only: bool = True,
        category_id: int | None = None,
        featured: bool | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> List[ProductModel]:
        stmt = select(ProductModel)
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        if featured is not None:
            stmt = stmt.where(ProductModel.is_featured.is_(featured))
        if min_price is not None:
            stmt = stmt.where(ProductModel.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(ProductModel.price <= max_price)
        return list(self.db.execute(stmt.order_by(ProductModel.id)).scalars().all())

    def keyword_search(self, term: str, limit: int = 8) -> List[ProductModel]:
        pattern = f"%{term}%"
        stmt = (
            select(ProductModel)
            .where(
                ProductModel.is_active.is_(True),
                or_(ProductModel.name.ilike(pattern), ProductModel.description.ilike(pattern)),
            )
            .order_by(ProductModel.id)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_by_category(self, category_id: int | None, exclude_id: int, limit: int) -> List[ProductModel]:
        stmt = select(ProductModel).where(
            ProductModel.is_active.is_(True),
            ProductModel.id != exclude_id,
        )
        if category_id is None:
            stmt = stmt.where(ProductModel.category_id.is_(None))
        else:
            stmt = stmt.where(ProductModel.category_id == category_id)
        return list(self.db.execute(stmt.order_by(ProductModel.id).limit(limit)).scalars().all())

    def list_featured(self, limit: int) -> List[ProductModel]:
        stmt = (
            select(ProductModel)
            .where(ProductModel.is_active.is_(True), ProductModel.is_featured.is_(True))
            .order_by(ProductModel.id)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def match_products(
        self,
        query_embedding: Sequence[float],
        match_threshold: float,
        match_count: int,
        match_category_id: int | None = None,
    ) -> List[Tuple[ProductModel, float]]:
        """
        Vector similarity query: products whose cosine similarity to the
        query embedding exceeds the threshold, best first.
        """
        stmt = select(ProductModel).where(
            ProductModel.is_active.is_(True),
            ProductModel.embedding.is_not(None),
        )
        if match_category_id is not None:
            stmt = stmt.where(ProductModel.category_id == match_category_id)

        scored = []
        for product in self.db.execute(stmt).scalars().all():
            similarity = cosine_similarity(query_embedding, product.embedding or [])
            if similarity > match_threshold:
                scored.append((product, similarity))

        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:match_count]

    def list_for_embedding(self, force: bool = False) -> List[ProductModel]:
        stmt = select(ProductModel)
        if not force:
            stmt = stmt.where(ProductModel.embedding.is_(None))
        return list(self.db.execute(stmt.order_by(ProductModel.id)).scalars().all())

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def refresh_rating(self, product_id: int) -> None:
        """Recompute rating aggregates from approved reviews (no commit)."""
        self.db.flush()
        product = self.get_product(product_id)
        if not product:
            return
        avg, count = self.db.execute(
            select(func.avg(ReviewModel.rating), func.count(ReviewModel.id)).where(
                ReviewModel.product_id == product_id,
                ReviewModel.is_approved.is_(True),
            )
        ).one()
        product.rating_count = count or 0
        product.rating_average = (
            Decimal(str(avg)).quantize(Decimal("0.01")) if avg is not None else Decimal("0")
        )

    # ---------- categories ----------
    def get_category_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def list_categories(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.id)).scalars().all())

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
