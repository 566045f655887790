# luxejewel/services/recommendation_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from luxejewel.domain.errors import ValidationError
from luxejewel.domain.schemas import ProductOut
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.services.ai_search_service import serialize_matches
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

RECOMMENDATION_THRESHOLD = 0.3


class RecommendationService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def recommend(self, product_id: int | None = None, count: int = 4) -> List[Dict[str, Any]]:
        """
        Similar products by embedding when the product has one,
        otherwise products from the same category, otherwise featured products.
        """
        if count <= 0:
            raise ValidationError("Count must be greater than 0")

        if product_id is None:
            return [ProductOut.model_validate(p).model_dump() for p in self.repo.list_featured(count)]

        product = self.repo.get_product(product_id)

        if not product:
            return []

        if not product.embedding:
            logger.info(f"No embedding for product {product_id}, falling back to category")
            same_category = self.repo.list_by_category(product.category_id, exclude_id=product_id, limit=count)
            return [ProductOut.model_validate(p).model_dump() for p in same_category]

        #+1, the product itself usually matches best
        matches = self.repo.match_products(
            query_embedding=product.embedding,
            match_threshold=RECOMMENDATION_THRESHOLD,
            match_count=count + 1,
        )
        matches = [(p, s) for p, s in matches if p.id != product_id][:count]
        return serialize_matches(matches)
