# luxejewel/services/review_service.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from luxejewel.data.models.review import ReviewModel
from luxejewel.domain.errors import NotFoundError, ValidationError
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.repos.review_repo import ReviewRepo
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


def _valid_rating(rating) -> bool:
    return isinstance(rating, int) and 1 <= rating <= 5


class ReviewService:
    """Reviews CRUD; every write recomputes the product's rating aggregates."""

    def __init__(self, db: Session):
        self.repo = ReviewRepo(db)
        self.products = ProductRepo(db)

    def list_reviews(self, product_id: int | None = None, user_id: int | None = None) -> List[ReviewModel]:
        if product_id is None and user_id is None:
            raise ValidationError("Product ID or User ID is required")
        return self.repo.list_reviews(product_id=product_id, user_id=user_id)

    def create_review(
        self,
        product_id: int | None,
        user_id: int | None,
        rating: int,
        comment: str | None = None,
    ) -> ReviewModel:
        if not product_id or not _valid_rating(rating):
            raise ValidationError("Valid product ID and rating (1-5) are required")

        if not self.products.get_product(product_id):
            raise NotFoundError(f"Product {product_id} not found")

        review = self.repo.add_review(
            ReviewModel(
                product_id=product_id,
                user_id=user_id,
                rating=rating,
                comment=comment or "",
                is_approved=True,
            )
        )
        self.products.refresh_rating(product_id)
        self.repo.commit()

        logger.info(f"Review {review.id} ({rating}/5) added to product {product_id}")
        return review

    def update_review(self, review_id: int | None, rating: int | None, comment: str | None = None) -> ReviewModel:
        if not review_id or not _valid_rating(rating):
            raise ValidationError("Review ID and valid rating (1-5) are required")

        review = self.repo.get_review(review_id)
        if not review:
            raise NotFoundError("Review not found")

        review.rating = rating
        if comment is not None:
            review.comment = comment
        review.updated_at = datetime.now(timezone.utc)

        self.products.refresh_rating(review.product_id)
        self.repo.commit()
        return review

    def delete_review(self, review_id: int | None) -> None:
        if not review_id:
            raise ValidationError("Review ID is required")

        review = self.repo.get_review(review_id)
        if not review:
            raise NotFoundError("Review not found")

        product_id = review.product_id
        self.repo.delete_review(review)
        self.products.refresh_rating(product_id)
        self.repo.commit()
        logger.info(f"Review {review_id} deleted")
