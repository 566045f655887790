from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from luxejewel.data.models.review import ReviewModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_review(self, review_id: int) -> ReviewModel | None:
        return self.db.get(ReviewModel, review_id)

    def list_reviews(self, product_id: int | None = None, user_id: int | None = None) -> List[ReviewModel]:
        stmt = select(ReviewModel).options(selectinload(ReviewModel.user))
        if product_id is not None:
            stmt = stmt.where(ReviewModel.product_id == product_id)
        elif user_id is not None:
            stmt = stmt.where(ReviewModel.user_id == user_id)
        stmt = stmt.order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def add_review(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.flush()
        return review

    def delete_review(self, review: ReviewModel) -> None:
        self.db.delete(review)
        self.db.flush()

    def commit(self):
        self.db.commit()
