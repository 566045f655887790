from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from luxejewel.data.database import get_db
from luxejewel.domain.errors import NotFoundError, ValidationError
from luxejewel.domain.schemas import MessageOut, ReviewCreate, ReviewOut, ReviewUpdate
from luxejewel.services.review_service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", response_model=List[ReviewOut])
def list_reviews(
    product_id: int | None = Query(None),
    user_id: int | None = Query(None),
    db: Session = Depends(get_db),
):
    try:
        return ReviewService(db).list_reviews(product_id=product_id, user_id=user_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=ReviewOut, status_code=201)
def create_review(payload: ReviewCreate, db: Session = Depends(get_db)):
    try:
        return ReviewService(db).create_review(
            product_id=payload.product_id,
            user_id=payload.user_id,
            rating=payload.rating,
            comment=payload.comment,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("", response_model=ReviewOut)
def update_review(payload: ReviewUpdate, db: Session = Depends(get_db)):
    try:
        return ReviewService(db).update_review(payload.id, payload.rating, payload.comment)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("", response_model=MessageOut)
def delete_review(id: int | None = Query(None), db: Session = Depends(get_db)):
    try:
        ReviewService(db).delete_review(id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Review deleted successfully"}
