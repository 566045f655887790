from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from luxejewel.data.database import get_db
from luxejewel.domain.errors import ValidationError
from luxejewel.domain.schemas import SimilarProductOut
from luxejewel.services.recommendation_service import RecommendationService

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


@router.get("", response_model=List[SimilarProductOut])
def recommendations(
    product_id: int | None = Query(None),
    count: int = Query(4),
    db: Session = Depends(get_db),
):
    try:
        return RecommendationService(db).recommend(product_id=product_id, count=count)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
