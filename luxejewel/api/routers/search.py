# luxejewel/api/routers/search.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from luxejewel.data.database import get_db
from luxejewel.domain.errors import ProviderError, ValidationError
from luxejewel.domain.schemas import AISearchIn, AISearchOut, SearchResultsOut
from luxejewel.services.ai_search_service import AISearchError, AISearchService
from luxejewel.services.catalog_service import CatalogService
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/search", tags=["search"])


def get_ai_search_service(db: Session = Depends(get_db)) -> AISearchService:
    return AISearchService(db)


@router.get("", response_model=SearchResultsOut)
def search_products(
    q: str | None = Query(None),
    category: str | None = Query(None),
    min_price: str | None = Query(None),
    max_price: str | None = Query(None),
    sort_by: str = Query("relevance"),
    db: Session = Depends(get_db),
):
    svc = CatalogService(db)
    try:
        results = svc.search(q=q, category=category, min_price=min_price, max_price=max_price, sort_by=sort_by)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"results": results, "count": len(results)}


@router.post("/ai", response_model=AISearchOut)
def ai_search(payload: AISearchIn, svc: AISearchService = Depends(get_ai_search_service)):
    try:
        return svc.search(image=payload.image, query=payload.query)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AISearchError as e:
        raise HTTPException(status_code=500, detail={"error": str(e), "details": e.details})
    except ProviderError as e:
        logger.error(f"AI search route error: {e}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to process AI search", "details": str(e)},
        )
