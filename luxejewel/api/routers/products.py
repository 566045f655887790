# luxejewel/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from luxejewel.data.database import get_db
from luxejewel.domain.errors import NotFoundError, ValidationError
from luxejewel.domain.schemas import CategoryOut, ProductOut
from luxejewel.services.catalog_service import CatalogService, parse_price

router = APIRouter(prefix="/api", tags=["products"])


@router.get("/products", response_model=List[ProductOut])
def list_products(
    category: str | None = Query(None),
    featured: bool = Query(False),
    min_price: str | None = Query(None),
    max_price: str | None = Query(None),
    sort: str = Query("featured"),
    db: Session = Depends(get_db),
):
    svc = CatalogService(db)
    try:
        return svc.list_products(
            category=category,
            featured=featured,
            min_price=parse_price(min_price),
            max_price=parse_price(max_price),
            sort=sort,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/products/{slug}", response_model=ProductOut)
def get_product(slug: str, db: Session = Depends(get_db)):
    svc = CatalogService(db)
    try:
        return svc.get_product(slug)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()
