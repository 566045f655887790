# luxejewel/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from luxejewel.api.deps import require_admin
from luxejewel.data.database import get_db
from luxejewel.domain.errors import ConflictError, NotFoundError, ValidationError
from luxejewel.domain.schemas import (
    AdminOrderOut,
    AnalyticsOut,
    DashboardOut,
    MessageOut,
    OrderOut,
    OrderStatusIn,
    ProductCreate,
    ProductOut,
    ProductUpdate,
)
from luxejewel.services.analytics_service import AnalyticsService
from luxejewel.services.catalog_service import CatalogService
from luxejewel.services.order_service import OrderService

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


#products
@router.get("/products", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return CatalogService(db).list_all_products()


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).create_product(payload)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True)
    try:
        return CatalogService(db).update_product(product_id, changes)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/products/{product_id}", response_model=MessageOut)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        CatalogService(db).delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"message": "Product deleted"}


#orders
@router.get("/orders", response_model=List[AdminOrderOut])
def list_orders(
    search: str | None = Query(None),
    status: str | None = Query(None),
    db: Session = Depends(get_db),
):
    return OrderService(db).search_orders(search=search, status=status)


@router.put("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: OrderStatusIn, db: Session = Depends(get_db)):
    try:
        return OrderService(db).update_status(order_id, payload.status)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


#reports
@router.get("/dashboard", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db)):
    return AnalyticsService(db).dashboard()


@router.get("/analytics", response_model=AnalyticsOut)
def analytics(db: Session = Depends(get_db)):
    return AnalyticsService(db).analytics()
